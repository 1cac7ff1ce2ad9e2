from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ReelRecord(BaseModel):
    """Reel vidéo destiné aux réseaux sociaux (collection `reels`)"""
    id: str
    reel_name: str = Field("", alias="reelName")
    reel_description: str = Field("", alias="reelDescription")
    reel_video_url: Optional[str] = Field(None, alias="reelVideoUrl")
    reel_size: Optional[float] = Field(None, alias="reelSize")  # en Mo
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True


class VideoRecord(BaseModel):
    """Vidéo du site (collection `videos`)"""
    id: str
    video_name: str = Field("", alias="videoName")
    video_description: str = Field("", alias="videoDescription")
    video_url: Optional[str] = Field(None, alias="videoUrl")
    video_size: Optional[float] = Field(None, alias="videoSize")  # en Mo
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True
