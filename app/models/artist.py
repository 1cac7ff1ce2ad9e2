from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class ArtistRecord(BaseModel):
    """Artiste exposé (collection `artists`)"""
    id: str
    artist_name: str = Field("", alias="artistName")
    artist_bio: str = Field("", alias="artistBio")
    facebook_profile: Optional[str] = Field(None, alias="facebookProfile")
    twitter_profile: Optional[str] = Field(None, alias="twitterProfile")
    instagram_profile: Optional[str] = Field(None, alias="instagramProfile")
    other_profile: Optional[str] = Field(None, alias="otherProfile")
    exhibition_name: str = Field("", alias="exhibitionName")
    exhibition_start_date: Optional[str] = Field(None, alias="exhibitionStartDate")  # "YYYY-MM-DD"
    exhibition_end_date: Optional[str] = Field(None, alias="exhibitionEndDate")
    artist_photo_url: Optional[str] = Field(None, alias="artistPhotoURL")
    exemplary_works_urls: List[str] = Field(default_factory=list, alias="exemplaryWorksURLs")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True
