from pydantic import BaseModel, Field
from typing import Optional


class AdminLogin(BaseModel):
    # Alias ("admin", "gallery"...) ou email complet
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SessionInfo(BaseModel):
    """État de session renvoyé au frontend"""
    is_authenticated: bool = Field(..., alias="isAuthenticated")
    user_email: Optional[str] = Field(None, alias="userEmail")

    class Config:
        populate_by_name = True

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)
