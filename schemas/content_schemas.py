from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class GoogleTokenRequest(BaseModel):
    token: Optional[str] = None


class GoogleUser(BaseModel):
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


class GoogleSessionResponse(BaseModel):
    message: str
    user: Optional[GoogleUser] = None


class ContentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    content_id: int
    title: str
    description: Optional[str] = None
    link: Optional[str] = None
    thumbnail_url: Optional[str] = None
    published_date: datetime


class ContentPage(BaseModel):
    contents: list[ContentOut]
    total: int
