from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.models.user import RoleEnum


class LinkToken(BaseModel):
    token: str
    expires_at: datetime


class LinkAccept(BaseModel):
    token: str


class LinkResponse(BaseModel):
    id: int
    instructor_id: int
    user_id: int
    created_at: Optional[datetime] = None
    expires_at: datetime

    class Config:
        from_attributes = True


class LinkedUser(BaseModel):
    """Вторая сторона связи: подопечный для инструктора или инструктор для подопечного."""
    link_id: int
    user_id: int
    username: str
    expires_at: datetime


class RoleResponse(BaseModel):
    message: str
    role: RoleEnum
