from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from app.models.user import RoleEnum

class UserLogin(BaseModel):
    username: str
    password: str

class UserRegister(BaseModel):
    username: str = Field(min_length=3, max_length=30)
    email: Optional[EmailStr] = None
    password: str = Field(min_length=6)

class AuthResponse(BaseModel):
    access_token: str
    token_type: str

class UserResponse(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    role: RoleEnum

    class Config:
        from_attributes = True
