# backend/brain/schemas/user.py

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

class UserBase(BaseModel):
    email: EmailStr

class User(UserBase):
    id: str

class ProfileUpdate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)

class Profile(BaseModel):
    id: str
    username: str
    created_at: datetime
    content_count: int = 0
