# wardrobe_project/models/user_models.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from enum import Enum
from datetime import datetime
import uuid

class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"

# --- User Models ---
class UserBase(BaseModel):
    email: EmailStr = Field(..., examples=["user@example.com"])
    name: Optional[str] = Field(None, max_length=100, examples=["Alex"])

class UserCreate(UserBase):
    password: str = Field(..., min_length=6, examples=["strongpassword123"])

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class User(UserBase): # This model represents a user object as returned by the API
    id: uuid.UUID
    role: Role = Role.USER
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True # Allows creating Pydantic model from ORM objects
