# wardrobe_project/models/token_models.py
from pydantic import BaseModel
from typing import Optional

from .user_models import User

class Token(BaseModel):
    access_token: str
    token_type: str

class LoginResponse(Token):
    user: User

class TokenData(BaseModel):
    sub: Optional[str] = None # 'sub' is the standard JWT subject claim
