# wardrobe_project/apis/user_routes.py
from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.database import get_db
from ..db import orm_models as models
from ..models.user_models import User
from ..core.security import get_current_user, require_admin
from ..services import user_service

router = APIRouter(
    prefix="/users",
    tags=["Users"]
)

@router.get("/me", response_model=User)
async def read_users_me(current_user: models.User = Depends(get_current_user)):
    """Retrieve profile of the current logged-in user."""
    return current_user

@router.get("", response_model=List[User])
async def list_users(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    """Admin only."""
    return await user_service.get_all_users_in_db(db, skip=skip, limit=limit)
