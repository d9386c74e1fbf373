# wardrobe_project/services/user_service.py
import uuid
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fastapi import HTTPException, status

from ..models.user_models import UserCreate
from ..db import orm_models as models
from ..core.security import get_password_hash, verify_password
from . import event_logger_service

# --- AUTHENTICATION SERVICE ---
async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[models.User]:
    """Authenticates a user by checking email and verifying password."""
    user = await get_user_by_email(db, email=email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user

async def login_user(db: AsyncSession, email: str, password: str, ip_address: str = "unknown") -> models.User:
    user = await authenticate_user(db, email, password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    await event_logger_service.log_audit(db, user.id, "USER_LOGIN", {"email": user.email}, ip_address)
    return user

# --- CRUD SERVICES ---
async def get_user_by_email(db: AsyncSession, email: str) -> Optional[models.User]:
    """Retrieves a user by their email (case-insensitive) from the database."""
    result = await db.execute(select(models.User).filter(models.User.email == email.strip().lower()))
    return result.scalars().first()

async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> Optional[models.User]:
    """Retrieves a user by their ID from the database."""
    result = await db.execute(select(models.User).filter(models.User.id == user_id))
    return result.scalars().first()

async def create_user_in_db(db: AsyncSession, user_in: UserCreate, ip_address: str = "unknown") -> models.User:
    """Creates a new user in the database with a hashed password."""
    email = user_in.email.strip().lower()
    if await get_user_by_email(db, email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered."
        )

    db_user = models.User(
        email=email,
        name=user_in.name,
        hashed_password=get_password_hash(user_in.password),
        is_active=True
    )
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    await event_logger_service.log_audit(db, db_user.id, "USER_REGISTER", {"email": email}, ip_address)
    return db_user

async def get_all_users_in_db(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[models.User]:
    """Retrieves all users from the database with pagination."""
    result = await db.execute(select(models.User).order_by(models.User.created_at).offset(skip).limit(limit))
    return result.scalars().all()
