# wardrobe_project/apis/auth_routes.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.database import get_db
from ..models.user_models import User, UserCreate, LoginRequest
from ..models.token_models import LoginResponse
from ..core.security import create_access_token, get_client_ip
from ..services import user_service

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"]
)

@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, request: Request, db: AsyncSession = Depends(get_db)):
    """Create a new account. This is a public endpoint."""
    return await user_service.create_user_in_db(db=db, user_in=user_in, ip_address=get_client_ip(request))

@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest, request: Request, db: AsyncSession = Depends(get_db)):
    """Exchange email and password for a bearer token."""
    user = await user_service.login_user(db, credentials.email, credentials.password, get_client_ip(request))
    access_token = create_access_token(data={"sub": user.email}, settings=request.app.state.settings)
    return LoginResponse(access_token=access_token, token_type="bearer", user=User.model_validate(user))
