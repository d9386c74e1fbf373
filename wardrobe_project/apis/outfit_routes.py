# wardrobe_project/apis/outfit_routes.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from typing import List
import uuid
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.database import get_db
from ..db import orm_models as models
from ..models.outfit_models import Outfit, OutfitCreate, OutfitUpdate
from ..core.security import get_current_user, get_client_ip
from ..services import outfit_service

router = APIRouter(
    prefix="/outfits",
    tags=["Outfits"]
)

def _not_found(outfit_id: uuid.UUID) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Outfit {outfit_id} not found.")

@router.get("", response_model=List[Outfit])
async def list_outfits(db: AsyncSession = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    return await outfit_service.list_outfits_for_user(db, current_user.id)

@router.post("", response_model=Outfit, status_code=status.HTTP_201_CREATED)
async def create_outfit(
    outfit_in: OutfitCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    return await outfit_service.create_outfit(db, current_user.id, outfit_in, get_client_ip(request))

@router.get("/{outfit_id}", response_model=Outfit)
async def get_outfit(
    outfit_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    outfit = await outfit_service.get_outfit_for_owner(db, outfit_id, current_user.id)
    if outfit is None:
        raise _not_found(outfit_id)
    return outfit

@router.put("/{outfit_id}", response_model=Outfit)
async def update_outfit(
    outfit_id: uuid.UUID,
    outfit_in: OutfitUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    outfit = await outfit_service.update_outfit_for_user(db, outfit_id, current_user.id, outfit_in, get_client_ip(request))
    if outfit is None:
        raise _not_found(outfit_id)
    return outfit

@router.delete("/{outfit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_outfit(
    outfit_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    if not await outfit_service.delete_outfit_for_user(db, outfit_id, current_user.id, get_client_ip(request)):
        raise _not_found(outfit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
