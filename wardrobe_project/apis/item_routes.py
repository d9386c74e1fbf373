# wardrobe_project/apis/item_routes.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from typing import List
import uuid
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.database import get_db
from ..db import orm_models as models
from ..models.item_models import Item, ItemCreate, ItemFilters, ItemUpdate, ItemWithHistory, LaundryRequest
from ..core.security import get_current_user, get_client_ip
from ..services import wardrobe_service

router = APIRouter(
    prefix="/items",
    tags=["Wardrobe Items"]
)

def _not_found(item_id: uuid.UUID) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {item_id} not found.")

@router.get("", response_model=List[Item])
async def list_items(
    filters: ItemFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """List the caller's items, newest first."""
    return await wardrobe_service.list_items_for_user(db, current_user.id, filters)

@router.post("", response_model=Item, status_code=status.HTTP_201_CREATED)
async def create_item(
    item_in: ItemCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Create an item from already-stored media (no image processing)."""
    return await wardrobe_service.create_item(db, current_user.id, item_in, ip_address=get_client_ip(request))

@router.get("/{item_id}", response_model=ItemWithHistory)
async def get_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    item = await wardrobe_service.get_item_with_history(db, item_id, current_user.id)
    if item is None:
        raise _not_found(item_id)
    return item

@router.put("/{item_id}", response_model=Item)
async def update_item(
    item_id: uuid.UUID,
    item_in: ItemUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    item = await wardrobe_service.update_item_for_user(db, item_id, current_user.id, item_in, get_client_ip(request))
    if item is None:
        raise _not_found(item_id)
    return item

@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    if not await wardrobe_service.delete_item_for_user(db, item_id, current_user.id, get_client_ip(request)):
        raise _not_found(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.post("/{item_id}/laundry", response_model=Item)
async def update_laundry_status(
    item_id: uuid.UUID,
    laundry_in: LaundryRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Apply a laundry action (mark_laundry, mark_clean, mark_worn, mark_away)."""
    item = await wardrobe_service.apply_laundry_action(
        db, item_id, current_user.id, laundry_in.action, get_client_ip(request)
    )
    if item is None:
        raise _not_found(item_id)
    return item
