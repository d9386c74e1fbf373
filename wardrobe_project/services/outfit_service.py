# wardrobe_project/services/outfit_service.py
import uuid
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from ..db import orm_models as models
from ..models.outfit_models import OutfitCreate, OutfitItemRef, OutfitUpdate
from . import event_logger_service, wardrobe_service


async def _validate_item_refs(db: AsyncSession, user_id: uuid.UUID, refs: List[OutfitItemRef]) -> None:
    """Every referenced item must exist and belong to the caller."""
    wanted = {ref.item_id for ref in refs}
    owned = {item.id for item in await wardrobe_service.get_items_by_ids(db, user_id, list(wanted))}
    missing = wanted - owned
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown or foreign item ids: {', '.join(sorted(str(i) for i in missing))}",
        )


def _build_outfit_items(refs: List[OutfitItemRef]) -> List[models.OutfitItem]:
    return [models.OutfitItem(item_id=ref.item_id, position=ref.position) for ref in refs]


async def get_outfit_by_id(db: AsyncSession, outfit_id: uuid.UUID) -> Optional[models.Outfit]:
    result = await db.execute(select(models.Outfit).filter(models.Outfit.id == outfit_id))
    return result.scalars().first()


async def get_outfit_for_owner(db: AsyncSession, outfit_id: uuid.UUID, user_id: uuid.UUID) -> Optional[models.Outfit]:
    db_outfit = await get_outfit_by_id(db, outfit_id)
    if not db_outfit:
        return None
    if db_outfit.user_id != user_id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "User cannot access this outfit.")
    return db_outfit


async def list_outfits_for_user(db: AsyncSession, user_id: uuid.UUID) -> List[models.Outfit]:
    stmt = (
        select(models.Outfit)
        .where(models.Outfit.user_id == user_id)
        .order_by(models.Outfit.created_at.desc())
    )
    return (await db.execute(stmt)).scalars().all()


async def create_outfit(
    db: AsyncSession, user_id: uuid.UUID, outfit_in: OutfitCreate, ip_address: str = "unknown"
) -> models.Outfit:
    await _validate_item_refs(db, user_id, outfit_in.items)
    db_outfit = models.Outfit(
        id=uuid.uuid4(),
        user_id=user_id,
        name=outfit_in.name,
        description=outfit_in.description,
        thumbnail_url=outfit_in.thumbnail_url,
        is_public=outfit_in.is_public,
        items=_build_outfit_items(outfit_in.items),
    )
    db.add(db_outfit)
    await db.commit()
    await db.refresh(db_outfit, attribute_names=["items"])
    await event_logger_service.log_audit(
        db, user_id, "CREATE_OUTFIT",
        {"outfitId": str(db_outfit.id), "name": db_outfit.name, "itemCount": len(outfit_in.items)},
        ip_address,
    )
    return db_outfit


async def update_outfit_for_user(
    db: AsyncSession,
    outfit_id: uuid.UUID,
    user_id: uuid.UUID,
    outfit_in: OutfitUpdate,
    ip_address: str = "unknown",
) -> Optional[models.Outfit]:
    db_outfit = await get_outfit_by_id(db, outfit_id)
    if not db_outfit:
        return None
    if db_outfit.user_id != user_id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "User cannot update this outfit.")

    update_data = outfit_in.model_dump(exclude_unset=True)
    refs = update_data.pop("items", None)
    if refs is not None:
        refs = outfit_in.items
        await _validate_item_refs(db, user_id, refs)
        db_outfit.items = _build_outfit_items(refs)
    for field, value in update_data.items():
        if value is not None:
            setattr(db_outfit, field, value)

    await db.commit()
    await db.refresh(db_outfit, attribute_names=["items"])
    await event_logger_service.log_audit(
        db, user_id, "UPDATE_OUTFIT",
        {"outfitId": str(db_outfit.id), "fields": sorted(outfit_in.model_dump(exclude_unset=True))},
        ip_address,
    )
    return db_outfit


async def delete_outfit_for_user(
    db: AsyncSession, outfit_id: uuid.UUID, user_id: uuid.UUID, ip_address: str = "unknown"
) -> bool:
    db_outfit = await get_outfit_by_id(db, outfit_id)
    if not db_outfit:
        return False
    if db_outfit.user_id != user_id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "User cannot delete this outfit.")

    name = db_outfit.name
    await db.delete(db_outfit)
    await db.commit()
    await event_logger_service.log_audit(
        db, user_id, "DELETE_OUTFIT", {"outfitId": str(outfit_id), "name": name}, ip_address
    )
    return True
