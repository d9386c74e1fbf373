# wardrobe_project/services/wardrobe_service.py
"""
Item repository.

Each mutation is issued as separate commits: the item row first, then its
history entry, then the audit record. A crash between them can leave an
item without its matching history entry. This is a known gap.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from fastapi import HTTPException, status

from ..models.item_models import (
    HistoryAction, ItemCreate, ItemFilters, ItemHistoryEntry, ItemUpdate, ItemWithHistory, Occasion,
    Item as ItemSchema, LaundryAction, LaundryStatus, UNTITLED_ITEM_NAME,
)
from ..db import orm_models as models
from . import event_logger_service, history_service

logger = logging.getLogger(__name__)

# action -> (new status, history action, increments usage_count)
LAUNDRY_TRANSITIONS = {
    LaundryAction.MARK_LAUNDRY: (LaundryStatus.IN_LAUNDRY, HistoryAction.MARKED_LAUNDRY, True),
    LaundryAction.MARK_CLEAN: (LaundryStatus.CLEAN, HistoryAction.RETURNED, False),
    LaundryAction.MARK_WORN: (LaundryStatus.IN_WARDROBE, HistoryAction.WORN, True),
    LaundryAction.MARK_AWAY: (LaundryStatus.AWAY, HistoryAction.EDITED, False),
}


def _check_owner(db_item: models.Item, user_id: uuid.UUID, verb: str) -> None:
    if db_item.user_id != user_id:
        raise HTTPException(status.HTTP_403_FORBIDDEN, f"User cannot {verb} this item.")


async def create_item(
    db: AsyncSession,
    user_id: uuid.UUID,
    item_in: ItemCreate,
    ip_address: str = "unknown",
    audit_action: str = "CREATE_ITEM",
    audit_payload: Optional[Dict[str, Any]] = None,
) -> models.Item:
    occasions = item_in.occasions if item_in.occasions is not None else [item_in.occasion]
    db_item = models.Item(
        id=uuid.uuid4(),
        user_id=user_id,
        name=item_in.name.strip() or UNTITLED_ITEM_NAME,
        colors=list(item_in.colors),
        type=item_in.type,
        occasion=item_in.occasion,
        occasions=[o.value for o in occasions],
        season=item_in.season,
        filename=item_in.filename,
        object_url=item_in.object_url,
        thumbnail_url=item_in.thumbnail_url,
        processed_url=item_in.processed_url,
        laundry_status=LaundryStatus.IN_WARDROBE,
        usage_count=0,
        is_favorite=False,
    )
    db.add(db_item)
    await db.commit()
    await db.refresh(db_item)
    logger.info(f"Created item {db_item.id} for user {user_id}.")

    await history_service.record_history(db, db_item.id, HistoryAction.CREATED, user_id, notes=f"Added '{db_item.name}'")
    payload = {"itemId": str(db_item.id), **(audit_payload or {"name": db_item.name})}
    await event_logger_service.log_audit(db, user_id, audit_action, payload, ip_address)
    return db_item


async def get_item_by_id(db: AsyncSession, item_id: uuid.UUID) -> Optional[models.Item]:
    result = await db.execute(select(models.Item).filter(models.Item.id == item_id))
    return result.scalars().first()


async def get_item_for_owner(db: AsyncSession, item_id: uuid.UUID, user_id: uuid.UUID) -> Optional[models.Item]:
    """None when the item does not exist; 403 when it belongs to someone else."""
    db_item = await get_item_by_id(db, item_id)
    if not db_item:
        return None
    _check_owner(db_item, user_id, "access")
    return db_item


async def get_item_with_history(db: AsyncSession, item_id: uuid.UUID, user_id: uuid.UUID) -> Optional[ItemWithHistory]:
    db_item = await get_item_for_owner(db, item_id, user_id)
    if not db_item:
        return None
    history = await history_service.get_history_for_item(db, item_id)
    return ItemWithHistory(
        **ItemSchema.model_validate(db_item).model_dump(),
        history=[ItemHistoryEntry.model_validate(entry) for entry in history],
    )


async def list_items_for_user(
    db: AsyncSession, user_id: uuid.UUID, filters: Optional[ItemFilters] = None
) -> List[models.Item]:
    """Owner's items, newest first."""
    stmt = select(models.Item).where(models.Item.user_id == user_id)
    if filters:
        if filters.type:
            stmt = stmt.where(models.Item.type == filters.type)
        if filters.season:
            stmt = stmt.where(models.Item.season == filters.season)
        if filters.laundry_status:
            stmt = stmt.where(models.Item.laundry_status == filters.laundry_status)
        if filters.favorites_only:
            stmt = stmt.where(models.Item.is_favorite.is_(True))
        if filters.search:
            stmt = stmt.where(func.lower(models.Item.name).contains(filters.search.strip().lower()))
    stmt = stmt.order_by(models.Item.created_at.desc())
    return (await db.execute(stmt)).scalars().all()


async def get_items_by_status(db: AsyncSession, user_id: uuid.UUID, laundry_status: LaundryStatus) -> List[models.Item]:
    """Oldest first, so positional choices over the result are stable."""
    stmt = (
        select(models.Item)
        .where(models.Item.user_id == user_id, models.Item.laundry_status == laundry_status)
        .order_by(models.Item.created_at.asc())
    )
    return (await db.execute(stmt)).scalars().all()


async def update_item_for_user(
    db: AsyncSession,
    item_id: uuid.UUID,
    user_id: uuid.UUID,
    item_in: ItemUpdate,
    ip_address: str = "unknown",
) -> Optional[models.Item]:
    db_item = await get_item_by_id(db, item_id)
    if not db_item:
        return None
    _check_owner(db_item, user_id, "update")

    update_data = {k: v for k, v in item_in.model_dump(exclude_unset=True).items() if v is not None}
    if "occasion" in update_data and "occasions" not in update_data:
        # Primary occasion replaces the old one in the list and leads it
        replaced = {Occasion(db_item.occasion), update_data["occasion"]}
        rest = [Occasion(o) for o in (db_item.occasions or []) if Occasion(o) not in replaced]
        update_data["occasions"] = [update_data["occasion"], *rest]
    elif update_data.get("occasions") and "occasion" not in update_data:
        if Occasion(db_item.occasion) not in update_data["occasions"]:
            update_data["occasion"] = update_data["occasions"][0]
    was_favorite = db_item.is_favorite
    changed: Dict[str, Any] = {}
    for field, value in update_data.items():
        if field == "occasions":
            value = [o.value for o in value]
        elif field == "name":
            value = value.strip() or UNTITLED_ITEM_NAME
        setattr(db_item, field, value)
        changed[field] = value

    await db.commit()
    await db.refresh(db_item)

    favorite_changed = "is_favorite" in changed and changed["is_favorite"] != was_favorite
    other_fields = [f for f in changed if f != "is_favorite"]
    if favorite_changed:
        action = HistoryAction.FAVORITED if db_item.is_favorite else HistoryAction.UNFAVORITED
        await history_service.record_history(db, db_item.id, action, user_id)
    if other_fields or not favorite_changed:
        await history_service.record_history(
            db, db_item.id, HistoryAction.EDITED, user_id,
            notes=f"Updated: {', '.join(other_fields)}" if other_fields else None,
        )
    await event_logger_service.log_audit(
        db, user_id, "UPDATE_ITEM", {"itemId": str(db_item.id), "changes": changed}, ip_address
    )
    return db_item


async def delete_item_for_user(
    db: AsyncSession, item_id: uuid.UUID, user_id: uuid.UUID, ip_address: str = "unknown"
) -> bool:
    """False when the item does not exist. Stored images are left in place."""
    db_item = await get_item_by_id(db, item_id)
    if not db_item:
        return False
    _check_owner(db_item, user_id, "delete")

    name = db_item.name
    await db.execute(delete(models.OutfitItem).where(models.OutfitItem.item_id == item_id))
    await db.delete(db_item)
    await db.commit()
    logger.info(f"Deleted item {item_id} for user {user_id}.")

    await history_service.record_history(db, item_id, HistoryAction.DELETED, user_id, notes=f"Deleted '{name}'")
    await event_logger_service.log_audit(db, user_id, "DELETE_ITEM", {"itemId": str(item_id), "name": name}, ip_address)
    return True


async def apply_laundry_action(
    db: AsyncSession,
    item_id: uuid.UUID,
    user_id: uuid.UUID,
    action: LaundryAction,
    ip_address: str = "unknown",
) -> Optional[models.Item]:
    """
    Moves the item to the action's target status. Any status accepts any
    action; re-applying an action still records history and audit.
    """
    db_item = await get_item_by_id(db, item_id)
    if not db_item:
        return None
    _check_owner(db_item, user_id, "update")

    new_status, history_action, counts_as_use = LAUNDRY_TRANSITIONS[action]
    previous_status = db_item.laundry_status
    db_item.laundry_status = new_status
    if counts_as_use:
        db_item.usage_count = (db_item.usage_count or 0) + 1
    await db.commit()
    await db.refresh(db_item)

    await history_service.record_history(
        db, db_item.id, history_action, user_id,
        notes=f"{previous_status.value} -> {new_status.value}",
    )
    await event_logger_service.log_audit(
        db, user_id, f"LAUNDRY_{action.name}",
        {"itemId": str(db_item.id), "from": previous_status.value, "to": new_status.value},
        ip_address,
    )
    return db_item


async def get_items_by_ids(db: AsyncSession, user_id: uuid.UUID, item_ids: List[uuid.UUID]) -> List[models.Item]:
    if not item_ids:
        return []
    stmt = select(models.Item).where(models.Item.user_id == user_id, models.Item.id.in_(item_ids))
    return (await db.execute(stmt)).scalars().all()
