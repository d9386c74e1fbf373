# wardrobe_project/services/history_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from datetime import datetime
import uuid
from typing import List, Optional

from ..db import orm_models as models
from ..models.item_models import HistoryAction

async def record_history(
    db: AsyncSession,
    item_id: uuid.UUID,
    action: HistoryAction,
    performed_by: uuid.UUID,
    notes: Optional[str] = None,
) -> models.ItemHistory:
    """Appends one history entry. Entries are never updated or deleted."""
    entry = models.ItemHistory(
        item_id=item_id,
        action=action,
        performed_by=performed_by,
        notes=notes,
    )
    db.add(entry)
    await db.commit()
    return entry

async def get_history_for_item(db: AsyncSession, item_id: uuid.UUID) -> List[models.ItemHistory]:
    """Newest first."""
    stmt = (
        select(models.ItemHistory)
        .where(models.ItemHistory.item_id == item_id)
        .order_by(models.ItemHistory.timestamp.desc())
    )
    return (await db.execute(stmt)).scalars().all()

async def get_history_for_user_since(
    db: AsyncSession, user_id: uuid.UUID, since: datetime
) -> List[models.ItemHistory]:
    stmt = (
        select(models.ItemHistory)
        .where(models.ItemHistory.performed_by == user_id, models.ItemHistory.timestamp >= since)
        .order_by(models.ItemHistory.timestamp.desc())
    )
    return (await db.execute(stmt)).scalars().all()
