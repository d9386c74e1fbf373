# wardrobe_project/services/analytics_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from collections import Counter
from datetime import datetime, timedelta, timezone
import uuid

from ..db import orm_models as models
from ..models import analytics_models as schemas
from ..models.item_models import LaundryStatus
from . import history_service

ACTIVITY_WINDOW_DAYS = 30
LATEST_ACTIVITY_LIMIT = 10
MOST_WORN_LIMIT = 5
UNDERUSED_THRESHOLD = 3


async def _count_by(db: AsyncSession, user_id: uuid.UUID, column) -> dict:
    stmt = select(column, func.count(models.Item.id)).where(models.Item.user_id == user_id).group_by(column)
    rows = (await db.execute(stmt)).all()
    return {getattr(key, "value", key): count for key, count in rows}


async def get_wardrobe_analytics(db: AsyncSession, user_id: uuid.UUID) -> schemas.WardrobeAnalytics:
    """Summary, usage rankings, attribute distributions and the last 30 days of item history."""
    stmt = select(models.Item).where(models.Item.user_id == user_id)
    items = (await db.execute(stmt)).scalars().all()

    total_items = len(items)
    total_usage = sum(item.usage_count or 0 for item in items)
    summary = schemas.AnalyticsSummary(
        total_items=total_items,
        favorite_items=sum(1 for item in items if item.is_favorite),
        in_laundry=sum(1 for item in items if item.laundry_status == LaundryStatus.IN_LAUNDRY),
        total_usage=total_usage,
        average_usage=round(total_usage / total_items, 2) if total_items else 0.0,
    )

    by_usage = sorted(items, key=lambda item: item.usage_count or 0, reverse=True)
    most_worn = [schemas.ItemUsage.model_validate(item) for item in by_usage if item.usage_count][:MOST_WORN_LIMIT]
    underused = [
        schemas.ItemUsage.model_validate(item) for item in items
        if 0 < (item.usage_count or 0) < UNDERUSED_THRESHOLD
    ]
    never_worn = [schemas.ItemUsage.model_validate(item) for item in items if not item.usage_count]

    occasion_counts = Counter()
    for item in items:
        for occasion in item.occasions or [item.occasion.value]:
            occasion_counts[occasion] += 1

    distributions = schemas.Distributions(
        by_type=await _count_by(db, user_id, models.Item.type),
        by_season=await _count_by(db, user_id, models.Item.season),
        by_occasion=dict(occasion_counts),
        by_laundry_status=await _count_by(db, user_id, models.Item.laundry_status),
    )

    since = datetime.now(timezone.utc) - timedelta(days=ACTIVITY_WINDOW_DAYS)
    history = await history_service.get_history_for_user_since(db, user_id, since)
    recent_activity = schemas.RecentActivity(
        days=ACTIVITY_WINDOW_DAYS,
        action_counts=dict(Counter(entry.action.value for entry in history)),
        latest=[schemas.HistoryActivity.model_validate(entry) for entry in history[:LATEST_ACTIVITY_LIMIT]],
    )

    return schemas.WardrobeAnalytics(
        summary=summary,
        most_worn=most_worn,
        underused=underused,
        never_worn=never_worn,
        distributions=distributions,
        recent_activity=recent_activity,
    )
