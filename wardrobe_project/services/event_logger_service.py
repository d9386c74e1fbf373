# wardrobe_project/services/event_logger_service.py
import json
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from ..db import orm_models as models
import logging

logger = logging.getLogger(__name__)

async def log_audit(
    db: AsyncSession,
    user_id: Optional[uuid.UUID],
    action: str,
    payload: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> Optional[models.AuditLog]:
    """
    Appends an audit record in its own commit.
    Failures are logged and rolled back, never raised to the caller.
    """
    logger.info(f"Logging audit event '{action}' for user {user_id}.")
    try:
        entry = models.AuditLog(
            user_id=user_id,
            action=action,
            payload=json.dumps(payload, default=str) if payload is not None else None,
            ip_address=ip_address or "unknown",
        )
        db.add(entry)
        await db.commit()
        return entry
    except Exception as e:
        logger.error(f"Failed to log audit event '{action}': {e}", exc_info=True)
        await db.rollback()  # Ensure transaction is rolled back on error
        return None

async def get_audit_logs_for_user(db: AsyncSession, user_id: uuid.UUID, limit: int = 100) -> List[models.AuditLog]:
    stmt = (
        select(models.AuditLog)
        .where(models.AuditLog.user_id == user_id)
        .order_by(models.AuditLog.timestamp.desc())
        .limit(limit)
    )
    return (await db.execute(stmt)).scalars().all()
