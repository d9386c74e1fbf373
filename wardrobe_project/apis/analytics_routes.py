# wardrobe_project/apis/analytics_routes.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.database import get_db
from ..db import orm_models as models
from ..models import analytics_models as schemas
from ..core.security import get_current_user
from ..services import analytics_service

router = APIRouter(
    prefix="/analytics",
    tags=["Wardrobe Analytics"]
)

@router.get("", response_model=schemas.WardrobeAnalytics)
async def get_wardrobe_analytics_endpoint(
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Usage, distribution and recent-activity analytics for the caller's wardrobe."""
    return await analytics_service.get_wardrobe_analytics(db, user_id=current_user.id)
