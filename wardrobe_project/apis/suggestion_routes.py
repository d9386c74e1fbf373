# wardrobe_project/apis/suggestion_routes.py
from fastapi import APIRouter, Body, Depends
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.database import get_db
from ..db import orm_models as models
from ..models.outfit_models import SuggestionRequest, SuggestionResponse
from ..core.ai_provider import ClassificationProvider
from ..core.resources import get_provider
from ..core.security import get_current_user
from ..services import suggestion_service

router = APIRouter(
    prefix="/outfits",
    tags=["Outfit Suggestions"]
)

@router.post("/suggest", response_model=SuggestionResponse)
async def suggest_outfits(
    context: Optional[SuggestionRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    provider: Optional[ClassificationProvider] = Depends(get_provider),
    current_user: models.User = Depends(get_current_user),
):
    """
    Suggests up to three outfits from the items currently in the wardrobe.
    When the AI provider is unavailable the rule-based pairings are returned
    with `fallback: true`.
    """
    return await suggestion_service.suggest_outfits(db, provider, current_user.id, context)
