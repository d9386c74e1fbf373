# wardrobe_project/services/suggestion_service.py
import logging
import uuid
from typing import Any, Iterable, List, Optional, Set

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.ai_provider import ClassificationProvider
from ..core.response_parsing import parse_json_array
from ..models.item_models import GarmentType, LaundryStatus, Occasion, Season
from ..models.outfit_models import OutfitSuggestion, SuggestionRequest, SuggestionResponse
from . import wardrobe_service

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3
MIN_CANDIDATE_ITEMS = 2


def _of_type(items: Iterable[Any], garment_type: GarmentType) -> List[Any]:
    return [item for item in items if GarmentType(item.type) == garment_type]


def _format_colors(colors: Optional[List[str]]) -> str:
    return ", ".join(colors) if colors else "Unknown"


def generate_fallback_outfits(items: List[Any], limit: int = MAX_SUGGESTIONS) -> List[OutfitSuggestion]:
    """
    Deterministic pairings: first top + first bottom (plus outerwear when
    there is one), the first dress on its own, then the second top + bottom.
    """
    tops = _of_type(items, GarmentType.TOP)
    bottoms = _of_type(items, GarmentType.BOTTOM)
    dresses = _of_type(items, GarmentType.DRESS)
    outerwear = _of_type(items, GarmentType.OUTERWEAR)

    outfits: List[OutfitSuggestion] = []
    if tops and bottoms:
        item_ids = [str(tops[0].id), str(bottoms[0].id)]
        if outerwear:
            item_ids.append(str(outerwear[0].id))
        outfits.append(OutfitSuggestion(
            name="Classic Casual",
            description="A comfortable and versatile everyday outfit",
            item_ids=item_ids,
            reasoning="Simple combination that works for most casual occasions",
        ))
    if dresses:
        outfits.append(OutfitSuggestion(
            name="Easy Dress",
            description="A simple one-piece outfit",
            item_ids=[str(dresses[0].id)],
            reasoning="Effortless style with minimal coordination needed",
        ))
    if len(tops) > 1 and len(bottoms) > 1:
        outfits.append(OutfitSuggestion(
            name="Alternative Mix",
            description="A different combination from your wardrobe",
            item_ids=[str(tops[1].id), str(bottoms[1].id)],
            reasoning="Mixing different pieces for variety",
        ))
    return outfits[:limit]


def build_suggestion_prompt(items: List[Any], request: SuggestionRequest) -> str:
    item_lines = "\n".join(
        f'- Item ID: "{item.id}", Type: {GarmentType(item.type).value}, Colors: {_format_colors(item.colors)}, '
        f"Occasion: {Occasion(item.occasion).value}, Season: {Season(item.season).value}"
        for item in items
    )
    occasion = request.occasion.value if request.occasion else Occasion.CASUAL.value
    season = request.season.value if request.season else Season.ALL_SEASON.value
    return f"""You are a personal stylist. Suggest {MAX_SUGGESTIONS} complete outfits using ONLY the wardrobe items below.

Available items:
{item_lines}

CONTEXT:
- Occasion: {occasion}
- Season: {season}
- Weather: {request.weather or 'Not specified'}
- Style Preference: {request.style or 'Not specified'}

For each outfit:
1. Include 2-4 items that complement each other (a dress may stand alone).
2. Consider color coordination, occasion appropriateness and seasonal suitability.
3. Use the exact item IDs from the list above.

Return ONLY a JSON array with exactly {MAX_SUGGESTIONS} objects in this format:
[
  {{
    "name": "Outfit Name",
    "description": "Brief description of the outfit",
    "itemIds": ["item_id_1", "item_id_2"],
    "reasoning": "Why this outfit works well"
  }}
]"""


def parse_ai_suggestions(text: str, valid_ids: Set[str]) -> List[OutfitSuggestion]:
    """
    Lenient parse of the model answer. Unknown ids are dropped and proposals
    left without any known item are discarded. Anything unparseable yields [].
    """
    data = parse_json_array(text)
    if data is None:
        logger.warning("AI suggestion response did not contain a JSON array.")
        return []

    suggestions: List[OutfitSuggestion] = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        raw_ids = entry.get("itemIds", entry.get("item_ids"))
        if not isinstance(raw_ids, list):
            continue
        item_ids: List[str] = []
        for raw_id in raw_ids:
            item_id = str(raw_id).strip()
            if item_id in valid_ids and item_id not in item_ids:
                item_ids.append(item_id)
        if not item_ids:
            continue
        suggestions.append(OutfitSuggestion(
            name=str(entry.get("name") or ""),
            description=str(entry.get("description") or ""),
            item_ids=item_ids,
            reasoning=str(entry.get("reasoning") or ""),
        ))
    return suggestions


def merge_suggestions(
    primary: List[OutfitSuggestion], backfill: List[OutfitSuggestion], limit: int = MAX_SUGGESTIONS
) -> List[OutfitSuggestion]:
    """Primary first, then backfill, skipping item sets already present."""
    merged: List[OutfitSuggestion] = []
    seen = set()
    for suggestion in list(primary) + list(backfill):
        key = frozenset(suggestion.item_ids)
        if key in seen:
            continue
        seen.add(key)
        merged.append(suggestion)
        if len(merged) == limit:
            break
    return merged


async def suggest_outfits(
    db: AsyncSession,
    provider: Optional[ClassificationProvider],
    user_id: uuid.UUID,
    request: Optional[SuggestionRequest] = None,
) -> SuggestionResponse:
    request = request or SuggestionRequest()
    items = await wardrobe_service.get_items_by_status(db, user_id, LaundryStatus.IN_WARDROBE)
    if len(items) < MIN_CANDIDATE_ITEMS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Not enough items available in wardrobe for a suggestion.",
        )

    fallback_outfits = generate_fallback_outfits(items)
    if provider is None:
        logger.warning("No AI provider configured; returning rule-based outfit suggestions.")
        return SuggestionResponse(suggestions=fallback_outfits, fallback=True)

    try:
        text = await provider.generate_text(build_suggestion_prompt(items, request))
    except Exception as e:
        logger.warning(f"AI outfit generation failed, returning rule-based suggestions. Error: {e}")
        return SuggestionResponse(suggestions=fallback_outfits, fallback=True)

    proposals = parse_ai_suggestions(text, {str(item.id) for item in items})
    if len(proposals) < MAX_SUGGESTIONS:
        logger.info(f"AI returned {len(proposals)} usable outfits; backfilling with rule-based pairings.")
    return SuggestionResponse(suggestions=merge_suggestions(proposals, fallback_outfits), fallback=False)
