# wardrobe_project/core/ai_provider.py
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.item_models import GarmentType, Occasion, Season
from .response_parsing import parse_choice, parse_colors, parse_name

logger = logging.getLogger(__name__)

# Safe defaults returned whenever classification cannot produce a value.
DEFAULT_GARMENT_TYPE = GarmentType.TOP
DEFAULT_OCCASION = Occasion.CASUAL
DEFAULT_SEASON = Season.ALL_SEASON
DEFAULT_COLORS = ("Unknown",)
DEFAULT_ITEM_NAME = "Clothing Item"

GARMENT_TYPE_SYNONYMS = {
    "T-SHIRT": "TOP", "TSHIRT": "TOP", "SHIRT": "TOP", "BLOUSE": "TOP",
    "SWEATER": "TOP", "HOODIE": "TOP",
    "JEAN": "BOTTOM", "PANT": "BOTTOM", "TROUSER": "BOTTOM", "SHORT": "BOTTOM", "SKIRT": "BOTTOM",
    "JACKET": "OUTERWEAR", "COAT": "OUTERWEAR", "BLAZER": "OUTERWEAR",
    "SNEAKER": "SHOES", "BOOT": "SHOES", "SANDAL": "SHOES", "HEEL": "SHOES",
    "BAG": "ACCESSORY", "HAT": "ACCESSORY", "BELT": "ACCESSORY",
    "SWIMSUIT": "SWIMWEAR", "BIKINI": "SWIMWEAR",
    "ATHLETIC": "SPORTSWEAR", "SPORT": "SPORTSWEAR", "GYM": "SPORTSWEAR",
}

COLORS_PROMPT = """Analyze this clothing image and extract the main colors of the garment itself, not the background.
Use common color names (e.g. "Navy Blue", "White", "Olive Green").
Return ONLY a JSON array of 1 to 4 color name strings, e.g. ["Blue", "White"]."""

TYPE_PROMPT = f"""Identify the type of clothing item in this image using this guide:
- TOP: t-shirts, shirts, blouses, sweaters, hoodies, tank tops
- BOTTOM: jeans, trousers, pants, shorts, skirts, leggings
- DRESS: dresses, jumpsuits, rompers and other one-piece garments
- OUTERWEAR: jackets, coats, blazers, cardigans worn over other clothes
- SHOES: sneakers, boots, sandals, heels, loafers
- ACCESSORY: bags, hats, belts, scarves, jewellery, sunglasses
- UNDERWEAR: underwear, bras, socks, sleepwear
- SWIMWEAR: swimsuits, bikinis, swim trunks
- SPORTSWEAR: athletic and gym clothing
Return ONLY one of these exact values: {', '.join(t.value for t in GarmentType)}.
Your response must be only the single word, with no other text."""

OCCASION_PROMPT = f"""Based on this clothing item, suggest the most appropriate occasion.
Return ONLY one of these exact values: {', '.join(o.value for o in Occasion)}.
Your response must be only the single value, with no other text."""

SEASON_PROMPT = f"""Based on this clothing item, suggest the most appropriate season.
Return ONLY one of these exact values: {', '.join(s.value for s in Season)}.
Your response must be only the single value, with no other text."""

NAME_PROMPT = """Look at this clothing item and generate a short descriptive name in the form
"[Color] [Material/Style] [Item Type]", e.g. "White Cotton T-Shirt", "Blue Denim Jeans", "Black Leather Jacket".
Return ONLY the name, no additional text."""


class AIProviderError(Exception):
    """Raised by a provider when a call fails for good (non-retryable error or retries exhausted)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ClassificationProvider(ABC):
    """
    Capability set of an AI backend.

    Concrete providers implement the two transport primitives. The five
    classification operations built on top of them never raise: any failure
    or unusable answer yields the documented default for that attribute.
    """

    name = "provider"

    @abstractmethod
    async def complete_with_image(self, prompt: str, image: bytes, mime_type: str) -> str:
        """Sends a prompt together with an inline image and returns the text answer."""

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Text-only completion. Raises AIProviderError on failure."""

    async def _ask(self, operation: str, prompt: str, image: bytes, mime_type: str) -> Optional[str]:
        try:
            return await self.complete_with_image(prompt, image, mime_type)
        except Exception as e:
            logger.warning(f"{self.name}: {operation} failed, using default. Error: {e}")
            return None

    async def extract_colors(self, image: bytes, mime_type: str) -> List[str]:
        text = await self._ask("color extraction", COLORS_PROMPT, image, mime_type)
        if text is None:
            return list(DEFAULT_COLORS)
        return parse_colors(text, default=DEFAULT_COLORS)

    async def identify_type(self, image: bytes, mime_type: str) -> GarmentType:
        text = await self._ask("type identification", TYPE_PROMPT, image, mime_type)
        if text is None:
            return DEFAULT_GARMENT_TYPE
        value = parse_choice(
            text, [t.value for t in GarmentType], DEFAULT_GARMENT_TYPE.value,
            attribute="type", synonyms=GARMENT_TYPE_SYNONYMS,
        )
        return GarmentType(value)

    async def suggest_occasion(self, image: bytes, mime_type: str) -> Occasion:
        text = await self._ask("occasion suggestion", OCCASION_PROMPT, image, mime_type)
        if text is None:
            return DEFAULT_OCCASION
        value = parse_choice(text, [o.value for o in Occasion], DEFAULT_OCCASION.value, attribute="occasion")
        return Occasion(value)

    async def suggest_season(self, image: bytes, mime_type: str) -> Season:
        text = await self._ask("season suggestion", SEASON_PROMPT, image, mime_type)
        if text is None:
            return DEFAULT_SEASON
        value = parse_choice(text, [s.value for s in Season], DEFAULT_SEASON.value, attribute="season")
        return Season(value)

    async def generate_name(self, image: bytes, mime_type: str) -> str:
        text = await self._ask("name generation", NAME_PROMPT, image, mime_type)
        if text is None:
            return DEFAULT_ITEM_NAME
        return parse_name(text, default=DEFAULT_ITEM_NAME)
