# wardrobe_project/models/outfit_models.py

from pydantic import BaseModel, Field
from typing import Optional, List
import uuid
from datetime import datetime

from .item_models import Occasion, Season


# --- Saved Outfit Models ---
class OutfitItemRef(BaseModel):
    item_id: uuid.UUID
    position: int = Field(0, ge=0)

    class Config:
        from_attributes = True

class OutfitBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Friday Office Look"])
    description: Optional[str] = Field(None, max_length=500)
    thumbnail_url: Optional[str] = None
    is_public: bool = False

class OutfitCreate(OutfitBase):
    items: List[OutfitItemRef] = Field(default_factory=list)

class OutfitUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    thumbnail_url: Optional[str] = None
    is_public: Optional[bool] = None
    items: Optional[List[OutfitItemRef]] = None

class Outfit(OutfitBase):
    id: uuid.UUID
    user_id: uuid.UUID
    items: List[OutfitItemRef] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# --- Suggestion Models ---
class SuggestionRequest(BaseModel):
    occasion: Optional[Occasion] = None
    season: Optional[Season] = None
    weather: Optional[str] = Field(None, examples=["Mild, 22°C"])
    style: Optional[str] = Field(None, examples=["Casual"])

class OutfitSuggestion(BaseModel):
    name: str = ""
    description: str = ""
    item_ids: List[str] = Field(default_factory=list)
    reasoning: str = ""

class SuggestionResponse(BaseModel):
    success: bool = True
    suggestions: List[OutfitSuggestion]
    fallback: bool = False
