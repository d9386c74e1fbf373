# wardrobe_project/models/item_models.py

from pydantic import BaseModel, Field
from typing import Optional, List
from enum import Enum
import uuid
from datetime import datetime


# --- Item Enums ---
class GarmentType(str, Enum):
    TOP = "TOP"
    BOTTOM = "BOTTOM"
    DRESS = "DRESS"
    OUTERWEAR = "OUTERWEAR"
    SHOES = "SHOES"
    ACCESSORY = "ACCESSORY"
    UNDERWEAR = "UNDERWEAR"
    SWIMWEAR = "SWIMWEAR"
    SPORTSWEAR = "SPORTSWEAR"

class Occasion(str, Enum):
    CASUAL = "CASUAL"
    WORK = "WORK"
    FORMAL = "FORMAL"
    PARTY = "PARTY"
    SPORTS = "SPORTS"
    BEACH = "BEACH"
    DATE_NIGHT = "DATE_NIGHT"
    TRAVEL = "TRAVEL"

class Season(str, Enum):
    SPRING = "SPRING"
    SUMMER = "SUMMER"
    FALL = "FALL"
    WINTER = "WINTER"
    ALL_SEASON = "ALL_SEASON"

class LaundryStatus(str, Enum):
    IN_WARDROBE = "IN_WARDROBE"
    IN_LAUNDRY = "IN_LAUNDRY"
    CLEAN = "CLEAN"
    AWAY = "AWAY"

class HistoryAction(str, Enum):
    CREATED = "CREATED"
    WORN = "WORN"
    MARKED_LAUNDRY = "MARKED_LAUNDRY"
    RETURNED = "RETURNED"
    EDITED = "EDITED"
    FAVORITED = "FAVORITED"
    UNFAVORITED = "UNFAVORITED"
    DELETED = "DELETED"

class LaundryAction(str, Enum):
    MARK_LAUNDRY = "mark_laundry"
    MARK_CLEAN = "mark_clean"
    MARK_WORN = "mark_worn"
    MARK_AWAY = "mark_away"


# Placeholder stored when neither the user nor the AI supplied a name.
UNTITLED_ITEM_NAME = "Untitled Item"


# --- Item Models ---
class ItemBase(BaseModel):
    name: str = Field("", max_length=200, examples=["Blue Denim Jeans"])
    colors: List[str] = Field(default_factory=list, examples=[["Blue", "White"]])
    type: GarmentType = Field(..., examples=[GarmentType.BOTTOM])
    occasion: Occasion = Occasion.CASUAL
    occasions: Optional[List[Occasion]] = None
    season: Season = Season.ALL_SEASON

class ItemCreate(ItemBase):
    filename: str = Field(..., min_length=1)
    object_url: str = Field(..., min_length=1)
    thumbnail_url: Optional[str] = None
    processed_url: Optional[str] = None

class ItemUpdate(BaseModel):
    # For updates, all fields are optional
    name: Optional[str] = Field(None, max_length=200)
    colors: Optional[List[str]] = None
    type: Optional[GarmentType] = None
    occasion: Optional[Occasion] = None
    occasions: Optional[List[Occasion]] = None
    season: Optional[Season] = None
    is_favorite: Optional[bool] = None

class Item(ItemBase):
    id: uuid.UUID
    user_id: uuid.UUID
    occasions: List[Occasion] = Field(default_factory=list)
    filename: str
    object_url: str
    thumbnail_url: Optional[str] = None
    processed_url: Optional[str] = None
    laundry_status: LaundryStatus = LaundryStatus.IN_WARDROBE
    usage_count: int = Field(0, ge=0)
    is_favorite: bool = False
    moderated: bool = False
    moderation_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# --- History Models ---
class ItemHistoryEntry(BaseModel):
    id: uuid.UUID
    item_id: uuid.UUID
    action: HistoryAction
    performed_by: uuid.UUID
    notes: Optional[str] = None
    timestamp: datetime

    class Config:
        from_attributes = True

class ItemWithHistory(Item):
    history: List[ItemHistoryEntry] = Field(default_factory=list)


# --- Laundry ---
class LaundryRequest(BaseModel):
    action: LaundryAction = Field(..., examples=[LaundryAction.MARK_WORN])


# --- Listing filters ---
class ItemFilters(BaseModel):
    type: Optional[GarmentType] = None
    season: Optional[Season] = None
    laundry_status: Optional[LaundryStatus] = None
    favorites_only: bool = False
    search: Optional[str] = None


# --- Upload / AI analysis ---
class AIAnalysis(BaseModel):
    name: str
    colors: List[str]
    type: GarmentType
    occasion: Occasion
    season: Season

class UploadOverrides(BaseModel):
    """Values the uploader typed in; they win over AI guesses."""
    name: Optional[str] = Field(None, max_length=200)
    type: Optional[GarmentType] = None
    occasion: Optional[Occasion] = None
    season: Optional[Season] = None

class UploadResponse(BaseModel):
    success: bool = True
    item: Item
    ai_analysis: AIAnalysis
