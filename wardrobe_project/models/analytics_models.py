# wardrobe_project/models/analytics_models.py

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
import uuid
from datetime import datetime

from .item_models import GarmentType, HistoryAction


class AnalyticsSummary(BaseModel):
    total_items: int
    favorite_items: int
    in_laundry: int
    total_usage: int
    average_usage: float


class ItemUsage(BaseModel):
    id: uuid.UUID
    name: str
    type: GarmentType
    usage_count: int
    thumbnail_url: Optional[str] = None

    class Config:
        from_attributes = True


class HistoryActivity(BaseModel):
    item_id: uuid.UUID
    action: HistoryAction
    notes: Optional[str] = None
    timestamp: datetime

    class Config:
        from_attributes = True


class RecentActivity(BaseModel):
    days: int
    action_counts: Dict[str, int] = Field(default_factory=dict)
    latest: List[HistoryActivity] = Field(default_factory=list)


class Distributions(BaseModel):
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_season: Dict[str, int] = Field(default_factory=dict)
    by_occasion: Dict[str, int] = Field(default_factory=dict)
    by_laundry_status: Dict[str, int] = Field(default_factory=dict)


class WardrobeAnalytics(BaseModel):
    summary: AnalyticsSummary
    most_worn: List[ItemUsage] = Field(default_factory=list)
    underused: List[ItemUsage] = Field(default_factory=list)
    never_worn: List[ItemUsage] = Field(default_factory=list)
    distributions: Distributions
    recent_activity: RecentActivity
