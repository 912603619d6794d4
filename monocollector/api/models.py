"""Pydantic models for API request/response validation"""
from typing import Optional, List, Dict
from pydantic import BaseModel, Field
from datetime import datetime

from monocollector.collection.unlock_tracker import NotificationPayload, UnlockEvents
from monocollector.icons.name_icon import IconStyle
from monocollector.icons.photo_icon import PhotoIconStyle
from monocollector.models.achievement import Achievement
from monocollector.models.collection import AchievementProgress
from monocollector.models.item import Category, Item


class ItemCreateRequest(BaseModel):
    """Request to add an item to a collection"""
    name: str = Field(..., min_length=1, description="Item name")
    category: str = Field(..., description="Category id")
    icon: str = Field(default="", description="Emoji shown for the item")
    image: Optional[str] = Field(default=None, description="Photo as a base64 data URL")
    generated_icon: Optional[str] = Field(default=None, description="Generated SVG icon data URL")
    icon_style: Optional[str] = None
    icon_colors: List[str] = Field(default_factory=list)
    location: str = Field(default="", description="Where the item is kept")
    quantity: int = Field(default=1, ge=1)
    notes: str = ""
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(
        default=None,
        description="When the item was registered (defaults to now)"
    )

    def to_item(self) -> Item:
        data = self.model_dump(exclude_none=True)
        return Item(**data)


class ItemUpdateRequest(BaseModel):
    """Partial item update; only fields that are sent are changed"""
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    icon: Optional[str] = None
    image: Optional[str] = None
    generated_icon: Optional[str] = None
    icon_style: Optional[str] = None
    icon_colors: Optional[List[str]] = None
    location: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=1)
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    is_collected: Optional[bool] = None


class ItemListResponse(BaseModel):
    """Items of one user, newest first"""
    user_id: str
    items: List[Item]
    total: int


class CategoryListResponse(BaseModel):
    categories: List[Category]


class AchievementsResponse(BaseModel):
    """Unlocked achievements and progress toward the locked ones"""
    user_id: str
    unlocked: List[Achievement]
    locked: List[AchievementProgress]


class UnlockCheckResponse(BaseModel):
    """Unlocks since the previous check, with ready-to-show notifications"""
    user_id: str
    events: UnlockEvents
    notifications: List[NotificationPayload]


class NameIconRequest(BaseModel):
    name: str = Field(..., description="Item name")
    style: Optional[IconStyle] = Field(default=None, description="Style (derived from the name if omitted)")
    size: int = Field(default=64, ge=16, le=512)


class PhotoIconRequest(BaseModel):
    image: str = Field(..., description="Photo as a base64 data URL")
    style: Optional[PhotoIconStyle] = Field(default=None, description="Style (derived from the photo if omitted)")
    size: int = Field(default=64, ge=16, le=512)


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    timestamp: datetime
    checks: Dict[str, str]
