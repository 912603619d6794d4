"""Derived collection models: rarity, levels, stats view-model"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from monocollector.models.achievement import Achievement, CollectionBadge


class Rarity(str, Enum):
    """Per-item rarity, recomputed on demand from the item name"""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class RarityInfo(BaseModel):
    """Display config for a rarity"""
    model_config = ConfigDict(frozen=True)

    name: str
    color: str
    bg_color: str
    border_color: str
    sparkle: bool
    probability: float  # nominal share, for display only


class LevelInfo(BaseModel):
    """One band of the level table; max_exp is None for the top level"""
    model_config = ConfigDict(frozen=True)

    level: int
    title: str
    icon: str
    min_exp: int
    max_exp: Optional[int] = None


class CategoryBreakdown(BaseModel):
    """Item count for one category"""
    category: str  # category display name
    icon: str
    count: int


class AchievementProgress(BaseModel):
    """Progress toward a single achievement"""
    achievement: Achievement
    current: int
    remaining: int
    percentage: int  # 0-100


class CollectionStats(BaseModel):
    """Everything the stats panel renders, rebuilt from scratch on each call"""
    total_items: int = 0
    total_exp: int = 0
    level: LevelInfo
    streak: int = 0
    category_count: int = 0
    unlocked_achievements: list[Achievement] = Field(default_factory=list)
    next_achievements: list[Achievement] = Field(default_factory=list)
    unlocked_badges: list[CollectionBadge] = Field(default_factory=list)
    rarity_breakdown: dict[Rarity, int] = Field(default_factory=dict)
    category_breakdown: list[CategoryBreakdown] = Field(default_factory=list)
