"""Achievement and badge models for the collection system"""
from enum import Enum
from pydantic import BaseModel, ConfigDict


class AchievementCategory(str, Enum):
    """Counting dimension an achievement tracks"""
    ITEMS = "items"
    STREAK = "streak"
    CATEGORY = "category"


class AchievementTier(str, Enum):
    """Achievement tiers/difficulty levels"""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"
    LEGENDARY = "legendary"


class BadgeTier(str, Enum):
    """Badge tiers (badges stop at diamond)"""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"


class Achievement(BaseModel):
    """Achievement definition"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    tier: AchievementTier
    category: AchievementCategory
    threshold: int


class CollectionBadge(BaseModel):
    """Badge definition; the unlock predicate lives in badge_system"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    tier: BadgeTier
