"""Data models"""
from monocollector.models.item import Item, Category, DEFAULT_CATEGORIES
from monocollector.models.achievement import (
    Achievement,
    AchievementCategory,
    AchievementTier,
    BadgeTier,
    CollectionBadge,
)
from monocollector.models.collection import (
    Rarity,
    RarityInfo,
    LevelInfo,
    CategoryBreakdown,
    AchievementProgress,
    CollectionStats,
)

__all__ = [
    "Item",
    "Category",
    "DEFAULT_CATEGORIES",
    "Achievement",
    "AchievementCategory",
    "AchievementTier",
    "BadgeTier",
    "CollectionBadge",
    "Rarity",
    "RarityInfo",
    "LevelInfo",
    "CategoryBreakdown",
    "AchievementProgress",
    "CollectionStats",
]
