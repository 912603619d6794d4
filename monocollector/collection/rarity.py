"""
Rarity classification

Rarity is content-addressed: it is derived from the item name (plus a
small bonus for items created on day 7, 14, 21 or 28 of a month) and is
never stored. Distribution is skewed on purpose:

- common     60%
- uncommon   25%
- rare       10%
- epic        4%
- legendary   1%
"""

from datetime import datetime
from typing import Optional

from monocollector.models.collection import Rarity, RarityInfo
from monocollector.utils.hashing import hash_string

RARITY_CONFIG: dict[Rarity, RarityInfo] = {
    Rarity.COMMON: RarityInfo(
        name="コモン",
        color="text-gray-600",
        bg_color="bg-gray-100",
        border_color="border-gray-300",
        sparkle=False,
        probability=0.6,
    ),
    Rarity.UNCOMMON: RarityInfo(
        name="アンコモン",
        color="text-green-600",
        bg_color="bg-green-50",
        border_color="border-green-400",
        sparkle=False,
        probability=0.25,
    ),
    Rarity.RARE: RarityInfo(
        name="レア",
        color="text-blue-600",
        bg_color="bg-blue-50",
        border_color="border-blue-400",
        sparkle=False,
        probability=0.1,
    ),
    Rarity.EPIC: RarityInfo(
        name="エピック",
        color="text-purple-600",
        bg_color="bg-purple-50",
        border_color="border-purple-500",
        sparkle=True,
        probability=0.04,
    ),
    Rarity.LEGENDARY: RarityInfo(
        name="レジェンダリー",
        color="text-amber-500",
        bg_color="bg-gradient-to-br from-amber-50 to-orange-50",
        border_color="border-amber-500",
        sparkle=True,
        probability=0.01,
    ),
}

# Lower bound of each tier on a 0-999 roll, highest first
_ROLL_THRESHOLDS: tuple[tuple[int, Rarity], ...] = (
    (990, Rarity.LEGENDARY),
    (950, Rarity.EPIC),
    (850, Rarity.RARE),
    (600, Rarity.UNCOMMON),
)

DATE_BONUS = 50


def rarity_roll(item_name: str, created_at: Optional[datetime] = None) -> int:
    """Roll in permille; may exceed 999 when the date bonus applies"""
    roll = hash_string(item_name) % 1000
    if created_at is not None and created_at.day % 7 == 0:
        roll += DATE_BONUS
    return roll


def determine_rarity(item_name: str, created_at: Optional[datetime] = None) -> Rarity:
    """Map an item name (and optional creation time) to a rarity"""
    roll = rarity_roll(item_name, created_at)
    for lower_bound, rarity in _ROLL_THRESHOLDS:
        if roll >= lower_bound:
            return rarity
    return Rarity.COMMON


def empty_rarity_breakdown() -> dict[Rarity, int]:
    return {rarity: 0 for rarity in Rarity}
