"""
EXP and Leveling System

Leveling Curve:
- Level n covers [(n - 1)^2 * base, n^2 * base) EXP, base = 50 by default
- Bands are contiguous; the top level (200) has no upper bound

EXP Rules (all weights in monocollector.config):
- Each item: 10 EXP
- Rarity bonus per item: uncommon 2, rare 5, epic 10, legendary 25
- Each distinct category used: 5 EXP
- Streak: 2 * streak^2 EXP

Every term only grows when an item is added or the streak extends, so EXP
and level never go down as a collection grows.
"""

from bisect import bisect_right
from typing import Optional, Sequence
import logging

from monocollector import config
from monocollector.collection.rarity import determine_rarity
from monocollector.models.collection import LevelInfo, Rarity
from monocollector.models.item import Item

logger = logging.getLogger(__name__)

# First level at which each title applies
LEVEL_TITLES: tuple[tuple[int, str, str], ...] = (
    (1, "ビギナー", "🌱"),
    (5, "アマチュア", "🌿"),
    (10, "コレクター", "🎯"),
    (20, "ベテラン", "⭐"),
    (30, "エキスパート", "🌟"),
    (50, "マスター", "💫"),
    (75, "グランドマスター", "🏆"),
    (100, "レジェンド", "👑"),
    (150, "ミシック", "🔱"),
    (200, "∞コレクター", "♾️"),
)


def _title_for(level: int) -> tuple[str, str]:
    title, icon = LEVEL_TITLES[0][1], LEVEL_TITLES[0][2]
    for min_level, t, i in LEVEL_TITLES:
        if level >= min_level:
            title, icon = t, i
        else:
            break
    return title, icon


def build_level_table(max_level: int = config.MAX_LEVEL, base: int = config.LEVEL_EXP_BASE) -> tuple[LevelInfo, ...]:
    """Build the contiguous level table"""
    levels = []
    for n in range(1, max_level + 1):
        title, icon = _title_for(n)
        levels.append(LevelInfo(
            level=n,
            title=title,
            icon=icon,
            min_exp=(n - 1) ** 2 * base,
            max_exp=n ** 2 * base if n < max_level else None,
        ))
    return tuple(levels)


LEVELS: tuple[LevelInfo, ...] = build_level_table()
_LEVEL_FLOORS: list[int] = [lvl.min_exp for lvl in LEVELS]


def calculate_exp(
    items: Sequence[Item],
    streak: int,
    rarities: Optional[Sequence[Rarity]] = None,
) -> int:
    """
    Calculate total EXP for a collection

    Args:
        items: The user's items
        streak: Current consecutive-day streak (negative values count as 0)
        rarities: Precomputed rarity per item, in item order (optional)

    Returns:
        Total EXP (never negative)
    """
    if rarities is None:
        rarities = [determine_rarity(item.name, item.created_at) for item in items]

    streak = max(0, streak)
    exp = len(items) * config.EXP_PER_ITEM
    exp += sum(config.RARITY_EXP_BONUS.get(r.value, 0) for r in rarities)
    exp += len({item.category for item in items}) * config.EXP_PER_CATEGORY
    exp += streak * streak * config.EXP_STREAK_FACTOR
    return exp


def calculate_level(total_exp: int) -> LevelInfo:
    """
    Find the level whose band contains total_exp

    EXP past the top band clamps to the top level; negative EXP maps to
    level 1.
    """
    index = bisect_right(_LEVEL_FLOORS, max(0, total_exp)) - 1
    return LEVELS[max(0, index)]


def exp_to_next_level(total_exp: int) -> Optional[int]:
    """EXP still needed to reach the next level, or None at the top level"""
    level = calculate_level(total_exp)
    if level.max_exp is None:
        return None
    return level.max_exp - max(0, total_exp)
