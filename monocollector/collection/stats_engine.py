"""
Collection stats engine

Recomputes the whole gamification view of a collection from scratch:
EXP, level, unlocked/next achievements, badges, rarity histogram and
per-category counts. Nothing is cached between calls; the same inputs
always give the same CollectionStats.
"""

from typing import Sequence
import logging
import time

from monocollector.collection.achievement_system import (
    build_counters,
    get_next_achievements,
    partition_achievements,
)
from monocollector.collection.badge_system import BadgeContext, evaluate_badges
from monocollector.collection.level_system import calculate_exp, calculate_level
from monocollector.collection.rarity import determine_rarity, empty_rarity_breakdown
from monocollector.models.achievement import AchievementCategory
from monocollector.models.collection import CategoryBreakdown, CollectionStats
from monocollector.models.item import Category, Item
from monocollector.observability.metrics import (
    collection_stats_computed_total,
    collection_stats_duration_seconds,
)

logger = logging.getLogger(__name__)


def build_category_breakdown(
    items: Sequence[Item],
    categories: Sequence[Category],
) -> list[CategoryBreakdown]:
    """Item count per known category, in category order, empty ones left out"""
    counts: dict[str, int] = {}
    for item in items:
        counts[item.category] = counts.get(item.category, 0) + 1

    return [
        CategoryBreakdown(category=category.name, icon=category.icon, count=counts[category.id])
        for category in categories
        if counts.get(category.id, 0) > 0
    ]


def calculate_collection_stats(
    items: Sequence[Item],
    categories: Sequence[Category],
    streak: int,
) -> CollectionStats:
    """
    Calculate the full stats view for a collection

    Args:
        items: The user's items (any order)
        categories: Category definitions, in display order
        streak: Current consecutive-day streak (negative values count as 0)

    Returns:
        CollectionStats built only from the arguments
    """
    start_time = time.perf_counter()
    streak = max(0, streak)

    rarities = [determine_rarity(item.name, item.created_at) for item in items]

    counters = build_counters(items, streak)
    total_exp = calculate_exp(items, streak, rarities=rarities)
    level = calculate_level(total_exp)

    unlocked, locked = partition_achievements(counters)
    next_up = get_next_achievements(locked, counters)

    badge_context = BadgeContext.build(items, categories, streak, rarities=rarities)
    badges = evaluate_badges(badge_context)

    rarity_breakdown = empty_rarity_breakdown()
    for rarity in rarities:
        rarity_breakdown[rarity] += 1

    stats = CollectionStats(
        total_items=len(items),
        total_exp=total_exp,
        level=level,
        streak=streak,
        category_count=counters[AchievementCategory.CATEGORY],
        unlocked_achievements=unlocked,
        next_achievements=next_up,
        unlocked_badges=badges,
        rarity_breakdown=rarity_breakdown,
        category_breakdown=build_category_breakdown(items, categories),
    )

    collection_stats_computed_total.inc()
    collection_stats_duration_seconds.observe(time.perf_counter() - start_time)
    logger.debug(
        f"Stats computed: {stats.total_items} items, {stats.total_exp} EXP, "
        f"level {level.level}, {len(unlocked)} achievements, {len(badges)} badges"
    )
    return stats
