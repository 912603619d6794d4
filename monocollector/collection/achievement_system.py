"""
Achievement System

Static achievement tables across three counting dimensions:
- items: total items registered
- streak: consecutive days with at least one new item
- category: distinct categories with at least one item

An achievement is unlocked when its dimension's counter reaches the
threshold. Nothing is stored: unlocked/locked is recomputed from counters.
"""

from typing import Dict, List, Sequence, Tuple
import logging

from monocollector import config
from monocollector.models.achievement import (
    Achievement,
    AchievementCategory,
    AchievementTier,
)
from monocollector.models.collection import AchievementProgress
from monocollector.models.item import Item

logger = logging.getLogger(__name__)

Counters = Dict[AchievementCategory, int]

_TIER_ORDER = (
    AchievementTier.BRONZE,
    AchievementTier.SILVER,
    AchievementTier.GOLD,
    AchievementTier.PLATINUM,
    AchievementTier.DIAMOND,
    AchievementTier.LEGENDARY,
)

_ITEM_MILESTONES = (
    (1, "初めての一歩", "🌱"),
    (10, "コレクター見習い", "🎯"),
    (25, "熱心なコレクター", "📋"),
    (50, "整理整頓マスター", "📦"),
    (100, "モノの魔術師", "✨"),
    (250, "コレクター王", "👑"),
    (500, "伝説のコレクター", "🏆"),
    (1000, "グランドマスター", "🎖️"),
    (2500, "究極のコレクター", "🌠"),
    (5000, "神話のコレクター", "⭐"),
    (10000, "∞コレクター", "♾️"),
)

_STREAK_MILESTONES = (
    (2, "継続は力なり", "✊", AchievementTier.BRONZE),
    (3, "3日坊主じゃない", "🔥", AchievementTier.BRONZE),
    (5, "5日達成", "🖐️", AchievementTier.BRONZE),
    (7, "1週間継続", "📅", AchievementTier.BRONZE),
    (10, "10日連続", "🔟", AchievementTier.SILVER),
    (14, "2週間の習慣", "💪", AchievementTier.SILVER),
    (21, "3週間チャレンジ", "🎯", AchievementTier.SILVER),
    (30, "1ヶ月マラソン", "🏃", AchievementTier.GOLD),
    (45, "45日ストリーク", "⭐", AchievementTier.GOLD),
    (60, "2ヶ月の執念", "🌟", AchievementTier.GOLD),
    (90, "3ヶ月マスター", "🏅", AchievementTier.PLATINUM),
    (100, "100日達成", "💯", AchievementTier.PLATINUM),
    (150, "150日レジェンド", "🎖️", AchievementTier.PLATINUM),
    (180, "半年ストリーク", "🌙", AchievementTier.DIAMOND),
    (200, "200日神話", "🔱", AchievementTier.DIAMOND),
    (250, "250日伝説", "⚡", AchievementTier.DIAMOND),
    (300, "300日クエスト", "🗡️", AchievementTier.DIAMOND),
    (365, "1年間のコミット", "🎊", AchievementTier.LEGENDARY),
    (500, "500日の偉業", "🏆", AchievementTier.LEGENDARY),
    (730, "2年間の奇跡", "👑", AchievementTier.LEGENDARY),
    (1000, "1000日の神話", "♾️", AchievementTier.LEGENDARY),
)

_CATEGORY_MILESTONES = (
    (2, "デュアルコレクター", "✌️", AchievementTier.BRONZE),
    (3, "多様性の始まり", "🎨", AchievementTier.BRONZE),
    (4, "クアッドカテゴリ", "🍀", AchievementTier.BRONZE),
    (5, "カテゴリマスター", "📊", AchievementTier.SILVER),
    (6, "ハーフウェイ", "🎯", AchievementTier.SILVER),
    (7, "セブンスター", "⭐", AchievementTier.SILVER),
    (8, "オクタゴン", "🔷", AchievementTier.GOLD),
    (10, "オールラウンダー", "🌈", AchievementTier.GOLD),
    (12, "ダズンコレクター", "🎖️", AchievementTier.PLATINUM),
    (13, "フルコンプリート", "👑", AchievementTier.DIAMOND),
)


def _item_achievements() -> List[Achievement]:
    # Two milestones per tier, legendary from the 11th on
    return [
        Achievement(
            id=f"items-{threshold}",
            name=name,
            description=f"{threshold}アイテム達成",
            icon=icon,
            tier=_TIER_ORDER[min(index // 2, len(_TIER_ORDER) - 1)],
            category=AchievementCategory.ITEMS,
            threshold=threshold,
        )
        for index, (threshold, name, icon) in enumerate(_ITEM_MILESTONES)
    ]


def _streak_achievements() -> List[Achievement]:
    return [
        Achievement(
            id=f"streak-{threshold}",
            name=name,
            description=f"{threshold}日連続でアイテム追加",
            icon=icon,
            tier=tier,
            category=AchievementCategory.STREAK,
            threshold=threshold,
        )
        for threshold, name, icon, tier in _STREAK_MILESTONES
    ]


def _category_achievements() -> List[Achievement]:
    return [
        Achievement(
            id=f"category-{threshold}",
            name=name,
            description=f"{threshold}カテゴリ以上でアイテム登録",
            icon=icon,
            tier=tier,
            category=AchievementCategory.CATEGORY,
            threshold=threshold,
        )
        for threshold, name, icon, tier in _CATEGORY_MILESTONES
    ]


ALL_ACHIEVEMENTS: Tuple[Achievement, ...] = (
    *_item_achievements(),
    *_streak_achievements(),
    *_category_achievements(),
)

ACHIEVEMENTS_BY_ID: Dict[str, Achievement] = {a.id: a for a in ALL_ACHIEVEMENTS}


def build_counters(items: Sequence[Item], streak: int) -> Counters:
    """Counter value for each achievement dimension"""
    return {
        AchievementCategory.ITEMS: len(items),
        AchievementCategory.STREAK: max(0, streak),
        AchievementCategory.CATEGORY: len({item.category for item in items}),
    }


def is_unlocked(achievement: Achievement, counters: Counters) -> bool:
    return counters.get(achievement.category, 0) >= achievement.threshold


def partition_achievements(
    counters: Counters,
    achievements: Sequence[Achievement] = ALL_ACHIEVEMENTS,
) -> Tuple[List[Achievement], List[Achievement]]:
    """
    Split achievements into (unlocked, locked)

    Every achievement lands in exactly one list; table order is kept.
    """
    unlocked: List[Achievement] = []
    locked: List[Achievement] = []
    for achievement in achievements:
        (unlocked if is_unlocked(achievement, counters) else locked).append(achievement)
    return unlocked, locked


def get_achievement_progress(achievement: Achievement, counters: Counters) -> AchievementProgress:
    """Progress toward one achievement"""
    current = counters.get(achievement.category, 0)
    remaining = max(0, achievement.threshold - current)
    percentage = min(100, int(current * 100 / achievement.threshold)) if achievement.threshold > 0 else 100

    return AchievementProgress(
        achievement=achievement,
        current=current,
        remaining=remaining,
        percentage=percentage,
    )


def get_next_achievements(
    locked: Sequence[Achievement],
    counters: Counters,
    limit: int = config.NEXT_ACHIEVEMENTS_PREVIEW,
) -> List[Achievement]:
    """
    Closest locked achievements

    Sorted by remaining distance to threshold; ties keep table order.
    """
    ranked = sorted(
        locked,
        key=lambda a: a.threshold - counters.get(a.category, 0),
    )
    return ranked[:max(0, limit)]
