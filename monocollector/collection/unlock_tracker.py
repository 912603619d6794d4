"""
Unlock tracking

Stats are recomputed from scratch, so "just unlocked" is found by diffing
two snapshots: whatever is in the new stats and missing from the previous
snapshot is new. Level-ups are only reported against a real previous
snapshot (level > 0), so the first observation never celebrates.

Events are turned into notification payloads here; delivery is left to
the caller.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
import logging

from pydantic import BaseModel, Field

from monocollector.models.achievement import Achievement, CollectionBadge
from monocollector.models.collection import CollectionStats, LevelInfo

logger = logging.getLogger(__name__)


class GamificationSnapshot(BaseModel):
    """What a user had already unlocked at the last observation"""
    badge_ids: List[str] = Field(default_factory=list)
    achievement_ids: List[str] = Field(default_factory=list)
    level: int = 0  # 0 = never observed

    @classmethod
    def from_stats(cls, stats: CollectionStats) -> "GamificationSnapshot":
        return cls(
            badge_ids=[b.id for b in stats.unlocked_badges],
            achievement_ids=[a.id for a in stats.unlocked_achievements],
            level=stats.level.level,
        )


class UnlockEvents(BaseModel):
    """New unlocks between two observations"""
    new_badges: List[CollectionBadge] = Field(default_factory=list)
    new_achievements: List[Achievement] = Field(default_factory=list)
    leveled_up: bool = False
    level: LevelInfo
    snapshot: GamificationSnapshot

    @property
    def has_events(self) -> bool:
        return bool(self.new_badges or self.new_achievements or self.leveled_up)


class NotificationType(str, Enum):
    BADGE = "badge"
    ACHIEVEMENT = "achievement"
    LEVELUP = "levelup"
    STREAK = "streak"
    WEEKLY = "weekly"


class NotificationPayload(BaseModel):
    """User-facing notification text"""
    type: NotificationType
    title: str
    body: str
    data: Dict[str, Any] = Field(default_factory=dict)


def detect_unlocks(previous: Optional[GamificationSnapshot], stats: CollectionStats) -> UnlockEvents:
    """
    Diff current stats against the previous snapshot

    Args:
        previous: Last snapshot, or None if the user was never observed
        stats: Freshly computed stats

    Returns:
        UnlockEvents, including the snapshot to store for next time
    """
    previous = previous or GamificationSnapshot()
    known_badges = set(previous.badge_ids)
    known_achievements = set(previous.achievement_ids)

    new_badges = [b for b in stats.unlocked_badges if b.id not in known_badges]
    new_achievements = [a for a in stats.unlocked_achievements if a.id not in known_achievements]
    leveled_up = previous.level > 0 and stats.level.level > previous.level

    if new_badges or new_achievements or leveled_up:
        logger.info(
            f"Unlocks detected: {len(new_badges)} badges, "
            f"{len(new_achievements)} achievements, level_up={leveled_up}"
        )

    return UnlockEvents(
        new_badges=new_badges,
        new_achievements=new_achievements,
        leveled_up=leveled_up,
        level=stats.level,
        snapshot=GamificationSnapshot.from_stats(stats),
    )


class UnlockTracker:
    """Keeps the previous snapshot between observations"""

    def __init__(self, snapshot: Optional[GamificationSnapshot] = None):
        self.snapshot = snapshot

    def observe(self, stats: CollectionStats) -> UnlockEvents:
        events = detect_unlocks(self.snapshot, stats)
        self.snapshot = events.snapshot
        return events


# ============================================
# Notification templates
# ============================================

def create_badge_notification(badge: CollectionBadge) -> NotificationPayload:
    return NotificationPayload(
        type=NotificationType.BADGE,
        title="バッジを獲得！",
        body=f"{badge.icon} {badge.name}を獲得しました！",
        data={"badge_id": badge.id, "badge_name": badge.name, "badge_icon": badge.icon},
    )


def create_achievement_notification(achievement: Achievement) -> NotificationPayload:
    return NotificationPayload(
        type=NotificationType.ACHIEVEMENT,
        title="実績を解除！",
        body=f"{achievement.icon} {achievement.name}を達成しました！",
        data={
            "achievement_id": achievement.id,
            "achievement_name": achievement.name,
            "achievement_icon": achievement.icon,
        },
    )


def create_level_up_notification(level: LevelInfo) -> NotificationPayload:
    return NotificationPayload(
        type=NotificationType.LEVELUP,
        title="レベルアップ！",
        body=f"レベル{level.level}「{level.title}」になりました！",
        data={"new_level": level.level, "title": level.title},
    )


def create_streak_notification(current_streak: int) -> NotificationPayload:
    """Reminder sent when today's entry is still missing"""
    return NotificationPayload(
        type=NotificationType.STREAK,
        title="連続記録が途切れそう！",
        body=f"現在{current_streak}日連続！今日もモノを記録して記録を伸ばそう",
        data={"current_streak": current_streak},
    )


def create_weekly_summary_notification(item_count: int, streak: int) -> NotificationPayload:
    return NotificationPayload(
        type=NotificationType.WEEKLY,
        title="今週のコレクション",
        body=f"今週は{item_count}個のモノを記録しました！連続{streak}日記録中",
        data={"item_count": item_count, "streak": streak},
    )


def build_notifications(events: UnlockEvents) -> List[NotificationPayload]:
    """Badges first, then achievements, then the level-up"""
    notifications = [create_badge_notification(b) for b in events.new_badges]
    notifications.extend(create_achievement_notification(a) for a in events.new_achievements)
    if events.leveled_up:
        notifications.append(create_level_up_notification(events.level))
    return notifications
