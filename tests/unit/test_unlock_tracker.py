"""Unit tests for unlock detection and notifications (monocollector/collection/unlock_tracker.py)"""
from monocollector.collection.stats_engine import calculate_collection_stats
from monocollector.collection.unlock_tracker import (
    GamificationSnapshot,
    NotificationType,
    UnlockTracker,
    build_notifications,
    create_streak_notification,
    create_weekly_summary_notification,
    detect_unlocks,
)


# ============================================================================
# Diff Tests
# ============================================================================

def test_first_observation_reports_unlocks_without_level_up(make_item, categories):
    """Without a previous snapshot everything unlocked is new, but no level-up"""
    stats = calculate_collection_stats([make_item(name="a")], categories, 5)
    events = detect_unlocks(None, stats)

    assert [a.id for a in events.new_achievements] == [a.id for a in stats.unlocked_achievements]
    assert "badge-starter" in {b.id for b in events.new_badges}
    assert events.leveled_up is False
    assert events.snapshot.level == stats.level.level


def test_level_up_against_real_snapshot(make_item, categories):
    """Level increase over a stored snapshot is reported"""
    stats = calculate_collection_stats([make_item(name="a")], categories, 5)
    assert stats.level.level >= 2

    events = detect_unlocks(GamificationSnapshot(level=1), stats)
    assert events.leveled_up is True


def test_no_events_when_nothing_changed(make_item, categories):
    """Diffing against the snapshot of the same stats is empty"""
    stats = calculate_collection_stats([make_item(name="a")], categories, 1)
    snapshot = GamificationSnapshot.from_stats(stats)
    events = detect_unlocks(snapshot, stats)

    assert events.new_badges == []
    assert events.new_achievements == []
    assert not events.leveled_up
    assert not events.has_events


def test_tracker_keeps_snapshot(make_item, categories):
    """Second observation of the same stats reports nothing"""
    tracker = UnlockTracker()
    items = [make_item(name="a")]

    first = tracker.observe(calculate_collection_stats(items, categories, 1))
    second = tracker.observe(calculate_collection_stats(items, categories, 1))

    assert first.has_events
    assert not second.has_events
    assert tracker.snapshot.achievement_ids == ["items-1"]


def test_tracker_reports_only_new_items(make_item, categories):
    """Reaching a new milestone reports just that milestone"""
    tracker = UnlockTracker()
    items = [make_item(name=f"n{i}") for i in range(9)]
    tracker.observe(calculate_collection_stats(items, categories, 1))

    items.append(make_item(name="n9"))
    events = tracker.observe(calculate_collection_stats(items, categories, 1))

    assert [a.id for a in events.new_achievements] == ["items-10"]
    assert "badge-collector-10" in {b.id for b in events.new_badges}
    assert "badge-starter" not in {b.id for b in events.new_badges}


# ============================================================================
# Notification Tests
# ============================================================================

def test_notifications_order_and_text(make_item, categories):
    """Badges, then achievements, then level-up"""
    stats = calculate_collection_stats([make_item(name="a")], categories, 5)
    events = detect_unlocks(GamificationSnapshot(level=1), stats)
    notifications = build_notifications(events)

    types = [n.type for n in notifications]
    assert types[-1] == NotificationType.LEVELUP
    assert types.index(NotificationType.BADGE) < types.index(NotificationType.ACHIEVEMENT)

    starter = next(n for n in notifications if n.data.get("badge_id") == "badge-starter")
    assert starter.title == "バッジを獲得！"
    assert starter.body == "🚀 スターターを獲得しました！"

    level = notifications[-1]
    assert level.title == "レベルアップ！"
    assert level.body == f"レベル{stats.level.level}「{stats.level.title}」になりました！"


def test_no_notifications_without_events(make_item, categories):
    """Empty events give no notifications"""
    stats = calculate_collection_stats([], categories, 0)
    assert build_notifications(detect_unlocks(None, stats)) == []


def test_streak_notification():
    """Streak reminder template"""
    notification = create_streak_notification(6)
    assert notification.type == NotificationType.STREAK
    assert notification.title == "連続記録が途切れそう！"
    assert notification.body == "現在6日連続！今日もモノを記録して記録を伸ばそう"
    assert notification.data == {"current_streak": 6}


def test_weekly_summary_notification():
    """Weekly summary template"""
    notification = create_weekly_summary_notification(12, 3)
    assert notification.type == NotificationType.WEEKLY
    assert notification.title == "今週のコレクション"
    assert notification.body == "今週は12個のモノを記録しました！連続3日記録中"
