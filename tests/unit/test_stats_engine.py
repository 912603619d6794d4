"""Unit tests for the collection stats engine (monocollector/collection/stats_engine.py)"""
from datetime import datetime, timedelta

from monocollector.collection.achievement_system import ALL_ACHIEVEMENTS
from monocollector.collection.stats_engine import build_category_breakdown, calculate_collection_stats
from monocollector.models.achievement import AchievementCategory
from monocollector.models.collection import Rarity


# ============================================================================
# Zero State
# ============================================================================

def test_empty_collection(categories):
    """No items: zero EXP, level 1, nothing unlocked, all-zero histogram"""
    stats = calculate_collection_stats([], categories, 0)

    assert stats.total_items == 0
    assert stats.total_exp == 0
    assert stats.level.level == 1
    assert stats.category_count == 0
    assert stats.unlocked_achievements == []
    assert stats.unlocked_badges == []
    assert stats.category_breakdown == []
    assert stats.rarity_breakdown == {r: 0 for r in Rarity}


def test_empty_collection_with_no_categories():
    """Empty categories list is accepted"""
    stats = calculate_collection_stats([], [], 0)
    assert stats.level.level == 1
    assert stats.unlocked_badges == []


# ============================================================================
# Collection Scenarios
# ============================================================================

def test_single_apple(make_item, categories):
    """One food item with streak 1"""
    stats = calculate_collection_stats([make_item(name="りんご", category="food")], categories, 1)

    assert [(c.category, c.icon, c.count) for c in stats.category_breakdown] == [("食品・食材", "🍎", 1)]
    assert sum(stats.rarity_breakdown.values()) == 1
    assert stats.level.level == 1
    assert [a.id for a in stats.unlocked_achievements] == ["items-1"]
    assert stats.streak == 1


def test_ten_items_three_categories_streak_seven(ten_items_three_categories, categories):
    """Thresholds up to the counters unlock, the rest stay locked"""
    stats = calculate_collection_stats(ten_items_three_categories, categories, 7)
    counters = {
        AchievementCategory.ITEMS: 10,
        AchievementCategory.CATEGORY: 3,
        AchievementCategory.STREAK: 7,
    }

    unlocked = {a.id for a in stats.unlocked_achievements}
    expected = {a.id for a in ALL_ACHIEVEMENTS if a.threshold <= counters[a.category]}
    assert unlocked == expected
    assert [a.id for a in stats.next_achievements] == ["category-4", "category-5", "streak-10"]
    assert stats.category_count == 3


# ============================================================================
# Properties
# ============================================================================

def test_monotonic_growth(make_item, categories, base_time):
    """Adding items never lowers EXP or level, nor removes unlocks"""
    cats = [c.id for c in categories]
    items = []
    previous = calculate_collection_stats(items, categories, 1)

    for i in range(40):
        items.append(make_item(name=f"モノ{i}", category=cats[i % 5], created_at=base_time + timedelta(minutes=i)))
        current = calculate_collection_stats(items, categories, 1)

        assert current.total_exp >= previous.total_exp
        assert current.level.level >= previous.level.level
        assert {a.id for a in previous.unlocked_achievements} <= {a.id for a in current.unlocked_achievements}
        assert {b.id for b in previous.unlocked_badges} <= {b.id for b in current.unlocked_badges}
        previous = current


def test_idempotent(ten_items_three_categories, categories):
    """Same inputs give equal stats"""
    first = calculate_collection_stats(ten_items_three_categories, categories, 4)
    second = calculate_collection_stats(ten_items_three_categories, categories, 4)
    assert first == second


def test_order_of_items_does_not_matter(ten_items_three_categories, categories):
    """Stats ignore input order"""
    forward = calculate_collection_stats(ten_items_three_categories, categories, 2)
    backward = calculate_collection_stats(list(reversed(ten_items_three_categories)), categories, 2)
    assert forward == backward


def test_partition_completeness(ten_items_three_categories, categories):
    """Unlocked and locked together cover the table exactly once"""
    stats = calculate_collection_stats(ten_items_three_categories, categories, 7)
    unlocked = {a.id for a in stats.unlocked_achievements}
    assert len(unlocked) == len(stats.unlocked_achievements)
    assert not unlocked & {a.id for a in stats.next_achievements}


def test_histogram_conservation(make_item, categories, base_time):
    """Rarity counts sum to item count"""
    items = [make_item(name=f"x{i}", created_at=base_time - timedelta(days=i)) for i in range(57)]
    stats = calculate_collection_stats(items, categories, 0)
    assert sum(stats.rarity_breakdown.values()) == 57
    assert set(stats.rarity_breakdown) == set(Rarity)


def test_negative_streak_clamps(make_item, categories):
    """Negative streak is reported as 0"""
    stats = calculate_collection_stats([make_item()], categories, -3)
    assert stats.streak == 0


def test_level_up_with_long_streak(make_item, categories):
    """Streak EXP can lift a small collection past level 1"""
    stats = calculate_collection_stats([make_item(name="a")], categories, 5)
    assert stats.total_exp >= 65
    assert stats.level.level >= 2


# ============================================================================
# Category Breakdown
# ============================================================================

def test_breakdown_follows_category_order(make_item, categories):
    """Breakdown order is category order, not item order"""
    items = [make_item(name="本", category="books"), make_item(name="パン", category="food"),
             make_item(name="漫画", category="books")]
    breakdown = build_category_breakdown(items, categories)
    assert [(c.category, c.count) for c in breakdown] == [("食品・食材", 1), ("本・書籍", 2)]


def test_breakdown_omits_unknown_categories(make_item, categories):
    """Items in unknown categories are counted but not listed"""
    items = [make_item(name="謎", category="mystery"), make_item(name="パン", category="food")]
    stats = calculate_collection_stats(items, categories, 0)
    assert [c.category for c in stats.category_breakdown] == ["食品・食材"]
    assert stats.category_count == 2
    assert stats.total_items == 2


def test_mixed_timezones_do_not_raise(make_item, categories):
    """Aware and naive timestamps can be mixed"""
    from datetime import timezone
    items = [
        make_item(name="a", created_at=datetime(2026, 5, 1, 9, 0)),
        make_item(name="b", created_at=datetime(2026, 5, 2, 9, 0, tzinfo=timezone.utc)),
    ]
    stats = calculate_collection_stats(items, categories, 0)
    assert stats.total_items == 2
