"""Unit tests for collection badges (monocollector/collection/badge_system.py)"""
from datetime import datetime, timedelta

from monocollector.collection.badge_system import (
    ALL_BADGES,
    BADGES_BY_ID,
    BadgeContext,
    evaluate_badges,
)
from monocollector.models.achievement import BadgeTier
from monocollector.models.collection import Rarity


def _badge_ids(items, categories, streak=0, rarities=None):
    ctx = BadgeContext.build(items, categories, streak, rarities=rarities)
    return {b.id for b in evaluate_badges(ctx)}


# ============================================================================
# Table Tests
# ============================================================================

def test_badge_ids_are_unique():
    """No duplicate ids in the badge table"""
    assert len(BADGES_BY_ID) == len(ALL_BADGES)


def test_badge_tiers_are_valid():
    """Every badge carries a known tier"""
    assert all(isinstance(b.tier, BadgeTier) for b in ALL_BADGES)
    assert BADGES_BY_ID["badge-infinity"].tier == BadgeTier.DIAMOND


# ============================================================================
# Zero State & Counts
# ============================================================================

def test_empty_collection_has_no_badges(categories):
    """Nothing is unlocked for an empty collection"""
    assert _badge_ids([], categories) == set()


def test_empty_categories_do_not_unlock_perfectionist(make_item):
    """All-categories badges need at least one category"""
    ids = _badge_ids([make_item()], [])
    assert "badge-perfectionist" not in ids
    assert "badge-even-spread" not in ids


def test_first_item_badges(make_item, categories):
    """One item unlocks the starter badges"""
    ids = _badge_ids([make_item()], categories)
    assert {"badge-starter", "badge-first-item"} <= ids
    assert "badge-collector-10" not in ids


def test_streak_badges(make_item, categories):
    """Streak badges follow the streak argument"""
    ids = _badge_ids([make_item()], categories, streak=7)
    assert {"badge-three-days", "badge-five-days", "badge-dedicated"} <= ids
    assert "badge-ten-days" not in ids


# ============================================================================
# Category Badges
# ============================================================================

def test_perfectionist_needs_every_category(make_item, categories):
    """One item in each category unlocks perfectionist"""
    items = [make_item(name=f"n{i}", category=c.id) for i, c in enumerate(categories)]
    ids = _badge_ids(items, categories)
    assert {"badge-perfectionist", "badge-organizer", "badge-multi-category"} <= ids
    assert "badge-perfectionist" not in _badge_ids(items[:-1], categories)


def test_same_category_run(make_item, categories, base_time):
    """Five consecutive items in one category"""
    items = [make_item(name=f"n{i}", category="books", created_at=base_time + timedelta(minutes=i)) for i in range(5)]
    assert "badge-same-category-row" in _badge_ids(items, categories)


def test_category_switcher(make_item, categories, base_time):
    """Five consecutive items in five different categories"""
    cats = ["food", "books", "toys", "clothes", "sports"]
    items = [make_item(name=f"n{i}", category=c, created_at=base_time + timedelta(minutes=i)) for i, c in enumerate(cats)]
    ids = _badge_ids(items, categories)
    assert "badge-category-switcher" in ids
    assert "badge-same-category-row" not in ids


# ============================================================================
# Detail Badges
# ============================================================================

def test_photographer_needs_ten_items_with_images(make_item, categories):
    """All items must have a photo, and at least ten of them"""
    items = [make_item(name=f"n{i}", image="data:image/png;base64,AA==") for i in range(10)]
    assert "badge-photographer" in _badge_ids(items, categories)
    assert "badge-photographer" not in _badge_ids(items[:9], categories)
    assert "badge-photographer" not in _badge_ids(items + [make_item(name="plain")], categories)


def test_location_badges(make_item, categories):
    """Distinct storage locations unlock location badges"""
    items = [make_item(name=f"n{i}", location=f"棚{i}") for i in range(5)]
    assert "badge-location-starter" in _badge_ids(items, categories)


def test_icon_badges(make_item, categories):
    """Items with generated icons unlock icon badges"""
    items = [make_item(name=f"n{i}", generated_icon="data:image/svg+xml;base64,AA==") for i in range(10)]
    ids = _badge_ids(items, categories)
    assert {"badge-icon-creator", "badge-icon-gallery"} <= ids


def test_tag_variety(make_item, categories):
    """Unique tags are counted across items"""
    items = [make_item(name=f"n{i}", tags=[f"t{i}", f"u{i}"]) for i in range(5)]
    ids = _badge_ids(items, categories)
    assert {"badge-tag-starter", "badge-tag-variety"} <= ids


# ============================================================================
# Rarity Badges
# ============================================================================

def test_rarity_master_uses_given_rarities(make_item, categories):
    """Precomputed rarities drive rarity badges"""
    items = [make_item(name=f"n{i}") for i in range(5)]
    rarities = list(Rarity)
    assert "badge-rarity-master" in _badge_ids(items, categories, rarities=rarities)
    assert "badge-rarity-master" not in _badge_ids(items, categories, rarities=[Rarity.COMMON] * 5)


# ============================================================================
# Time Badges
# ============================================================================

def test_all_hours(make_item, categories):
    """Items in morning, afternoon, evening and night"""
    day = datetime(2026, 10, 19)
    items = [make_item(name=f"n{h}", created_at=day.replace(hour=h)) for h in (7, 13, 18, 23)]
    assert "badge-all-hours" in _badge_ids(items, categories)
    assert "badge-all-hours" not in _badge_ids(items[:3], categories)


def test_all_days(make_item, categories):
    """Items on every weekday"""
    monday = datetime(2026, 10, 19, 10)
    items = [make_item(name=f"n{d}", created_at=monday + timedelta(days=d)) for d in range(7)]
    assert "badge-all-days" in _badge_ids(items, categories)


def test_quick_start(make_item, categories, base_time):
    """Five items within a day of the first one"""
    fast = [make_item(name=f"n{i}", created_at=base_time + timedelta(hours=i * 4)) for i in range(5)]
    slow = [make_item(name=f"n{i}", created_at=base_time + timedelta(days=i)) for i in range(5)]
    assert "badge-quick-start" in _badge_ids(fast, categories)
    assert "badge-quick-start" not in _badge_ids(slow, categories)


def test_daily_ten(make_item, categories, base_time):
    """Ten items on one calendar day"""
    items = [make_item(name=f"n{i}", created_at=base_time + timedelta(minutes=i)) for i in range(10)]
    assert "badge-daily-10" in _badge_ids(items, categories)


def test_badges_are_pure(make_item, categories, base_time):
    """Same inputs give the same badges"""
    items = [make_item(name=f"n{i}", created_at=base_time - timedelta(days=i)) for i in range(12)]
    assert _badge_ids(items, categories, streak=3) == _badge_ids(items, categories, streak=3)
