"""Unit tests for EXP and leveling (monocollector/collection/level_system.py)"""
import pytest

from monocollector.collection.level_system import (
    LEVELS,
    build_level_table,
    calculate_exp,
    calculate_level,
    exp_to_next_level,
)
from monocollector.models.collection import Rarity


# ============================================================================
# Level Table Tests
# ============================================================================

def test_level_table_is_contiguous():
    """Each band starts where the previous one ends"""
    assert LEVELS[0].level == 1
    assert LEVELS[0].min_exp == 0
    for lower, upper in zip(LEVELS, LEVELS[1:]):
        assert lower.max_exp == upper.min_exp
        assert upper.level == lower.level + 1


def test_top_level_is_unbounded():
    """Only the last level has no max_exp"""
    assert LEVELS[-1].max_exp is None
    assert all(level.max_exp is not None for level in LEVELS[:-1])
    assert LEVELS[-1].level == 200


def test_titles_change_at_milestones():
    """Titles follow the milestone levels"""
    by_level = {lvl.level: lvl.title for lvl in LEVELS}
    assert by_level[1] == by_level[4] == "ビギナー"
    assert by_level[5] == "アマチュア"
    assert by_level[10] == "コレクター"
    assert by_level[200] == "∞コレクター"


def test_custom_table():
    """Smaller tables keep the same shape"""
    table = build_level_table(max_level=3, base=10)
    assert [(lvl.min_exp, lvl.max_exp) for lvl in table] == [(0, 10), (10, 40), (40, None)]


# ============================================================================
# Level Lookup Tests
# ============================================================================

@pytest.mark.parametrize("exp,expected", [
    (0, 1),
    (49, 1),
    (50, 2),
    (199, 2),
    (200, 3),
    (-10, 1),
    (10 ** 9, 200),
])
def test_calculate_level(exp, expected):
    """EXP maps to the band containing it"""
    assert calculate_level(exp).level == expected


def test_exp_to_next_level():
    """Remaining EXP to the next band, None at the top"""
    assert exp_to_next_level(0) == 50
    assert exp_to_next_level(120) == 80
    assert exp_to_next_level(10 ** 9) is None


# ============================================================================
# EXP Tests
# ============================================================================

def test_zero_exp_for_empty_collection():
    """No items and no streak means no EXP"""
    assert calculate_exp([], 0) == 0


def test_exp_formula(make_item):
    """Per item, rarity bonus, per category and streak terms add up"""
    items = [make_item(name="a", category="food"), make_item(name="b", category="books")]
    exp = calculate_exp(items, 3, rarities=[Rarity.COMMON, Rarity.LEGENDARY])
    assert exp == 2 * 10 + 25 + 2 * 5 + 2 * 3 * 3


def test_negative_streak_counts_as_zero(make_item):
    """Negative streak adds nothing"""
    items = [make_item(name="a")]
    assert calculate_exp(items, -4, rarities=[Rarity.COMMON]) == calculate_exp(items, 0, rarities=[Rarity.COMMON])


def test_single_item_stays_level_one(make_item):
    """Even a legendary first item with streak 1 is below level 2"""
    items = [make_item(name="a")]
    exp = calculate_exp(items, 1, rarities=[Rarity.LEGENDARY])
    assert exp == 42
    assert calculate_level(exp).level == 1
