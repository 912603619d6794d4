"""
Collection streak tracking

A streak is the number of consecutive calendar days, counting back from
today, on which at least one item was added. Today is allowed to be empty
(the user may still add something), so a streak survives until the first
fully missed day.
"""

from datetime import date, timedelta
from typing import Optional, Sequence
import logging

from monocollector import config
from monocollector.models.item import Item
from monocollector.utils.datetime_helpers import resolve_today, to_calendar_date

logger = logging.getLogger(__name__)

NO_ITEMS_DAYS = 999


def _item_dates(items: Sequence[Item]) -> set[date]:
    return {to_calendar_date(item.created_at) for item in items}


def calculate_streak(
    items: Sequence[Item],
    today: Optional[date] = None,
    window: int = config.STREAK_WINDOW_DAYS,
) -> int:
    """
    Count consecutive days with new items, looking back at most `window` days

    Args:
        items: The user's items
        today: Day to count back from (defaults to the local current date)
        window: Maximum number of days to scan

    Returns:
        Streak length in days
    """
    today = resolve_today(today)
    dates = _item_dates(items)

    streak = 0
    for offset in range(max(0, window)):
        day = today - timedelta(days=offset)
        if day in dates:
            streak += 1
        elif offset > 0:
            break

    return streak


def has_added_today(items: Sequence[Item], today: Optional[date] = None) -> bool:
    """Whether at least one item was added today"""
    return resolve_today(today) in _item_dates(items)


def days_since_last_item(items: Sequence[Item], today: Optional[date] = None) -> int:
    """Days since the newest item was added; 999 when there are no items"""
    if not items:
        return NO_ITEMS_DAYS

    latest = max(_item_dates(items))
    return max(0, (resolve_today(today) - latest).days)
