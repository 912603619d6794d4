"""
Date helpers for collection streaks and calendar-based badges

Item timestamps are compared by their own calendar date: an aware
timestamp keeps its offset, a naive one is taken as local wall time.
"""

import logging
from datetime import datetime, date
from typing import Optional, Union

logger = logging.getLogger(__name__)


def to_calendar_date(value: Union[datetime, date]) -> date:
    """Calendar date of a timestamp (dates pass through unchanged)"""
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve_today(today: Optional[date] = None) -> date:
    """Use the given day, or the local current date"""
    return today if today is not None else date.today()


def season_of(month: int) -> str:
    """Meteorological season for a month number"""
    if month in (3, 4, 5):
        return "spring"
    if month in (6, 7, 8):
        return "summer"
    if month in (9, 10, 11):
        return "autumn"
    return "winter"
