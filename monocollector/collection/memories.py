"""
Memories look-back

Picks items registered exactly one week, two weeks, one month, three months
and one year before today so the app can show "on this day" cards.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence
import logging

from pydantic import BaseModel, Field

from monocollector.models.item import Item
from monocollector.utils.datetime_helpers import to_calendar_date

logger = logging.getLogger(__name__)

# (days back, label)
MEMORY_WINDOWS = (
    (7, "1週間前"),
    (14, "2週間前"),
    (30, "1ヶ月前"),
    (90, "3ヶ月前"),
    (365, "1年前"),
)
ITEMS_PER_WINDOW = 3
RECENT_ACTIVITY_DAYS = 30


class MemoryItem(BaseModel):
    id: str
    name: str
    category: str
    icon: str
    generated_icon: Optional[str] = None
    created_at: datetime


class MemoryWindow(BaseModel):
    """Items registered on the day `days` ago"""
    period: str
    days: int
    items: List[MemoryItem]


class MemoriesResult(BaseModel):
    memories: List[MemoryWindow] = Field(default_factory=list)
    has_recent_activity: bool = False
    total_items: int = 0


def find_memories(items: Sequence[Item], now: Optional[datetime] = None) -> MemoriesResult:
    """
    Collect look-back windows for a collection

    Args:
        items: The user's items, in any order
        now: Reference time (defaults to the current local time)

    Returns:
        Windows that contain at least one item (oldest item first, at most
        3 per window), plus whether anything was added in the last 30 days
    """
    now = now or datetime.now()
    chronological = sorted(items, key=lambda i: i.created_at.timestamp())

    memories = []
    for days, label in MEMORY_WINDOWS:
        target = to_calendar_date(now - timedelta(days=days))
        matches = [i for i in chronological if to_calendar_date(i.created_at) == target]
        if not matches:
            continue
        memories.append(MemoryWindow(
            period=label,
            days=days,
            items=[
                MemoryItem(
                    id=i.id,
                    name=i.name,
                    category=i.category,
                    icon=i.icon,
                    generated_icon=i.generated_icon,
                    created_at=i.created_at,
                )
                for i in matches[:ITEMS_PER_WINDOW]
            ],
        ))

    recent_cutoff = (now - timedelta(days=RECENT_ACTIVITY_DAYS)).timestamp()
    has_recent = any(i.created_at.timestamp() >= recent_cutoff for i in items)

    total = sum(len(m.items) for m in memories)
    logger.debug(f"Memories: {total} items in {len(memories)} windows (recent activity: {has_recent})")

    return MemoriesResult(memories=memories, has_recent_activity=has_recent, total_items=total)
