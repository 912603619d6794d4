"""
Collection gamification for MonoCollector

This package turns a list of items into a progress view:
- Rarity classification
- EXP and leveling
- Achievements and badges
- Streak tracking and the memories look-back
- Unlock detection and notification payloads
"""

from monocollector.collection.rarity import determine_rarity
from monocollector.collection.level_system import calculate_exp, calculate_level
from monocollector.collection.streak_system import calculate_streak
from monocollector.collection.memories import find_memories
from monocollector.collection.stats_engine import calculate_collection_stats
from monocollector.collection.unlock_tracker import UnlockTracker, detect_unlocks, build_notifications

__all__ = [
    "determine_rarity",
    "calculate_exp",
    "calculate_level",
    "calculate_streak",
    "find_memories",
    "calculate_collection_stats",
    "UnlockTracker",
    "detect_unlocks",
    "build_notifications",
]
