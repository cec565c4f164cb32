"""
Gamification rules for the wellness dashboard

- XP and leveling (100 XP per level)
- Daily streak transitions
- Static badge catalog and threshold checks

Storage-facing orchestration lives in wellness.services.progress_engine.
"""

from wellness.gamification.xp_system import calculate_level, calculate_level_from_xp, get_xp_for_activity
from wellness.gamification.streak_system import has_claimed_today, next_streak
from wellness.gamification.badge_catalog import BADGES, find_qualifying_badges, get_badge

__all__ = [
    "calculate_level",
    "calculate_level_from_xp",
    "get_xp_for_activity",
    "has_claimed_today",
    "next_streak",
    "BADGES",
    "find_qualifying_badges",
    "get_badge",
]
