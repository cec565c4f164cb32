"""
XP and Leveling System

Flat leveling curve: every 100 XP is one level.

    level = floor(experience_points / 100) + 1

XP Award Rules:
- Task completed: 10 XP
- Mood tracked: 5 XP
- Journal entry: 15 XP
- Wordle completed: 20 XP
- Daily streak claimed: 20 XP
"""

from typing import Dict, NamedTuple
import logging

from wellness.models.progress import XP_PER_LEVEL, LevelInfo

logger = logging.getLogger(__name__)


class ActivityAward(NamedTuple):
    amount: int
    reason: str


ACTIVITY_XP: Dict[str, ActivityAward] = {
    "task": ActivityAward(10, "Task completed"),
    "mood": ActivityAward(5, "Mood tracked"),
    "journal": ActivityAward(15, "Journal entry"),
    "wordle": ActivityAward(20, "Wordle completed"),
    "streak": ActivityAward(20, "Daily streak claimed"),
}


def calculate_level(total_xp: int) -> int:
    """Level for a running XP total"""
    return total_xp // XP_PER_LEVEL + 1


def calculate_level_from_xp(total_xp: int) -> LevelInfo:
    """
    Calculate level and progress-bar values from total XP

    XP to next level is measured against the level boundary, so a user at
    exactly 100 XP is level 2 with 100 XP to go.
    """
    level = calculate_level(total_xp)
    xp_in_level = total_xp % XP_PER_LEVEL

    return LevelInfo(
        current_level=level,
        xp_in_current_level=xp_in_level,
        xp_to_next_level=level * XP_PER_LEVEL - total_xp,
        progress_percentage=xp_in_level / XP_PER_LEVEL * 100,
    )


def get_xp_for_activity(activity_type: str) -> ActivityAward:
    """
    XP amount and ledger reason for an activity type

    Raises:
        KeyError: unknown activity type
    """
    return ACTIVITY_XP[activity_type]
