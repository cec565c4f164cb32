"""
Daily Streak Tracking

A single streak per user, advanced by an explicit daily claim.

Logic:
- Claim on the day after the last activity: continue (+1)
- Claim after a longer gap, or first ever claim: reset to 1
- Claim on the same day as the last activity: refused upstream; if it is
  evaluated anyway it falls through to the reset branch
"""

from datetime import date
from typing import NamedTuple, Optional
import logging

from wellness.utils.datetime_helpers import days_between

logger = logging.getLogger(__name__)


class StreakTransition(NamedTuple):
    streak_days: int
    previous_streak: int
    continued: bool
    days_since_last: Optional[int]


def has_claimed_today(last_activity_date: Optional[date], today: date) -> bool:
    """True when the last recorded activity happened on today's calendar date"""
    return last_activity_date is not None and last_activity_date == today


def next_streak(current_streak: int, last_activity_date: Optional[date], today: date) -> StreakTransition:
    """
    Compute the streak value after a claim made on ``today``

    Args:
        current_streak: Stored streak_days
        last_activity_date: Stored last activity date (None if never active)
        today: Calendar date of the claim

    Returns:
        StreakTransition with the new streak value
    """
    gap = days_between(last_activity_date, today)

    if gap == 1:
        new_streak = current_streak + 1
        continued = True
    else:
        new_streak = 1
        continued = False
        if gap == 0:
            logger.warning("Streak claim evaluated on an already-active day; resetting to 1")

    return StreakTransition(
        streak_days=new_streak,
        previous_streak=current_streak,
        continued=continued,
        days_since_last=gap,
    )
