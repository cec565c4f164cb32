"""
Date handling for progress tracking

Activity dates are calendar dates in UTC with no time-of-day component.
Streaks compare calendar days, never rolling 24-hour windows.
"""

from datetime import date, datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo


def now_utc() -> datetime:
    """
    Get current datetime in UTC (timezone-aware)

    Returns:
        Current datetime in UTC with timezone info
    """
    return datetime.now(ZoneInfo("UTC"))


def today_utc() -> date:
    """Current calendar date in UTC"""
    return now_utc().date()


def parse_activity_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Normalize a stored activity date

    Backends return dates as ``date`` objects (psycopg), ISO strings (REST)
    or occasionally full timestamps. All are reduced to a calendar date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def days_between(earlier: Optional[date], later: date) -> Optional[int]:
    """Calendar-day difference, or None when there is no earlier date"""
    if earlier is None:
        return None
    return (later - earlier).days
