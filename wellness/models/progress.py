"""Progress record and engine result models"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from wellness.models.badge import Badge, EarnedBadge
from wellness.models.reward import ExperienceReward
from wellness.utils.datetime_helpers import parse_activity_date

XP_PER_LEVEL = 100


class UserProgress(BaseModel):
    """Per-user progress record. Only the progress engine writes it."""
    user_id: str
    level: int = Field(default=1, ge=1)
    experience_points: int = Field(default=0, ge=0)
    total_tasks_completed: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    last_activity_date: Optional[date] = None

    @field_validator('last_activity_date', mode='before')
    @classmethod
    def normalize_activity_date(cls, v):
        """Backends may hand back timestamps; keep the calendar date only"""
        return parse_activity_date(v)


class LevelInfo(BaseModel):
    """Derived level display values"""
    current_level: int
    xp_in_current_level: int
    xp_to_next_level: int
    progress_percentage: float


class ProgressOverview(BaseModel):
    """Aggregate view: progress record, earned badges and unclaimed rewards"""
    progress: UserProgress
    badges: list[EarnedBadge] = Field(default_factory=list)
    unclaimed_rewards: list[ExperienceReward] = Field(default_factory=list)
    has_claimed_today: bool = False


class ActivityResult(BaseModel):
    """Outcome of an XP-granting activity"""
    progress: UserProgress
    xp_awarded: int = 0
    reason: Optional[str] = None
    leveled_up: bool = False
    new_badges: list[Badge] = Field(default_factory=list)
    reward: Optional[ExperienceReward] = None


class StreakClaimResult(ActivityResult):
    """Outcome of a daily streak claim"""
    already_claimed: bool = False
    previous_streak: int = 0
    streak_continued: bool = False
