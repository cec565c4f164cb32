"""Pydantic models for API request/response validation"""
from typing import Optional, List
from pydantic import BaseModel, Field, PositiveInt
from datetime import datetime

from wellness.models.badge import Badge
from wellness.models.progress import LevelInfo, UserProgress
from wellness.models.reward import ExperienceReward


class ActivityCountRequest(BaseModel):
    """Optional running count sent with mood/journal activities"""
    count: Optional[PositiveInt] = Field(
        default=None,
        description="Total entries so far, including this one; enables the matching badges"
    )


class ProgressResponse(BaseModel):
    """Aggregate progress view"""
    progress: UserProgress
    level_info: LevelInfo
    earned_badge_ids: List[str]
    unclaimed_rewards: List[ExperienceReward]
    has_claimed_today: bool


class ActivityResponse(BaseModel):
    """Result of an XP-granting activity"""
    progress: UserProgress
    level_info: LevelInfo
    xp_awarded: int
    reason: Optional[str] = None
    leveled_up: bool
    new_badges: List[Badge]
    reward: Optional[ExperienceReward] = None


class StreakClaimResponse(ActivityResponse):
    """Result of a daily streak claim"""
    already_claimed: bool
    previous_streak: int
    streak_continued: bool


class RewardListResponse(BaseModel):
    rewards: List[ExperienceReward]


class BadgeStatus(BaseModel):
    """Catalog entry with the user's earned state"""
    badge: Badge
    requirement_text: str
    earned: bool
    earned_at: Optional[datetime] = None


class BadgeCatalogResponse(BaseModel):
    badges: List[BadgeStatus]
    total_earned: int
    total_badges: int


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    storage: str
    timestamp: datetime
