"""Data models for progress, badges and rewards"""
from wellness.models.badge import Badge, BadgeRequirement, EarnedBadge, RequirementType
from wellness.models.reward import (
    ExperiencePayload,
    ExperienceReward,
    RewardType,
    parse_reward,
)
from wellness.models.progress import (
    ActivityResult,
    LevelInfo,
    ProgressOverview,
    StreakClaimResult,
    UserProgress,
)

__all__ = [
    "Badge",
    "BadgeRequirement",
    "EarnedBadge",
    "RequirementType",
    "ExperiencePayload",
    "ExperienceReward",
    "RewardType",
    "parse_reward",
    "ActivityResult",
    "LevelInfo",
    "ProgressOverview",
    "StreakClaimResult",
    "UserProgress",
]
