"""Badge models for gamification"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, PositiveInt
from typing import Optional
from datetime import datetime


class RequirementType(str, Enum):
    """Progress dimension a badge is measured against"""
    TASKS = "tasks"
    STREAK = "streak"
    LEVEL = "level"
    MOOD_ENTRIES = "mood_entries"
    JOURNAL_ENTRIES = "journal_entries"


class BadgeRequirement(BaseModel):
    """Single-dimension threshold: earned once the dimension reaches value"""
    model_config = ConfigDict(frozen=True)

    type: RequirementType
    value: PositiveInt

    def describe(self) -> str:
        """Human-readable requirement text for badge listings"""
        if self.type == RequirementType.TASKS:
            return f"Complete {self.value} task{'s' if self.value != 1 else ''}"
        if self.type == RequirementType.STREAK:
            return f"{self.value} day streak"
        if self.type == RequirementType.LEVEL:
            return f"Reach level {self.value}"
        if self.type == RequirementType.MOOD_ENTRIES:
            return f"Track your mood {self.value} times"
        return f"Write {self.value} journal entries"


class Badge(BaseModel):
    """Badge definition (static catalog entry, never persisted)"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    color: str
    requirement: BadgeRequirement


class EarnedBadge(BaseModel):
    """A badge a user holds. Inserted once per (user_id, badge_id), never updated."""
    id: Optional[str] = None
    user_id: str
    badge_id: str
    earned_at: Optional[datetime] = None
