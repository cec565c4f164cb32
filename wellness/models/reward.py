"""
Reward ledger models

Rewards are a tagged union keyed by ``reward_type``. Each tag has a fixed
payload schema; tags without a registered schema are reserved and rejected
when read back from storage.
"""
from enum import Enum
from datetime import datetime
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field, PositiveInt
from pydantic import ValidationError as PydanticValidationError

from wellness.exceptions import ValidationError


class RewardType(str, Enum):
    """Reward tags. Only EXPERIENCE is issued by the progress engine."""
    EXPERIENCE = "experience"
    BADGE = "badge"
    PET_HAPPINESS = "pet_happiness"
    BACKGROUND = "background"


class ExperiencePayload(BaseModel):
    """Payload for experience rewards"""
    amount: PositiveInt
    reason: str = Field(..., min_length=1)


class ExperienceReward(BaseModel):
    """XP grant awaiting (or past) user acknowledgement"""
    id: str
    user_id: str
    reward_type: Literal["experience"] = "experience"
    reward_data: ExperiencePayload
    claimed: bool = False
    earned_at: Optional[datetime] = None


# Payload schema per tag
REWARD_MODELS: dict[RewardType, type[BaseModel]] = {
    RewardType.EXPERIENCE: ExperienceReward,
}

# Tags a future writer may use; readers skip them until a schema is registered
RESERVED_TYPES = frozenset(t.value for t in RewardType if t not in REWARD_MODELS)


def is_reserved(row: dict[str, Any]) -> bool:
    """True for rows tagged with a known tag that has no payload schema yet"""
    return row.get("reward_type") in RESERVED_TYPES


def parse_reward(row: dict[str, Any]) -> ExperienceReward:
    """
    Build a typed reward from a stored row

    Raises:
        ValidationError: unknown or reserved reward_type, or a payload that
            does not match the tag's schema
    """
    raw_type = row.get("reward_type")
    try:
        reward_type = RewardType(raw_type)
    except ValueError:
        raise ValidationError(
            f"Unknown reward type '{raw_type}'",
            field="reward_type",
            value=raw_type
        )

    model = REWARD_MODELS.get(reward_type)
    if model is None:
        raise ValidationError(
            f"Reward type '{reward_type.value}' has no payload schema",
            field="reward_type",
            value=reward_type.value
        )

    try:
        return model.model_validate(row)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Malformed {reward_type.value} reward: {e.error_count()} invalid field(s)",
            field="reward_data",
            value=row.get("reward_data")
        )
