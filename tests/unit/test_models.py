"""Unit tests for progress, badge and reward models"""
import pytest
from datetime import date
from pydantic import ValidationError as PydanticValidationError

from wellness.exceptions import ValidationError
from wellness.models.badge import BadgeRequirement, RequirementType
from wellness.models.progress import UserProgress
from wellness.models.reward import ExperienceReward, RewardType, is_reserved, parse_reward


def _reward_row(**overrides):
    row = {
        "id": "reward-1",
        "user_id": "user-123",
        "reward_type": "experience",
        "reward_data": {"amount": 10, "reason": "Task completed"},
        "claimed": False,
        "earned_at": "2024-01-15T12:00:00+00:00",
    }
    row.update(overrides)
    return row


# ============================================================================
# UserProgress Tests
# ============================================================================

def test_progress_defaults():
    progress = UserProgress(user_id="user-123")

    assert progress.level == 1
    assert progress.experience_points == 0
    assert progress.total_tasks_completed == 0
    assert progress.streak_days == 0
    assert progress.last_activity_date is None


def test_progress_parses_iso_date():
    """Test REST backends' ISO date strings become calendar dates"""
    progress = UserProgress.model_validate({"user_id": "u", "last_activity_date": "2024-01-14"})

    assert progress.last_activity_date == date(2024, 1, 14)


def test_progress_rejects_negative_values():
    with pytest.raises(PydanticValidationError):
        UserProgress(user_id="u", experience_points=-1)
    with pytest.raises(PydanticValidationError):
        UserProgress(user_id="u", level=0)


def test_progress_ignores_extra_columns():
    progress = UserProgress.model_validate({"user_id": "u", "created_at": "2024-01-01T00:00:00Z"})

    assert progress.user_id == "u"


# ============================================================================
# Reward Parsing Tests
# ============================================================================

def test_parse_experience_reward():
    reward = parse_reward(_reward_row())

    assert isinstance(reward, ExperienceReward)
    assert reward.reward_data.amount == 10
    assert reward.reward_data.reason == "Task completed"
    assert reward.claimed is False


def test_parse_reward_with_enum_tag():
    reward = parse_reward(_reward_row(reward_type=RewardType.EXPERIENCE.value))

    assert reward.reward_type == "experience"


def test_parse_reward_unknown_type():
    with pytest.raises(ValidationError) as exc_info:
        parse_reward(_reward_row(reward_type="coupon"))

    assert exc_info.value.field == "reward_type"


def test_parse_reward_reserved_type():
    """Test reserved tags without a payload schema are rejected"""
    with pytest.raises(ValidationError):
        parse_reward(_reward_row(reward_type="pet_happiness", reward_data={"amount": 3}))


def test_parse_reward_malformed_payload():
    with pytest.raises(ValidationError) as exc_info:
        parse_reward(_reward_row(reward_data={"amount": 0, "reason": "Task completed"}))

    assert exc_info.value.field == "reward_data"


# ============================================================================
# Badge Requirement Tests
# ============================================================================

@pytest.mark.parametrize("requirement_type, value, expected", [
    (RequirementType.TASKS, 1, "Complete 1 task"),
    (RequirementType.TASKS, 10, "Complete 10 tasks"),
    (RequirementType.STREAK, 3, "3 day streak"),
    (RequirementType.LEVEL, 5, "Reach level 5"),
    (RequirementType.MOOD_ENTRIES, 7, "Track your mood 7 times"),
    (RequirementType.JOURNAL_ENTRIES, 10, "Write 10 journal entries"),
])
def test_requirement_describe(requirement_type, value, expected):
    assert BadgeRequirement(type=requirement_type, value=value).describe() == expected


def test_requirement_threshold_positive():
    with pytest.raises(PydanticValidationError):
        BadgeRequirement(type=RequirementType.TASKS, value=0)


def test_progress_truncates_timestamps():
    progress = UserProgress.model_validate({"user_id": "u", "last_activity_date": "2024-01-14T23:10:00+00:00"})

    assert progress.last_activity_date == date(2024, 1, 14)


def test_is_reserved():
    assert is_reserved(_reward_row(reward_type="pet_happiness")) is True
    assert is_reserved(_reward_row(reward_type="background")) is True
    assert is_reserved(_reward_row()) is False
    assert is_reserved(_reward_row(reward_type="coupon")) is False
