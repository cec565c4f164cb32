"""
Badge Catalog

Static, ordered badge definitions. Catalog order is the award order when
several badges qualify at once.

Each badge measures exactly one dimension:
- tasks: total_tasks_completed
- streak: streak_days
- level: level
- mood_entries / journal_entries: running counts supplied by the caller
"""

from typing import Iterable, Mapping, Optional
import logging

from wellness.models.badge import Badge, BadgeRequirement, RequirementType
from wellness.models.progress import UserProgress

logger = logging.getLogger(__name__)


def _badge(id: str, name: str, description: str, icon: str, color: str,
           type: RequirementType, value: int) -> Badge:
    return Badge(
        id=id,
        name=name,
        description=description,
        icon=icon,
        color=color,
        requirement=BadgeRequirement(type=type, value=value),
    )


BADGES: tuple[Badge, ...] = (
    _badge("first_task", "Getting Started", "Complete your first task",
           "🎯", "bg-blue-500", RequirementType.TASKS, 1),
    _badge("task_master", "Task Master", "Complete 10 tasks",
           "⭐", "bg-yellow-500", RequirementType.TASKS, 10),
    _badge("productivity_hero", "Productivity Hero", "Complete 50 tasks",
           "🏆", "bg-gold-500", RequirementType.TASKS, 50),
    _badge("streak_starter", "Streak Starter", "Maintain a 3-day streak",
           "🔥", "bg-orange-500", RequirementType.STREAK, 3),
    _badge("consistency_king", "Consistency King", "Maintain a 7-day streak",
           "👑", "bg-purple-500", RequirementType.STREAK, 7),
    _badge("level_up", "Level Up", "Reach level 5",
           "📈", "bg-green-500", RequirementType.LEVEL, 5),
    _badge("mood_tracker", "Mood Tracker", "Track your mood 7 times",
           "😊", "bg-pink-500", RequirementType.MOOD_ENTRIES, 7),
    _badge("journal_writer", "Journal Writer", "Write 10 journal entries",
           "📝", "bg-indigo-500", RequirementType.JOURNAL_ENTRIES, 10),
)

_BADGES_BY_ID = {badge.id: badge for badge in BADGES}


def get_badge(badge_id: str) -> Optional[Badge]:
    return _BADGES_BY_ID.get(badge_id)


def dimension_value(
    requirement_type: RequirementType,
    progress: UserProgress,
    counts: Mapping[RequirementType, int]
) -> Optional[int]:
    """
    Current value of a badge dimension

    Returns None when the dimension is not measurable from what the caller
    supplied (mood/journal counts absent), so the badge is skipped rather
    than treated as zero progress.
    """
    if requirement_type == RequirementType.TASKS:
        return progress.total_tasks_completed
    if requirement_type == RequirementType.STREAK:
        return progress.streak_days
    if requirement_type == RequirementType.LEVEL:
        return progress.level
    return counts.get(requirement_type)


def find_qualifying_badges(
    progress: UserProgress,
    earned_ids: Iterable[str],
    dimensions: Iterable[RequirementType],
    counts: Optional[Mapping[RequirementType, int]] = None
) -> list[Badge]:
    """
    Badges newly qualified for, in catalog order

    Args:
        progress: Progress snapshot after the triggering update
        earned_ids: Badge ids the user already holds
        dimensions: Dimensions the caller wants evaluated
        counts: Caller-supplied running counts for mood/journal dimensions

    Returns:
        Unearned badges whose threshold is met
    """
    earned = set(earned_ids)
    wanted = set(dimensions)
    counts = counts or {}
    qualifying = []

    for badge in BADGES:
        if badge.id in earned or badge.requirement.type not in wanted:
            continue

        current = dimension_value(badge.requirement.type, progress, counts)
        if current is None:
            continue

        if current >= badge.requirement.value:
            qualifying.append(badge)

    return qualifying
