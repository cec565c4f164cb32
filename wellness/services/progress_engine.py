"""
ProgressEngine - Gamification Business Logic

Turns discrete user activities (task completed, mood tracked, journal
written, word game solved, daily streak claimed) into durable changes to
the progress record, the earned-badge set and the reward ledger.

Storage is reached only through the injected PersistenceGateway. Each
operation reads the progress record, computes the new state and writes it
back as a single partial update. There is no version check: two activities
racing for the same user can lose an update, and a failure after the
progress write leaves the record updated without its badges or reward.
Failures are raised to the caller, never swallowed.
"""

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from wellness.db.gateway import (
    BADGES_TABLE,
    PROGRESS_TABLE,
    REWARDS_TABLE,
    PersistenceGateway,
)
from wellness.exceptions import NotFoundError, ValidationError
from wellness.gamification.badge_catalog import find_qualifying_badges
from wellness.gamification.streak_system import has_claimed_today, next_streak
from wellness.gamification.xp_system import (
    calculate_level,
    calculate_level_from_xp,
    get_xp_for_activity,
)
from wellness.identity import IdentityProvider
from wellness.models.badge import Badge, EarnedBadge, RequirementType
from wellness.models.progress import (
    ActivityResult,
    LevelInfo,
    ProgressOverview,
    StreakClaimResult,
    UserProgress,
)
from wellness.models.reward import ExperienceReward, RewardType, is_reserved, parse_reward
from wellness.utils.datetime_helpers import now_utc, today_utc

logger = logging.getLogger(__name__)

ALL_DIMENSIONS = tuple(RequirementType)
TASK_DIMENSIONS = (RequirementType.TASKS, RequirementType.LEVEL, RequirementType.STREAK)


class ProgressEngine:
    """
    Progress engine for one UI session.

    Responsibilities:
    - Creating and reading the progress record
    - XP grants with level recalculation
    - Daily streak claims
    - Badge evaluation and one-time insertion
    - Reward ledger entries and claims

    Every operation is a no-op returning None when no user is signed in.
    The cached overview and new-badge queue only ever reflect writes the
    gateway accepted.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        identity: IdentityProvider,
        clock: Callable[[], date] = today_utc,
        now: Callable[[], datetime] = now_utc
    ):
        """
        Initialize ProgressEngine.

        Args:
            gateway: Record store for progress, badges and rewards
            identity: Source of the current user id
            clock: Today's calendar date (injectable for tests)
            now: Current timestamp for earned_at columns
        """
        self.gateway = gateway
        self.identity = identity
        self._today = clock
        self._now = now
        self.overview: Optional[ProgressOverview] = None
        self.new_badges: list[Badge] = []
        logger.debug("ProgressEngine initialized")

    # ==========================================
    # Accessors
    # ==========================================

    @property
    def unclaimed_rewards(self) -> list[ExperienceReward]:
        if self.overview is None:
            return []
        return list(self.overview.unclaimed_rewards)

    @property
    def level_info(self) -> Optional[LevelInfo]:
        if self.overview is None:
            return None
        return calculate_level_from_xp(self.overview.progress.experience_points)

    def clear_new_badges(self) -> None:
        """Acknowledge the new-badge notifications"""
        self.new_badges.clear()

    def _current_user(self, operation: str) -> Optional[str]:
        user_id = self.identity.current_user_id()
        if not user_id:
            logger.debug(f"No signed-in user, skipping {operation}")
            return None
        if self.overview is not None and self.overview.progress.user_id != user_id:
            # Session switched users; drop the previous user's cache
            self.overview = None
            self.new_badges.clear()
        return user_id

    # ==========================================
    # Progress record
    # ==========================================

    async def _load_progress(self, user_id: str) -> UserProgress:
        row = await self.gateway.get(PROGRESS_TABLE, {"user_id": user_id})
        if row is not None:
            return UserProgress.model_validate(row)

        initial = UserProgress(user_id=user_id)
        row = await self.gateway.insert(PROGRESS_TABLE, initial.model_dump())
        logger.info(f"Created progress record for user {user_id}")
        return UserProgress.model_validate(row)

    @staticmethod
    def _parse_unclaimed(rows: list[dict]) -> list[ExperienceReward]:
        rewards = []
        for row in rows:
            if is_reserved(row):
                logger.warning(
                    f"Skipping {row.get('reward_type')} reward {row.get('id')}: "
                    f"no payload schema registered for this type"
                )
                continue
            rewards.append(parse_reward(row))
        return rewards

    async def get_or_create_progress(self) -> Optional[ProgressOverview]:
        """
        Read (creating if needed) the current user's progress, earned badges
        and unclaimed rewards as one aggregate view.
        """
        user_id = self._current_user("get_or_create_progress")
        if user_id is None:
            return None

        progress = await self._load_progress(user_id)
        badge_rows = await self.gateway.select(BADGES_TABLE, {"user_id": user_id})
        reward_rows = await self.gateway.select(REWARDS_TABLE, {"user_id": user_id, "claimed": False})

        self.overview = ProgressOverview(
            progress=progress,
            badges=[EarnedBadge.model_validate(row) for row in badge_rows],
            unclaimed_rewards=self._parse_unclaimed(reward_rows),
            has_claimed_today=has_claimed_today(progress.last_activity_date, self._today()),
        )
        return self.overview

    async def _save_progress(self, progress: UserProgress, updates: Dict[str, Any]) -> UserProgress:
        await self.gateway.update(PROGRESS_TABLE, {"user_id": progress.user_id}, updates)
        saved = progress.model_copy(update=updates)

        if self.overview is not None:
            self.overview.progress = saved
            self.overview.has_claimed_today = has_claimed_today(saved.last_activity_date, self._today())

        return saved

    # ==========================================
    # XP and rewards
    # ==========================================

    def _experience_updates(self, progress: UserProgress, amount: int) -> Dict[str, Any]:
        if amount <= 0:
            raise ValidationError(
                "XP amount must be positive",
                field="amount",
                value=amount,
                user_id=progress.user_id,
                operation="grant_experience"
            )
        new_xp = progress.experience_points + amount
        return {
            "experience_points": new_xp,
            "level": calculate_level(new_xp),
            "last_activity_date": self._today(),
        }

    async def _append_reward(self, user_id: str, amount: int, reason: str) -> ExperienceReward:
        row = await self.gateway.insert(REWARDS_TABLE, {
            "user_id": user_id,
            "reward_type": RewardType.EXPERIENCE.value,
            "reward_data": {"amount": amount, "reason": reason},
            "claimed": False,
            "earned_at": self._now(),
        })
        reward = parse_reward(row)

        if self.overview is not None:
            self.overview.unclaimed_rewards.append(reward)

        return reward

    async def _apply_activity(
        self,
        progress: UserProgress,
        amount: int,
        reason: str,
        extra_updates: Optional[Dict[str, Any]] = None,
        dimensions: Iterable[RequirementType] = (),
        counts: Optional[Mapping[RequirementType, int]] = None
    ) -> ActivityResult:
        """Single progress write, then badge evaluation, then the reward entry"""
        updates = {**(extra_updates or {}), **self._experience_updates(progress, amount)}
        saved = await self._save_progress(progress, updates)

        logger.info(
            f"Awarded {amount} XP to user {progress.user_id} for {reason}. "
            f"Total: {saved.experience_points} XP, Level: {saved.level}"
        )
        leveled_up = saved.level > progress.level
        if leveled_up:
            logger.info(f"User {progress.user_id} leveled up from {progress.level} to {saved.level}!")

        dimensions = tuple(dimensions)
        new_badges = await self._award_badges(saved, dimensions, counts) if dimensions else []
        reward = await self._append_reward(progress.user_id, amount, reason)

        return ActivityResult(
            progress=saved,
            xp_awarded=amount,
            reason=reason,
            leveled_up=leveled_up,
            new_badges=new_badges,
            reward=reward,
        )

    async def grant_experience(self, amount: int, reason: str) -> Optional[ActivityResult]:
        """
        Add XP, recalculate the level and append an unclaimed reward.

        Badges are not evaluated here; callers that need them call
        evaluate_badges with the returned progress.

        Raises:
            ValidationError: amount is not positive
            StorageError: any gateway call failed
        """
        user_id = self._current_user("grant_experience")
        if user_id is None:
            return None

        progress = await self._load_progress(user_id)
        return await self._apply_activity(progress, amount, reason)

    async def _grant_for(self, activity: str, **kwargs) -> Optional[ActivityResult]:
        user_id = self._current_user(activity)
        if user_id is None:
            return None

        award = get_xp_for_activity(activity)
        progress = await self._load_progress(user_id)
        return await self._apply_activity(progress, award.amount, award.reason, **kwargs)

    # ==========================================
    # Activities
    # ==========================================

    async def complete_task(self) -> Optional[ActivityResult]:
        """Count the task and grant 10 XP in one write, then check task/level/streak badges"""
        user_id = self._current_user("complete_task")
        if user_id is None:
            return None

        award = get_xp_for_activity("task")
        progress = await self._load_progress(user_id)
        return await self._apply_activity(
            progress,
            award.amount,
            award.reason,
            extra_updates={"total_tasks_completed": progress.total_tasks_completed + 1},
            dimensions=TASK_DIMENSIONS,
        )

    async def track_mood(self, mood_entries: Optional[int] = None) -> Optional[ActivityResult]:
        """
        Grant 5 XP for a mood entry.

        Args:
            mood_entries: Running count of the user's mood entries, including
                this one. When given, mood badges are evaluated against it.
        """
        if mood_entries is None:
            return await self._grant_for("mood")
        return await self._grant_for(
            "mood",
            dimensions=(RequirementType.MOOD_ENTRIES,),
            counts={RequirementType.MOOD_ENTRIES: mood_entries},
        )

    async def write_journal(self, journal_entries: Optional[int] = None) -> Optional[ActivityResult]:
        """Grant 15 XP for a journal entry; journal_entries works like track_mood's count"""
        if journal_entries is None:
            return await self._grant_for("journal")
        return await self._grant_for(
            "journal",
            dimensions=(RequirementType.JOURNAL_ENTRIES,),
            counts={RequirementType.JOURNAL_ENTRIES: journal_entries},
        )

    async def complete_wordle(self) -> Optional[ActivityResult]:
        return await self._grant_for("wordle")

    async def claim_daily_streak(self) -> Optional[StreakClaimResult]:
        """
        Advance or reset the daily streak and grant 20 XP.

        A claim on the same calendar day as the last activity is refused:
        nothing is written and already_claimed is set.
        """
        user_id = self._current_user("claim_daily_streak")
        if user_id is None:
            return None

        progress = await self._load_progress(user_id)
        today = self._today()

        if has_claimed_today(progress.last_activity_date, today):
            logger.info(f"User {user_id} already active today, streak stays at {progress.streak_days}")
            return StreakClaimResult(
                progress=progress,
                already_claimed=True,
                previous_streak=progress.streak_days,
            )

        transition = next_streak(progress.streak_days, progress.last_activity_date, today)
        award = get_xp_for_activity("streak")
        result = await self._apply_activity(
            progress,
            award.amount,
            award.reason,
            extra_updates={"streak_days": transition.streak_days},
            dimensions=(RequirementType.STREAK,),
        )

        logger.info(
            f"Updated streak for user {user_id}: "
            f"{transition.previous_streak} → {transition.streak_days} days"
        )

        return StreakClaimResult(
            **dict(result),
            previous_streak=transition.previous_streak,
            streak_continued=transition.continued,
        )

    # ==========================================
    # Badges
    # ==========================================

    async def _award_badges(
        self,
        progress: UserProgress,
        dimensions: Iterable[RequirementType],
        counts: Optional[Mapping[RequirementType, int]]
    ) -> list[Badge]:
        earned_rows = await self.gateway.select(BADGES_TABLE, {"user_id": progress.user_id})
        earned_ids = {row["badge_id"] for row in earned_rows}

        awarded = []
        for badge in find_qualifying_badges(progress, earned_ids, dimensions, counts):
            row = await self.gateway.insert(BADGES_TABLE, {
                "user_id": progress.user_id,
                "badge_id": badge.id,
                "earned_at": self._now(),
            })
            awarded.append(badge)
            self.new_badges.append(badge)
            if self.overview is not None:
                self.overview.badges.append(EarnedBadge.model_validate(row))

            logger.info(f"User {progress.user_id} earned badge: {badge.id} ({badge.name})")

        return awarded

    async def evaluate_badges(
        self,
        progress: UserProgress,
        dimensions: Iterable[RequirementType] = ALL_DIMENSIONS,
        counts: Optional[Mapping[RequirementType, int]] = None
    ) -> list[Badge]:
        """
        Insert every not-yet-earned badge the snapshot qualifies for.

        Args:
            progress: Progress snapshot to evaluate (must belong to the current user)
            dimensions: Dimensions to check (all by default)
            counts: Running mood/journal counts; those dimensions are skipped without them

        Returns:
            Badges newly earned by this call, in catalog order
        """
        user_id = self._current_user("evaluate_badges")
        if user_id is None:
            return []
        if progress.user_id != user_id:
            raise ValidationError(
                "Progress snapshot belongs to a different user",
                field="user_id",
                value=progress.user_id,
                user_id=user_id,
                operation="evaluate_badges"
            )
        return await self._award_badges(progress, dimensions, counts)

    # ==========================================
    # Rewards
    # ==========================================

    async def claim_reward(self, reward_id: str) -> Optional[ExperienceReward]:
        """
        Mark one of the current user's unclaimed rewards as claimed.

        Raises:
            NotFoundError: no unclaimed reward with that id belongs to the user
        """
        user_id = self._current_user("claim_reward")
        if user_id is None:
            return None

        row = await self.gateway.get(REWARDS_TABLE, {"id": reward_id, "user_id": user_id, "claimed": False})
        if row is None:
            raise NotFoundError(
                f"No unclaimed reward {reward_id} for user {user_id}",
                record_type="Reward",
                record_id=reward_id,
                user_id=user_id,
                operation="claim_reward"
            )

        # Rows this engine cannot read are never marked claimed
        claimed = parse_reward({**row, "claimed": True})

        await self.gateway.update(REWARDS_TABLE, {"id": reward_id, "user_id": user_id}, {"claimed": True})

        if self.overview is not None:
            self.overview.unclaimed_rewards = [
                r for r in self.overview.unclaimed_rewards if r.id != reward_id
            ]

        logger.info(f"User {user_id} claimed reward {reward_id}")
        return claimed
