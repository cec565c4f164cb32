"""API routes for the progress engine"""
import logging
from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, Body, Depends, Request

from wellness.api.auth import get_request_identity, verify_api_key
from wellness.api.middleware import limiter
from wellness.api.models import (
    ActivityCountRequest,
    ActivityResponse,
    BadgeCatalogResponse,
    BadgeStatus,
    HealthCheckResponse,
    ProgressResponse,
    RewardListResponse,
    StreakClaimResponse,
)
from wellness.gamification.badge_catalog import BADGES
from wellness.gamification.xp_system import calculate_level_from_xp
from wellness.identity import RequestIdentity
from wellness.models.progress import ActivityResult
from wellness.models.reward import ExperienceReward
from wellness.services.container import get_container
from wellness.services.progress_engine import ProgressEngine

logger = logging.getLogger(__name__)

router = APIRouter()


def get_engine(
    api_key: str = Depends(verify_api_key),
    identity: RequestIdentity = Depends(get_request_identity)
) -> ProgressEngine:
    """ProgressEngine acting for the request's user"""
    return get_container().progress_engine(identity)


def _activity_response(result: ActivityResult) -> ActivityResponse:
    return ActivityResponse(
        **dict(result),
        level_info=calculate_level_from_xp(result.progress.experience_points),
    )


@router.get("/api/v1/progress", response_model=ProgressResponse)
@limiter.limit("60/minute")
async def get_progress(request: Request, engine: ProgressEngine = Depends(get_engine)):
    """Get (creating if needed) the user's progress, badges and unclaimed rewards"""
    overview = await engine.get_or_create_progress()

    return ProgressResponse(
        progress=overview.progress,
        level_info=calculate_level_from_xp(overview.progress.experience_points),
        earned_badge_ids=[b.badge_id for b in overview.badges],
        unclaimed_rewards=overview.unclaimed_rewards,
        has_claimed_today=overview.has_claimed_today,
    )


@router.post("/api/v1/activities/task", response_model=ActivityResponse)
@limiter.limit("60/minute")
async def complete_task(request: Request, engine: ProgressEngine = Depends(get_engine)):
    """Record a completed to-do item (+10 XP)"""
    return _activity_response(await engine.complete_task())


@router.post("/api/v1/activities/mood", response_model=ActivityResponse)
@limiter.limit("60/minute")
async def track_mood(
    request: Request,
    payload: Optional[ActivityCountRequest] = Body(default=None),
    engine: ProgressEngine = Depends(get_engine)
):
    """Record a mood entry (+5 XP)"""
    count = payload.count if payload else None
    return _activity_response(await engine.track_mood(mood_entries=count))


@router.post("/api/v1/activities/journal", response_model=ActivityResponse)
@limiter.limit("60/minute")
async def write_journal(
    request: Request,
    payload: Optional[ActivityCountRequest] = Body(default=None),
    engine: ProgressEngine = Depends(get_engine)
):
    """Record a journal entry (+15 XP)"""
    count = payload.count if payload else None
    return _activity_response(await engine.write_journal(journal_entries=count))


@router.post("/api/v1/activities/wordle", response_model=ActivityResponse)
@limiter.limit("60/minute")
async def complete_wordle(request: Request, engine: ProgressEngine = Depends(get_engine)):
    """Record a solved word game (+20 XP)"""
    return _activity_response(await engine.complete_wordle())


@router.post("/api/v1/streak/claim", response_model=StreakClaimResponse)
@limiter.limit("30/minute")
async def claim_daily_streak(request: Request, engine: ProgressEngine = Depends(get_engine)):
    """Claim today's streak (+20 XP); a repeat claim on the same day changes nothing"""
    result = await engine.claim_daily_streak()
    return StreakClaimResponse(
        **dict(result),
        level_info=calculate_level_from_xp(result.progress.experience_points),
    )


@router.get("/api/v1/rewards", response_model=RewardListResponse)
@limiter.limit("60/minute")
async def list_rewards(request: Request, engine: ProgressEngine = Depends(get_engine)):
    """List unclaimed rewards"""
    overview = await engine.get_or_create_progress()
    return RewardListResponse(rewards=overview.unclaimed_rewards)


@router.post("/api/v1/rewards/{reward_id}/claim", response_model=ExperienceReward)
@limiter.limit("60/minute")
async def claim_reward(request: Request, reward_id: str, engine: ProgressEngine = Depends(get_engine)):
    """Acknowledge a reward. 404 when it is unknown, foreign or already claimed."""
    return await engine.claim_reward(reward_id)


@router.get("/api/v1/badges", response_model=BadgeCatalogResponse)
@limiter.limit("60/minute")
async def list_badges(request: Request, engine: ProgressEngine = Depends(get_engine)):
    """Badge catalog with earned/locked state"""
    overview = await engine.get_or_create_progress()
    earned = {b.badge_id: b for b in overview.badges}

    statuses = [
        BadgeStatus(
            badge=badge,
            requirement_text=badge.requirement.describe(),
            earned=badge.id in earned,
            earned_at=earned[badge.id].earned_at if badge.id in earned else None,
        )
        for badge in BADGES
    ]

    return BadgeCatalogResponse(
        badges=statuses,
        total_earned=sum(1 for s in statuses if s.earned),
        total_badges=len(statuses),
    )


@router.get("/api/health", response_model=HealthCheckResponse)
@limiter.limit("60/minute")
async def health_check(request: Request):
    """Health check endpoint"""
    container = get_container()
    return HealthCheckResponse(
        status="healthy",
        storage=container.backend,
        timestamp=datetime.now(timezone.utc),
    )
