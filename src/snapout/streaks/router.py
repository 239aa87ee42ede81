"""Streak timer API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.auth.dependencies import get_current_user
from snapout.config import get_settings
from snapout.database import get_session
from snapout.db.models import User
from snapout.streaks.levels import LEVELS
from snapout.streaks.schemas import (
    AllLevelsResponse,
    LevelEntry,
    RelapseCheckResponse,
    ResetRequest,
    StartDateRequest,
    StreakResponse,
)
from snapout.streaks.service import (
    acknowledge_relapse_check,
    build_snapshot,
    check_relapse_prompt,
    get_or_create_state,
    increment_urges_resisted,
    reset_streak,
    set_start_date,
    start_journey,
)
from snapout.streaks.timer import utcnow

router = APIRouter(prefix="/api/v1", tags=["Streaks"])


def _snapshot_response(state) -> StreakResponse:
    settings = get_settings()
    return StreakResponse(**build_snapshot(state, utcnow(), settings.streak_horizon_days))


# ── Public ──


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels():
    """The full recovery level table."""
    return AllLevelsResponse(levels=[LevelEntry(**level) for level in LEVELS])


# ── Authenticated ──


@router.get("/streak", response_model=StreakResponse)
async def get_streak(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Current timer state, level and counters."""
    state = await get_or_create_state(db, user.id)
    await db.commit()
    return _snapshot_response(state)


@router.post("/streak/start", response_model=StreakResponse)
async def start_streak(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Begin the journey. Calling it again keeps the original start date."""
    state = await start_journey(db, user.id)
    await db.commit()
    return _snapshot_response(state)


@router.post("/streak/reset", response_model=StreakResponse)
async def reset_streak_endpoint(
    body: ResetRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Relapse: restart the timer now and count a failure."""
    relapse = None
    if body is not None and body.log_relapse:
        relapse = body.model_dump(include={"notes", "triggers", "emotions"})
    try:
        state, _entry = await reset_streak(db, user.id, relapse=relapse)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _snapshot_response(state)


@router.put("/streak/start-date", response_model=StreakResponse)
async def update_start_date(
    body: StartDateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Manually edit the start date."""
    try:
        state = await set_start_date(db, user.id, body.start_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _snapshot_response(state)


@router.post("/streak/urges-resisted", response_model=StreakResponse)
async def resist_urge(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Count a resisted urge."""
    state = await increment_urges_resisted(db, user.id)
    await db.commit()
    return _snapshot_response(state)


@router.get("/streak/relapse-check", response_model=RelapseCheckResponse)
async def get_relapse_check(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Whether the app should ask about a relapse since the last visit."""
    should_prompt = await check_relapse_prompt(db, user.id)
    await db.commit()
    return RelapseCheckResponse(should_prompt=should_prompt)


@router.post("/streak/relapse-check/ack", response_model=RelapseCheckResponse)
async def ack_relapse_check(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Mark today's relapse check as answered."""
    await acknowledge_relapse_check(db, user.id)
    await db.commit()
    return RelapseCheckResponse(should_prompt=False)
