"""Relapse journal API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.auth.dependencies import get_current_user
from snapout.database import get_session
from snapout.db.models import User
from snapout.relapses.schemas import (
    RelapseCreateRequest,
    RelapseListResponse,
    RelapseResponse,
    RelapseStatsResponse,
)
from snapout.relapses.service import add_relapse_log, list_relapse_logs, relapse_stats
from snapout.streaks.service import get_streak_days
from snapout.streaks.timer import ensure_utc

router = APIRouter(prefix="/api/v1/relapses", tags=["Relapses"])


def _relapse_response(entry) -> RelapseResponse:
    response = RelapseResponse.model_validate(entry)
    response.occurred_at = ensure_utc(entry.occurred_at)
    response.created_at = ensure_utc(entry.created_at)
    return response


@router.post("", response_model=RelapseResponse, status_code=201)
async def create_relapse(
    body: RelapseCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Append an entry to the relapse journal. Does not reset the streak."""
    try:
        entry = await add_relapse_log(
            db,
            user.id,
            occurred_at=body.occurred_at,
            notes=body.notes,
            triggers=body.triggers,
            emotions=body.emotions,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _relapse_response(entry)


@router.get("", response_model=RelapseListResponse)
async def list_relapses(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """The user's relapse journal, newest first."""
    entries, total = await list_relapse_logs(db, user.id, page, per_page)
    return RelapseListResponse(
        relapses=[_relapse_response(e) for e in entries],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/stats", response_model=RelapseStatsResponse)
async def get_relapse_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Trigger and emotion counts, time-of-day profile and insight."""
    stats = await relapse_stats(db, user.id)
    return RelapseStatsResponse(**stats, current_streak_days=await get_streak_days(db, user.id))
