"""Streak state persistence and the snapshot derived from it."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.db.models import RelapseLog, StreakState
from snapout.relapses.service import add_relapse_log
from snapout.streaks.levels import (
    get_current_level,
    get_level_progress,
    get_next_level,
    next_milestone,
)
from snapout.streaks.timer import (
    compute_elapsed,
    compute_progress,
    ensure_utc,
    quit_date,
    should_prompt_relapse_check,
    streak_days,
    time_components,
    utcnow,
)

logger = logging.getLogger(__name__)


async def get_or_create_state(db: AsyncSession, user_id: int) -> StreakState:
    """Get or create the streak row for a user."""
    result = await db.execute(select(StreakState).where(StreakState.user_id == user_id))
    state = result.scalar_one_or_none()
    if state is None:
        state = StreakState(
            user_id=user_id,
            has_started_journey=False,
            times_failed=0,
            urges_resisted=0,
            updated_at=utcnow(),
        )
        db.add(state)
        await db.flush()
    return state


async def get_streak_days(db: AsyncSession, user_id: int, now: datetime | None = None) -> int:
    """Current streak in whole days; 0 when the journey has not started."""
    result = await db.execute(select(StreakState).where(StreakState.user_id == user_id))
    state = result.scalar_one_or_none()
    if state is None:
        return 0
    return streak_days(compute_elapsed(state.start_date, now or utcnow()))


async def start_journey(db: AsyncSession, user_id: int, now: datetime | None = None) -> StreakState:
    """Start the timer. Idempotent: an existing start date is kept."""
    if now is None:
        now = utcnow()
    state = await get_or_create_state(db, user_id)
    state.has_started_journey = True
    if state.start_date is None:
        state.start_date = now
        logger.info("Journey started for user %d", user_id)
    state.updated_at = now
    await db.flush()
    return state


async def reset_streak(
    db: AsyncSession,
    user_id: int,
    now: datetime | None = None,
    relapse: dict | None = None,
) -> tuple[StreakState, RelapseLog | None]:
    """Restart the timer at `now` and count a failure.

    When `relapse` is given (notes / triggers / emotions) the entry is
    appended to the relapse log in the same transaction.
    """
    if now is None:
        now = utcnow()
    state = await get_or_create_state(db, user_id)
    previous_days = streak_days(compute_elapsed(state.start_date, now))

    state.start_date = now
    state.has_started_journey = True
    state.times_failed += 1
    state.updated_at = now

    entry = None
    if relapse is not None:
        entry = await add_relapse_log(
            db,
            user_id,
            occurred_at=now,
            notes=relapse.get("notes"),
            triggers=relapse.get("triggers"),
            emotions=relapse.get("emotions"),
            now=now,
        )

    await db.flush()
    logger.info(
        "Streak reset for user %d after %d days (times_failed=%d)",
        user_id, previous_days, state.times_failed,
    )
    return state, entry


async def set_start_date(
    db: AsyncSession,
    user_id: int,
    start_date: datetime,
    now: datetime | None = None,
) -> StreakState:
    """Manually move the start date. Future dates are rejected."""
    if now is None:
        now = utcnow()
    start_date = ensure_utc(start_date)
    if start_date > ensure_utc(now):
        msg = "Start date cannot be in the future"
        raise ValueError(msg)

    state = await get_or_create_state(db, user_id)
    state.start_date = start_date
    state.has_started_journey = True
    state.updated_at = now
    await db.flush()
    logger.info("Start date set for user %d to %s", user_id, start_date.isoformat())
    return state


async def increment_urges_resisted(db: AsyncSession, user_id: int, now: datetime | None = None) -> StreakState:
    """Count one more resisted urge."""
    state = await get_or_create_state(db, user_id)
    state.urges_resisted += 1
    state.updated_at = now or utcnow()
    await db.flush()
    return state


async def check_relapse_prompt(db: AsyncSession, user_id: int, now: datetime | None = None) -> bool:
    """Decide whether to prompt a relapse check, then record this visit as activity."""
    if now is None:
        now = utcnow()
    state = await get_or_create_state(db, user_id)
    prompt = state.has_started_journey and should_prompt_relapse_check(
        state.last_active_at, state.last_relapse_check_at, now
    )
    state.last_active_at = now
    await db.flush()
    return prompt


async def acknowledge_relapse_check(db: AsyncSession, user_id: int, now: datetime | None = None) -> StreakState:
    """Record that the relapse check was answered today."""
    if now is None:
        now = utcnow()
    state = await get_or_create_state(db, user_id)
    state.last_relapse_check_at = now
    state.last_active_at = now
    await db.flush()
    return state


def build_snapshot(state: StreakState, now: datetime, horizon_days: int) -> dict:
    """Everything the timer screen shows, derived from the stored start date."""
    elapsed = compute_elapsed(state.start_date, now)
    days = streak_days(elapsed)
    components = time_components(elapsed)
    current = get_current_level(days)
    upcoming = get_next_level(days)

    return {
        "has_started_journey": state.has_started_journey,
        "start_date": ensure_utc(state.start_date) if state.start_date else None,
        "elapsed_seconds": elapsed,
        "time": components._asdict(),
        "current_streak_days": days,
        "progress": compute_progress(elapsed, horizon_days),
        "horizon_days": horizon_days,
        "quit_date": quit_date(state.start_date, now, horizon_days),
        "next_milestone": next_milestone(days),
        "level": current,
        "next_level": upcoming,
        "level_progress": get_level_progress(days),
        "times_failed": state.times_failed,
        "urges_resisted": state.urges_resisted,
    }
