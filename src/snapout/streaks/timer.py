"""Streak timer arithmetic.

Pure functions over a start timestamp and `now`; nothing here touches
storage. All datetimes are normalised to aware UTC before comparison.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import NamedTuple

SECONDS_PER_DAY = 86_400


class TimeComponents(NamedTuple):
    days: int
    hours: int
    minutes: int
    seconds: int
    milliseconds: int


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC (SQLite drops tzinfo on read)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_elapsed(start: datetime | None, now: datetime) -> float:
    """Seconds since `start`, never negative. An unstarted timer has 0 elapsed."""
    if start is None:
        return 0.0
    return max(0.0, (ensure_utc(now) - ensure_utc(start)).total_seconds())


def compute_progress(elapsed_seconds: float, horizon_days: int) -> float:
    """Progress towards the horizon, clamped to [0, 1]."""
    horizon_seconds = horizon_days * SECONDS_PER_DAY
    if horizon_seconds <= 0:
        return 1.0
    return min(max(elapsed_seconds / horizon_seconds, 0.0), 1.0)


def streak_days(elapsed_seconds: float) -> int:
    """Whole days elapsed."""
    return int(max(elapsed_seconds, 0.0) // SECONDS_PER_DAY)


def time_components(elapsed_seconds: float) -> TimeComponents:
    """Split an elapsed duration into display units."""
    elapsed_seconds = max(elapsed_seconds, 0.0)
    total_seconds = int(elapsed_seconds)
    fraction, _ = math.modf(elapsed_seconds)
    return TimeComponents(
        days=total_seconds // SECONDS_PER_DAY,
        hours=(total_seconds % SECONDS_PER_DAY) // 3600,
        minutes=(total_seconds % 3600) // 60,
        seconds=total_seconds % 60,
        milliseconds=int(fraction * 1000),
    )


def quit_date(start: datetime | None, now: datetime, horizon_days: int) -> datetime:
    """Date the horizon is reached, counted from `now` while the timer is not started."""
    anchor = ensure_utc(start) if start is not None else ensure_utc(now)
    return anchor + timedelta(days=horizon_days)


def _utc_date(dt: datetime) -> date:
    return ensure_utc(dt).date()


def should_prompt_relapse_check(
    last_active: datetime | None,
    last_check: datetime | None,
    now: datetime,
) -> bool:
    """Whether to ask "did you relapse?" on this visit.

    Only a returning user is asked: the previous activity must fall on an
    earlier calendar day (UTC), and the check must not have been answered
    today already.
    """
    if last_active is None:
        return False
    today = _utc_date(now)
    if _utc_date(last_active) >= today:
        return False
    return last_check is None or _utc_date(last_check) != today
