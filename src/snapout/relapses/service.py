"""Relapse journal: append-only entries and the statistics derived from them."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.db.models import RelapseLog
from snapout.streaks.timer import SECONDS_PER_DAY, ensure_utc, utcnow

logger = logging.getLogger(__name__)

MAX_TAGS = 20
TOP_TAGS = 5

# (period, first hour, last hour) in UTC; night wraps past midnight.
TIME_PERIODS: list[tuple[str, int, int]] = [
    ("morning", 5, 11),
    ("afternoon", 12, 16),
    ("evening", 17, 20),
    ("night", 21, 4),
]

_PERIOD_LABELS = {
    "morning": "morning (5am-12pm)",
    "afternoon": "afternoon (12pm-5pm)",
    "evening": "evening (5pm-9pm)",
    "night": "night (9pm-5am)",
}


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Strip, drop empties and de-duplicate case-insensitively, keeping the first spelling."""
    seen: set[str] = set()
    cleaned: list[str] = []
    for tag in tags or []:
        value = tag.strip()
        if not value or value.lower() in seen:
            continue
        seen.add(value.lower())
        cleaned.append(value)
    if len(cleaned) > MAX_TAGS:
        msg = f"At most {MAX_TAGS} tags are allowed"
        raise ValueError(msg)
    return cleaned


def time_period(hour: int) -> str:
    """Map an hour of day (0-23) to its period name."""
    for name, first, last in TIME_PERIODS:
        if first <= last:
            if first <= hour <= last:
                return name
        elif hour >= first or hour <= last:
            return name
    msg = f"Invalid hour: {hour}"
    raise ValueError(msg)


async def add_relapse_log(
    db: AsyncSession,
    user_id: int,
    occurred_at: datetime | None = None,
    notes: str | None = None,
    triggers: list[str] | None = None,
    emotions: list[str] | None = None,
    now: datetime | None = None,
) -> RelapseLog:
    """Append a relapse entry. Entries are never edited afterwards."""
    if now is None:
        now = utcnow()
    occurred_at = ensure_utc(occurred_at) if occurred_at is not None else now
    if occurred_at > ensure_utc(now):
        msg = "Relapse date cannot be in the future"
        raise ValueError(msg)

    notes = notes.strip() if notes else None
    entry = RelapseLog(
        user_id=user_id,
        occurred_at=occurred_at,
        notes=notes or None,
        triggers=normalize_tags(triggers),
        emotions=normalize_tags(emotions),
        created_at=now,
    )
    db.add(entry)
    await db.flush()
    logger.info("Relapse logged for user %d at %s", user_id, occurred_at.isoformat())
    return entry


async def list_relapse_logs(
    db: AsyncSession,
    user_id: int,
    page: int = 1,
    per_page: int = 20,
) -> tuple[list[RelapseLog], int]:
    """Get a user's relapse entries (paginated, most recent first)."""
    offset = (page - 1) * per_page

    total_result = await db.execute(
        select(func.count()).select_from(RelapseLog).where(RelapseLog.user_id == user_id)
    )
    total = total_result.scalar_one()

    result = await db.execute(
        select(RelapseLog)
        .where(RelapseLog.user_id == user_id)
        .order_by(RelapseLog.occurred_at.desc(), RelapseLog.created_at.desc())
        .offset(offset)
        .limit(per_page)
    )
    return list(result.scalars().all()), total


def summarize_relapses(entries: list[RelapseLog]) -> dict:
    """Aggregate relapse entries into counts, a time-of-day profile and gaps.

    The longest gap is measured in whole days between consecutive entries.
    """
    trigger_counts: Counter[str] = Counter()
    emotion_counts: Counter[str] = Counter()
    distribution = {name: 0 for name, _, _ in TIME_PERIODS}

    dates = sorted(ensure_utc(e.occurred_at) for e in entries)
    for entry in entries:
        trigger_counts.update(entry.triggers or [])
        emotion_counts.update(entry.emotions or [])
        distribution[time_period(ensure_utc(entry.occurred_at).hour)] += 1

    longest_gap = 0
    for earlier, later in zip(dates, dates[1:]):
        longest_gap = max(longest_gap, int((later - earlier).total_seconds() // SECONDS_PER_DAY))

    vulnerable: str | None = None
    insight: str | None = None
    if entries:
        # Ties resolve in TIME_PERIODS order
        vulnerable = max(distribution, key=lambda name: distribution[name])
        share = distribution[vulnerable] / len(entries)
        insight = (
            f"Your most vulnerable time is {_PERIOD_LABELS[vulnerable]}: "
            f"{round(share * 100)}% of your relapses happened then. "
            "Consider planning activities during this time."
        )

    return {
        "total": len(entries),
        "first_relapse_at": dates[0] if dates else None,
        "last_relapse_at": dates[-1] if dates else None,
        "longest_gap_days": longest_gap,
        "top_triggers": [{"name": n, "count": c} for n, c in trigger_counts.most_common(TOP_TAGS)],
        "top_emotions": [{"name": n, "count": c} for n, c in emotion_counts.most_common(TOP_TAGS)],
        "time_distribution": distribution,
        "most_vulnerable_period": vulnerable,
        "insight": insight,
    }


async def relapse_stats(db: AsyncSession, user_id: int) -> dict:
    """Statistics over all of a user's relapse entries."""
    result = await db.execute(select(RelapseLog).where(RelapseLog.user_id == user_id))
    return summarize_relapses(list(result.scalars().all()))
