"""Article completion tracking and streak-dependent content views."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.content.catalog import benefits_timeline, get_article
from snapout.db.models import ArticleCompletion
from snapout.streaks.service import get_streak_days
from snapout.streaks.timer import utcnow

logger = logging.getLogger(__name__)


async def list_completed(db: AsyncSession, user_id: int) -> set[str]:
    """Slugs of every article the user has finished."""
    result = await db.execute(
        select(ArticleCompletion.article_slug).where(ArticleCompletion.user_id == user_id)
    )
    return set(result.scalars().all())


async def mark_article_completed(
    db: AsyncSession,
    user_id: int,
    slug: str,
    now: datetime | None = None,
) -> ArticleCompletion:
    """Record that the user finished an article. Idempotent.

    Raises:
        LookupError: unknown article slug.
    """
    if get_article(slug) is None:
        raise LookupError(f"Article not found: {slug}")

    result = await db.execute(
        select(ArticleCompletion).where(
            ArticleCompletion.user_id == user_id,
            ArticleCompletion.article_slug == slug,
        )
    )
    completion = result.scalar_one_or_none()
    if completion is not None:
        return completion

    completion = ArticleCompletion(user_id=user_id, article_slug=slug, completed_at=now or utcnow())
    db.add(completion)
    await db.flush()
    logger.info("User %d completed article %s", user_id, slug)
    return completion


async def benefits_for_user(db: AsyncSession, user_id: int | None) -> tuple[int, list[dict]]:
    """Current streak days and the benefits timeline unlocked by it."""
    days = 0 if user_id is None else await get_streak_days(db, user_id)
    return days, benefits_timeline(days)
