"""User profile and account lifecycle logic."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import delete, or_

from snapout.community.service import cleanup_user_content
from snapout.db.models import (
    ArticleCompletion,
    RelapseLog,
    Report,
    StreakState,
    User,
    UserBlock,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def update_profile(
    db: AsyncSession,
    user: User,
    display_name: str | None = None,
) -> User:
    """
    Update user profile fields.

    Raises:
        ValueError: If the display name is blank.
    """
    if display_name is not None:
        display_name = display_name.strip()
        if not display_name:
            msg = "Display name must not be blank"
            raise ValueError(msg)
        user.display_name = display_name

    await db.flush()
    return user


async def delete_account(db: AsyncSession, user_id: int) -> dict[str, Any]:
    """
    Permanently delete a user and everything that belongs only to them.

    Community content is cleaned up first so post counters stay correct;
    the user's own posts survive without an author. The returned
    `like_counts` lists posts whose like counter changed, so the caller
    can refresh the like mirror once the transaction commits.
    """
    summary = await cleanup_user_content(db, user_id)

    await db.execute(delete(StreakState).where(StreakState.user_id == user_id))
    await db.execute(delete(RelapseLog).where(RelapseLog.user_id == user_id))
    await db.execute(delete(ArticleCompletion).where(ArticleCompletion.user_id == user_id))
    await db.execute(
        delete(UserBlock).where(or_(UserBlock.blocker_id == user_id, UserBlock.blocked_id == user_id))
    )
    await db.execute(
        delete(Report).where(or_(Report.reporter_id == user_id, Report.reported_user_id == user_id))
    )
    await db.execute(delete(User).where(User.id == user_id))

    logger.info(
        "account_deleted",
        user_id=user_id,
        comments_removed=summary["comments_removed"],
        likes_removed=summary["likes_removed"],
        posts_detached=summary["posts_detached"],
    )
    return summary
