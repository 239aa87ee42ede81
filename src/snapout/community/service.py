"""Community forum business logic.

Rules:
- A post snapshots its author's streak days at creation time
- Likes are one per (post, user); toggling twice returns to the start
- Like and comment counters never go below zero
- Posts by users the viewer has blocked are hidden from listings
- Only the author may delete a post
- A departing user's comments and likes are removed from every post and
  their own posts stay up without an author id
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

import structlog
from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from snapout.config import get_settings
from snapout.db.models import Comment, Post, PostLike, Report, User, UserBlock
from snapout.streaks.service import get_streak_days
from snapout.streaks.timer import utcnow

logger = structlog.get_logger()

MAX_TITLE_LENGTH = 200
MAX_CONTENT_LENGTH = 5000


class PostFilter(str, Enum):
    FEATURED = "featured"
    LATEST = "latest"
    MOST_LIKED = "most_liked"
    MOST_COMMENTED = "most_commented"


def _require_text(value: str, field: str, max_length: int) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be empty")
    if len(value) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    return value


def _decrement(column: Any, amount: int) -> Any:
    """SQL expression for `column - amount`, floored at zero."""
    return case((column > amount, column - amount), else_=0)


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


async def create_post(
    db: AsyncSession,
    author: User,
    title: str,
    content: str,
    now: datetime | None = None,
) -> Post:
    """Publish a post, stamping the author's current streak."""
    if now is None:
        now = utcnow()
    title = _require_text(title, "Title", MAX_TITLE_LENGTH)
    content = _require_text(content, "Content", MAX_CONTENT_LENGTH)

    post = Post(
        author_id=author.id,
        author_name=author.display_name,
        title=title,
        content=content,
        likes=0,
        comment_count=0,
        is_featured=False,
        streak=await get_streak_days(db, author.id, now),
        created_at=now,
    )
    db.add(post)
    await db.flush()

    logger.info("post_created", post_id=post.id, author_id=author.id, streak=post.streak)
    return post


async def list_posts(
    db: AsyncSession,
    post_filter: PostFilter = PostFilter.LATEST,
    limit: int | None = None,
    viewer_id: int | None = None,
) -> list[Post]:
    """List posts for a feed tab, newest first within ties."""
    if limit is None:
        limit = get_settings().community_page_size

    query = select(Post)
    if post_filter is PostFilter.FEATURED:
        query = query.where(Post.is_featured.is_(True)).order_by(Post.created_at.desc(), Post.id.desc())
    elif post_filter is PostFilter.MOST_LIKED:
        query = query.order_by(Post.likes.desc(), Post.created_at.desc(), Post.id.desc())
    elif post_filter is PostFilter.MOST_COMMENTED:
        query = query.order_by(Post.comment_count.desc(), Post.created_at.desc(), Post.id.desc())
    else:
        query = query.order_by(Post.created_at.desc(), Post.id.desc())

    if viewer_id is not None:
        blocked = select(UserBlock.blocked_id).where(UserBlock.blocker_id == viewer_id)
        query = query.where(or_(Post.author_id.is_(None), Post.author_id.not_in(blocked)))

    result = await db.execute(query.limit(limit))
    return list(result.scalars().all())


async def get_post(db: AsyncSession, post_id: int, with_comments: bool = False) -> Post | None:
    """Get a post by ID, optionally with its comments loaded."""
    query = select(Post).where(Post.id == post_id)
    if with_comments:
        query = query.options(selectinload(Post.comments))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def delete_post(db: AsyncSession, post_id: int, user_id: int) -> None:
    """Delete a post together with its comments and likes.

    Raises:
        LookupError: the post does not exist.
        PermissionError: the user is not the author.
    """
    post = await get_post(db, post_id)
    if post is None:
        raise LookupError("Post not found")
    if post.author_id != user_id:
        raise PermissionError("Only the author can delete this post")

    await db.execute(delete(Comment).where(Comment.post_id == post_id))
    await db.execute(delete(PostLike).where(PostLike.post_id == post_id))
    await db.execute(delete(Post).where(Post.id == post_id))

    logger.info("post_deleted", post_id=post_id, author_id=user_id)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


async def add_comment(
    db: AsyncSession,
    post_id: int,
    author: User,
    content: str,
    now: datetime | None = None,
) -> Comment:
    """Attach a comment to a post and bump its comment counter."""
    content = _require_text(content, "Comment", MAX_CONTENT_LENGTH)
    post = await get_post(db, post_id)
    if post is None:
        raise LookupError("Post not found")

    comment = Comment(
        post_id=post.id,
        author_id=author.id,
        author_name=author.display_name,
        content=content,
        created_at=now or utcnow(),
    )
    db.add(comment)
    post.comment_count += 1
    await db.flush()

    logger.info("comment_added", post_id=post.id, comment_id=comment.id, author_id=author.id)
    return comment


# ---------------------------------------------------------------------------
# Likes
# ---------------------------------------------------------------------------


async def has_liked(db: AsyncSession, post_id: int, user_id: int) -> bool:
    """Whether the user currently likes the post."""
    result = await db.execute(
        select(PostLike.id).where(PostLike.post_id == post_id, PostLike.user_id == user_id)
    )
    return result.scalar_one_or_none() is not None


async def toggle_like(db: AsyncSession, post_id: int, user_id: int) -> tuple[bool, int]:
    """Like the post if the user hasn't yet, otherwise remove the like.

    Returns (liked, like_count) after the toggle.
    """
    post = await get_post(db, post_id)
    if post is None:
        raise LookupError("Post not found")

    result = await db.execute(
        select(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user_id)
    )
    existing = result.scalar_one_or_none()

    if existing is None:
        db.add(PostLike(post_id=post_id, user_id=user_id, created_at=utcnow()))
        post.likes += 1
        liked = True
    else:
        await db.delete(existing)
        if post.likes > 0:
            post.likes -= 1
        liked = False

    await db.flush()
    return liked, post.likes


async def mirror_like_count(redis: Any | None, post_id: int, likes: int) -> None:
    """Copy a post's like count into the Redis hash. Best-effort."""
    if redis is None:
        return
    try:
        await redis.hset(get_settings().community_likes_key, str(post_id), likes)
    except Exception:
        logger.warning("like_mirror_failed", post_id=post_id, exc_info=True)


async def forget_like_count(redis: Any | None, post_id: int) -> None:
    """Drop a deleted post from the Redis like hash. Best-effort."""
    if redis is None:
        return
    try:
        await redis.hdel(get_settings().community_likes_key, str(post_id))
    except Exception:
        logger.warning("like_mirror_delete_failed", post_id=post_id, exc_info=True)


async def get_cached_like_count(redis: Any | None, post_id: int, fallback: int) -> int:
    """Like count from the Redis mirror, or `fallback` when it is unavailable."""
    if redis is None:
        return fallback
    try:
        value = await redis.hget(get_settings().community_likes_key, str(post_id))
    except Exception:
        logger.warning("like_mirror_read_failed", post_id=post_id, exc_info=True)
        return fallback
    if value is None:
        return fallback
    return int(value)


# ---------------------------------------------------------------------------
# Moderation
# ---------------------------------------------------------------------------


async def _require_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise LookupError("User not found")
    return user


async def block_user(db: AsyncSession, blocker_id: int, blocked_id: int) -> UserBlock:
    """Hide another user's posts from the blocker's feed. Idempotent."""
    if blocker_id == blocked_id:
        raise ValueError("You cannot block yourself")
    await _require_user(db, blocked_id)

    result = await db.execute(
        select(UserBlock).where(
            UserBlock.blocker_id == blocker_id,
            UserBlock.blocked_id == blocked_id,
        )
    )
    block = result.scalar_one_or_none()
    if block is not None:
        return block

    block = UserBlock(blocker_id=blocker_id, blocked_id=blocked_id, created_at=utcnow())
    db.add(block)
    await db.flush()
    logger.info("user_blocked", blocker_id=blocker_id, blocked_id=blocked_id)
    return block


async def report_user(
    db: AsyncSession,
    reporter_id: int,
    reported_user_id: int,
    reason: str | None = None,
) -> Report:
    """File a moderation report against another user."""
    if reporter_id == reported_user_id:
        raise ValueError("You cannot report yourself")
    await _require_user(db, reported_user_id)

    report = Report(
        reporter_id=reporter_id,
        reported_user_id=reported_user_id,
        reason=reason.strip() if reason and reason.strip() else None,
        status="pending",
        created_at=utcnow(),
    )
    db.add(report)
    await db.flush()
    logger.info("user_reported", reporter_id=reporter_id, reported_user_id=reported_user_id)
    return report


# ---------------------------------------------------------------------------
# Account cleanup
# ---------------------------------------------------------------------------


async def cleanup_user_content(db: AsyncSession, user_id: int) -> dict[str, Any]:
    """Remove a departing user's comments and likes from every post.

    Counters on the affected posts are decreased to match. The user's own
    posts are kept but detached from the account.

    The returned `like_counts` maps each post that lost a like to its new
    count, so callers can refresh the like mirror after committing.
    """
    comment_rows = await db.execute(
        select(Comment.post_id, func.count())
        .where(Comment.author_id == user_id)
        .group_by(Comment.post_id)
    )
    comments_removed = 0
    for post_id, count in comment_rows.all():
        await db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(comment_count=_decrement(Post.comment_count, count))
            .execution_options(synchronize_session=False)
        )
        comments_removed += count
    await db.execute(delete(Comment).where(Comment.author_id == user_id))

    like_rows = await db.execute(select(PostLike.post_id).where(PostLike.user_id == user_id))
    liked_post_ids = list(like_rows.scalars().all())
    like_counts: dict[int, int] = {}
    if liked_post_ids:
        await db.execute(
            update(Post)
            .where(Post.id.in_(liked_post_ids))
            .values(likes=_decrement(Post.likes, 1))
            .execution_options(synchronize_session=False)
        )
        await db.execute(delete(PostLike).where(PostLike.user_id == user_id))
        rows = await db.execute(select(Post.id, Post.likes).where(Post.id.in_(liked_post_ids)))
        like_counts = {post_id: likes for post_id, likes in rows.all()}

    detached = await db.execute(
        update(Post)
        .where(Post.author_id == user_id)
        .values(author_id=None)
        .execution_options(synchronize_session=False)
    )

    summary = {
        "comments_removed": comments_removed,
        "likes_removed": len(liked_post_ids),
        "posts_detached": detached.rowcount or 0,
    }
    logger.info("user_content_cleaned", user_id=user_id, **summary)
    return {**summary, "like_counts": like_counts}
