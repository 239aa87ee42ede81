"""Community forum API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.auth.dependencies import get_current_user
from snapout.community.schemas import (
    BlockResponse,
    CommentCreateRequest,
    CommentResponse,
    LikeResponse,
    PostCreateRequest,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
    ReportRequest,
    ReportResponse,
)
from snapout.community.service import (
    PostFilter,
    add_comment,
    block_user,
    create_post,
    delete_post,
    forget_like_count,
    get_cached_like_count,
    get_post,
    has_liked,
    list_posts,
    mirror_like_count,
    report_user,
    toggle_like,
)
from snapout.config import get_settings
from snapout.database import get_session
from snapout.db.models import Comment, Post, User
from snapout.redis_client import get_redis_optional
from snapout.streaks.timer import ensure_utc

router = APIRouter(prefix="/api/v1/community", tags=["Community"])


def _post_response(post: Post, liked: bool = False) -> PostResponse:
    response = PostResponse.model_validate(post)
    response.created_at = ensure_utc(post.created_at)
    response.liked_by_me = liked
    return response


def _comment_response(comment: Comment) -> CommentResponse:
    response = CommentResponse.model_validate(comment)
    response.created_at = ensure_utc(comment.created_at)
    return response


# ── Posts ──


@router.get("/posts", response_model=PostListResponse)
async def get_posts(
    filter: PostFilter = Query(PostFilter.LATEST),  # noqa: A002
    limit: int | None = Query(None, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Feed of posts for one of the community tabs."""
    limit = limit or get_settings().community_page_size
    posts = await list_posts(db, filter, limit=limit, viewer_id=user.id)
    return PostListResponse(
        posts=[_post_response(p, await has_liked(db, p.id, user.id)) for p in posts],
        filter=filter.value,
        limit=limit,
    )


@router.post("/posts", response_model=PostResponse, status_code=201)
async def create_post_endpoint(
    body: PostCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Publish a new post."""
    try:
        post = await create_post(db, user, body.title, body.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _post_response(post)


@router.get("/posts/{post_id}", response_model=PostDetailResponse)
async def get_post_endpoint(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """A post with its comments, oldest comment first."""
    post = await get_post(db, post_id, with_comments=True)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    base = _post_response(post, await has_liked(db, post.id, user.id))
    return PostDetailResponse(
        **base.model_dump(),
        comments=[_comment_response(c) for c in post.comments],
    )


@router.delete("/posts/{post_id}", status_code=204)
async def delete_post_endpoint(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Delete one of your own posts."""
    try:
        await delete_post(db, post_id, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e)) from e
    await db.commit()
    await forget_like_count(get_redis_optional(), post_id)
    return Response(status_code=204)


# ── Comments & likes ──


@router.post("/posts/{post_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment_endpoint(
    post_id: int,
    body: CommentCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Comment on a post."""
    try:
        comment = await add_comment(db, post_id, user, body.content)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _comment_response(comment)


@router.post("/posts/{post_id}/like", response_model=LikeResponse)
async def toggle_like_endpoint(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Like a post, or remove your like if already present."""
    try:
        liked, likes = await toggle_like(db, post_id, user.id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    await db.commit()
    await mirror_like_count(get_redis_optional(), post_id, likes)
    return LikeResponse(post_id=post_id, liked=liked, likes=likes)


@router.get("/posts/{post_id}/likes", response_model=LikeResponse)
async def get_likes(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Current like count, served from the mirror when available."""
    post = await get_post(db, post_id)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    likes = await get_cached_like_count(get_redis_optional(), post_id, post.likes)
    return LikeResponse(post_id=post_id, liked=await has_liked(db, post_id, user.id), likes=likes)


# ── Moderation ──


@router.post("/users/{user_id}/block", response_model=BlockResponse)
async def block_user_endpoint(
    user_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Hide a user's posts from your feed."""
    try:
        await block_user(db, user.id, user_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return BlockResponse(blocked_user_id=user_id)


@router.post("/users/{user_id}/report", response_model=ReportResponse, status_code=201)
async def report_user_endpoint(
    user_id: int,
    body: ReportRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Report a user to the moderators."""
    try:
        report = await report_user(db, user.id, user_id, body.reason if body else None)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return ReportResponse(id=report.id, reported_user_id=report.reported_user_id, status=report.status)
