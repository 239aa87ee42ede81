"""User management router: all /api/v1/users/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.auth.dependencies import get_current_user
from snapout.auth.schemas import UserResponse
from snapout.community.service import mirror_like_count
from snapout.database import get_session
from snapout.db.models import User
from snapout.redis_client import get_redis_optional
from snapout.streaks.timer import ensure_utc
from snapout.users.schemas import ProfileUpdateRequest
from snapout.users.service import delete_account, update_profile

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


def _user_response(user: User) -> UserResponse:
    """Build a UserResponse from a User model."""
    return UserResponse(
        id=user.id,
        email=user.email,
        auth_method=user.auth_method,
        display_name=user.display_name,
        is_anonymous=user.is_anonymous,
        created_at=ensure_utc(user.created_at),
        last_login=ensure_utc(user.last_login) if user.last_login else None,
        login_count=user.login_count,
    )


@router.get("/me", response_model=UserResponse)
async def get_profile(
    user: User = Depends(get_current_user),
) -> UserResponse:
    """Get own full profile."""
    return _user_response(user)


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Update profile (display_name)."""
    try:
        user = await update_profile(db, user, display_name=body.display_name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _user_response(user)


@router.delete("/me", status_code=204)
async def delete_my_account(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> Response:
    """Delete own account. Comments and likes are removed from every post."""
    user_id = user.id
    summary = await delete_account(db, user_id)
    await db.commit()

    redis = get_redis_optional()
    for post_id, likes in summary["like_counts"].items():
        await mirror_like_count(redis, post_id, likes)
    return Response(status_code=204)
