"""Authentication router: all /api/v1/auth/* endpoints."""

from __future__ import annotations

import jwt
import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.auth.jwt import create_access_token, create_refresh_token, verify_token
from snapout.auth.password import PasswordStrengthError
from snapout.auth.schemas import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from snapout.auth.service import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    authenticate_email_user,
    create_anonymous_user,
    get_user_by_id,
    register_email_user,
)
from snapout.config import get_settings
from snapout.database import get_session
from snapout.db.models import User

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def _issue_tokens(user: User) -> TokenResponse:
    """Create an access + refresh token pair for the user."""
    settings = get_settings()
    return TokenResponse(
        access_token=create_access_token(user.id, user.auth_method),  # type: ignore[arg-type]
        refresh_token=create_refresh_token(user.id, user.auth_method),  # type: ignore[arg-type]
        token_type="bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Register with email + password."""
    try:
        user = await register_email_user(
            db,
            email=body.email,
            password=body.password,
            display_name=body.display_name,
        )
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except PasswordStrengthError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    await db.commit()
    return _issue_tokens(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Login with email + password."""
    try:
        user = await authenticate_email_user(db, body.email, body.password)
    except InvalidCredentialsError as e:
        logger.info("login_failed", reason="invalid_credentials")
        raise HTTPException(status_code=401, detail=str(e)) from e
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e)) from e
    await db.commit()
    return _issue_tokens(user)


@router.post("/anonymous", response_model=TokenResponse, status_code=201)
async def sign_in_anonymously(
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Skip sign-in: create an anonymous account and return its tokens."""
    user = await create_anonymous_user(db)
    await db.commit()
    return _issue_tokens(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Exchange a refresh token for a fresh token pair."""
    try:
        payload = verify_token(body.refresh_token, expected_type="refresh")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    user = await get_user_by_id(db, int(payload["sub"]))
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    if user.is_banned:
        raise HTTPException(status_code=403, detail="Account is banned")
    return _issue_tokens(user)
