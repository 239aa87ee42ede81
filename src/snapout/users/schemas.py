"""Pydantic schemas for user profile endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProfileUpdateRequest(BaseModel):
    """Update user profile fields."""

    display_name: str | None = Field(None, min_length=1, max_length=64)
