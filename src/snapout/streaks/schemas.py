"""Pydantic models for streak endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LevelEntry(BaseModel):
    id: int
    name: str
    required_days: int
    description: str
    color: str


class AllLevelsResponse(BaseModel):
    levels: list[LevelEntry]


class TimeComponentsResponse(BaseModel):
    days: int
    hours: int
    minutes: int
    seconds: int
    milliseconds: int


class StreakResponse(BaseModel):
    has_started_journey: bool
    start_date: datetime | None = None
    elapsed_seconds: float
    time: TimeComponentsResponse
    current_streak_days: int
    progress: float
    horizon_days: int
    quit_date: datetime
    next_milestone: int
    level: LevelEntry
    next_level: LevelEntry | None = None
    level_progress: float
    times_failed: int
    urges_resisted: int


class ResetRequest(BaseModel):
    """Optional relapse details recorded together with the reset."""

    notes: str | None = Field(None, max_length=2000)
    triggers: list[str] = Field(default_factory=list)
    emotions: list[str] = Field(default_factory=list)
    log_relapse: bool = True


class StartDateRequest(BaseModel):
    start_date: datetime


class RelapseCheckResponse(BaseModel):
    should_prompt: bool
