"""Pydantic schemas for relapse journal endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RelapseCreateRequest(BaseModel):
    occurred_at: datetime | None = None
    notes: str | None = Field(None, max_length=2000)
    triggers: list[str] = Field(default_factory=list)
    emotions: list[str] = Field(default_factory=list)


class RelapseResponse(BaseModel):
    id: str
    occurred_at: datetime
    notes: str | None = None
    triggers: list[str] = []
    emotions: list[str] = []
    created_at: datetime

    model_config = {"from_attributes": True}


class RelapseListResponse(BaseModel):
    relapses: list[RelapseResponse]
    total: int
    page: int
    per_page: int


class TagCount(BaseModel):
    name: str
    count: int


class TimeDistribution(BaseModel):
    morning: int
    afternoon: int
    evening: int
    night: int


class RelapseStatsResponse(BaseModel):
    total: int
    first_relapse_at: datetime | None = None
    last_relapse_at: datetime | None = None
    longest_gap_days: int
    top_triggers: list[TagCount]
    top_emotions: list[TagCount]
    time_distribution: TimeDistribution
    most_vulnerable_period: str | None = None
    insight: str | None = None
    current_streak_days: int = 0
