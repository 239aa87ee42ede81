"""Pydantic schemas for content endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class ArticleSection(BaseModel):
    title: str
    content: str


class ArticleSummary(BaseModel):
    slug: str
    title: str
    subtitle: str
    category: str
    category_name: str
    read_minutes: int
    completed: bool = False


class ArticleListResponse(BaseModel):
    articles: list[ArticleSummary]
    total: int
    completed_count: int


class ArticleDetail(ArticleSummary):
    introduction: str
    sections: list[ArticleSection]
    conclusion: str | None = None


class BenefitEntry(BaseModel):
    day: int
    title: str
    description: str
    unlocked: bool


class BenefitsResponse(BaseModel):
    current_streak_days: int
    benefits: list[BenefitEntry]


class BreathingPatternResponse(BaseModel):
    key: str
    name: str
    description: str
    inhale_seconds: float
    hold_seconds: float
    exhale_seconds: float
    cycle_seconds: float


class MeditationEntry(BaseModel):
    slug: str
    name: str
    pattern: BreathingPatternResponse


class MeditationListResponse(BaseModel):
    meditations: list[MeditationEntry]


class BreathingPhaseResponse(BaseModel):
    meditation: str
    elapsed: float
    phase: str
    remaining_seconds: float
    completed_cycles: int
