"""Content API endpoints: articles, benefits and guided breathing."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.auth.dependencies import get_current_user, get_current_user_optional
from snapout.content.breathing import MEDITATIONS, BreathingPattern, breathing_phase_at
from snapout.content.catalog import ARTICLE_CATEGORIES, ARTICLES, get_article
from snapout.content.schemas import (
    ArticleDetail,
    ArticleListResponse,
    ArticleSummary,
    BenefitEntry,
    BenefitsResponse,
    BreathingPatternResponse,
    BreathingPhaseResponse,
    MeditationEntry,
    MeditationListResponse,
)
from snapout.content.service import benefits_for_user, list_completed, mark_article_completed
from snapout.database import get_session
from snapout.db.models import User

router = APIRouter(prefix="/api/v1/content", tags=["Content"])


def _summary_fields(article: dict, completed: bool) -> dict:
    return {
        "slug": article["slug"],
        "title": article["title"],
        "subtitle": article["subtitle"],
        "category": article["category"],
        "category_name": ARTICLE_CATEGORIES[article["category"]],
        "read_minutes": article["read_minutes"],
        "completed": completed,
    }


def _pattern_response(pattern: BreathingPattern) -> BreathingPatternResponse:
    return BreathingPatternResponse(
        key=pattern.key,
        name=pattern.name,
        description=pattern.description,
        inhale_seconds=pattern.inhale_seconds,
        hold_seconds=pattern.hold_seconds,
        exhale_seconds=pattern.exhale_seconds,
        cycle_seconds=pattern.cycle_seconds,
    )


# ── Articles ──


@router.get("/articles", response_model=ArticleListResponse)
async def list_articles(
    category: str | None = Query(None),
    user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_session),
):
    """List articles, optionally filtered by category."""
    if category is not None and category not in ARTICLE_CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Unknown category: {category}")

    completed = await list_completed(db, user.id) if user else set()
    articles = [a for a in ARTICLES if category is None or a["category"] == category]
    return ArticleListResponse(
        articles=[ArticleSummary(**_summary_fields(a, a["slug"] in completed)) for a in articles],
        total=len(articles),
        completed_count=len(completed),
    )


@router.get("/articles/{slug}", response_model=ArticleDetail)
async def get_article_detail(
    slug: str,
    user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_session),
):
    """Full article text."""
    article = get_article(slug)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    completed = await list_completed(db, user.id) if user else set()
    return ArticleDetail(
        **_summary_fields(article, slug in completed),
        introduction=article["introduction"],
        sections=article["sections"],
        conclusion=article["conclusion"],
    )


@router.post("/articles/{slug}/complete", response_model=ArticleSummary)
async def complete_article(
    slug: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Mark an article as read."""
    try:
        await mark_article_completed(db, user.id, slug)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    await db.commit()
    return ArticleSummary(**_summary_fields(get_article(slug), True))


# ── Benefits ──


@router.get("/benefits", response_model=BenefitsResponse)
async def list_benefits(
    user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_session),
):
    """Recovery benefits timeline, with unlock flags for the caller's streak."""
    days, benefits = await benefits_for_user(db, user.id if user else None)
    return BenefitsResponse(
        current_streak_days=days,
        benefits=[BenefitEntry(**b) for b in benefits],
    )


# ── Meditation ──


@router.get("/meditations", response_model=MeditationListResponse)
async def list_meditations():
    """Meditation types and their breathing patterns."""
    return MeditationListResponse(
        meditations=[
            MeditationEntry(slug=slug, name=name, pattern=_pattern_response(pattern))
            for slug, (name, pattern) in MEDITATIONS.items()
        ]
    )


@router.get("/meditations/{slug}/phase", response_model=BreathingPhaseResponse)
async def get_breathing_phase(
    slug: str,
    elapsed: float = Query(..., ge=0),
):
    """Breathing phase a session is in after `elapsed` seconds."""
    if slug not in MEDITATIONS:
        raise HTTPException(status_code=404, detail="Meditation not found")
    _name, pattern = MEDITATIONS[slug]
    phase = breathing_phase_at(pattern, elapsed)
    return BreathingPhaseResponse(
        meditation=slug,
        elapsed=elapsed,
        phase=phase.phase,
        remaining_seconds=phase.remaining_seconds,
        completed_cycles=phase.completed_cycles,
    )
