"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from snapout.auth.router import router as auth_router
from snapout.community.router import router as community_router
from snapout.config import get_settings
from snapout.content.router import router as content_router
from snapout.database import close_db, init_db
from snapout.health.router import router as health_router
from snapout.middleware import setup_middleware
from snapout.redis_client import close_redis, init_redis
from snapout.relapses.router import router as relapses_router
from snapout.streaks.router import router as streaks_router
from snapout.users.router import router as users_router


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Snapout API",
        description="Backend API for Snapout, a streak tracker and recovery companion",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(streaks_router)
    app.include_router(relapses_router)
    app.include_router(content_router)
    app.include_router(community_router)

    return app


app = create_app()
