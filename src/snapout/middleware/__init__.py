"""Middleware stack for the Snapout API."""

from fastapi import FastAPI

from snapout.config import Settings
from snapout.middleware.cors import setup_cors
from snapout.middleware.error_handler import setup_error_handlers
from snapout.middleware.logging import setup_logging
from snapout.middleware.rate_limit import RateLimitMiddleware
from snapout.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure logging and error handlers, then wrap the app.

    The last middleware added runs first. The request id wraps the rate
    limiter so 429 responses carry X-Request-Id too, and CORS wraps everything
    so the web client still sees CORS headers on 429 responses.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
