"""CORS for the Snapout web client and local development origins."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from snapout.config import Settings


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow `settings.cors_origins`.

    Clients authenticate with bearer tokens, never cookies, so credentialed
    requests are not allowed and only the headers the API reads are accepted.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
        expose_headers=["X-Request-Id", "X-RateLimit-Remaining", "X-RateLimit-Limit", "Retry-After"],
    )
