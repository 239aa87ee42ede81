"""Shared test fixtures.

Tests run against a throwaway SQLite file per test and without Redis; the
rate limiter and like mirror both degrade to pass-through when Redis is
not initialized.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from snapout.auth.jwt import reset_keys
from snapout.config import get_settings
from snapout.database import close_db, get_engine, get_session, init_db
from snapout.db import models  # noqa: F401
from snapout.db.base import Base
from snapout.main import create_app

DEFAULT_PASSWORD = "SecureP@ss1"


def _ensure_test_keys() -> None:
    """Generate an RSA key pair for signing test tokens."""
    if os.environ.get("SNAPOUT_JWT_PRIVATE_KEY_PATH"):
        return

    tmpdir = Path(tempfile.mkdtemp(prefix="snapout_test_keys_"))
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_path = tmpdir / "jwt_private.pem"
    public_path = tmpdir / "jwt_public.pem"
    private_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    public_path.write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )

    os.environ["SNAPOUT_JWT_PRIVATE_KEY_PATH"] = str(private_path)
    os.environ["SNAPOUT_JWT_PUBLIC_KEY_PATH"] = str(public_path)
    os.environ["SNAPOUT_LOG_FORMAT"] = "console"
    get_settings.cache_clear()
    reset_keys()


_ensure_test_keys()


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncGenerator[str, None]:
    """Fresh SQLite database with the full schema."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'snapout_test.db'}"
    await init_db(url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield url
    await close_db()


@pytest_asyncio.fixture
async def client(database: str) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app. Lifespan is not run; the DB is already up."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(database: str) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service-level tests and assertions."""
    async for session in get_session():
        yield session
        break


async def _register_email_user(
    client: AsyncClient,
    email: str,
    display_name: str,
) -> dict:
    response = await client.post("/api/v1/auth/register", json={
        "email": email,
        "password": DEFAULT_PASSWORD,
        "display_name": display_name,
    })
    assert response.status_code == 201, response.text
    data = response.json()
    return {
        "email": email,
        "password": DEFAULT_PASSWORD,
        "display_name": display_name,
        "user_id": data["user"]["id"],
        "access_token": data["access_token"],
        "refresh_token": data["refresh_token"],
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
    }


@pytest.fixture
def make_user(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Factory registering additional email users. Returns credentials and auth headers."""
    counter = 0

    async def _make(display_name: str | None = None) -> dict:
        nonlocal counter
        counter += 1
        name = display_name or f"Member{counter}"
        return await _register_email_user(client, f"member{counter}@example.com", name)

    return _make


@pytest_asyncio.fixture
async def registered_user(client: AsyncClient) -> dict:
    """Register a user via email+password. Returns dict with credentials and tokens."""
    return await _register_email_user(client, "testuser@example.com", "Tester")


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, registered_user: dict) -> AsyncClient:
    """Client authenticated as `registered_user`."""
    client.headers["Authorization"] = f"Bearer {registered_user['access_token']}"
    return client
