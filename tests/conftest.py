"""Pytest configuration and fixtures for fs-datastore.

HTTP tests build a fresh app per test from explicit Settings (in-memory
datastore by default) and run its lifespan so storage is migrated and
clients are closed.
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.core.limiter import limiter
from app.infrastructure.adapters import InMemoryAdapter
from app.infrastructure.persistence.repositories import FileItemRepository
from app.main import create_app


@pytest.fixture(autouse=True)
def reset_rate_limits() -> None:
    """The limiter is process-wide; start every test with empty counters."""
    limiter.reset()


@pytest.fixture
def settings() -> Settings:
    """Settings for an app backed by the in-memory adapter."""
    return Settings(_env_file=None, database_url="memory://")


@pytest.fixture
async def app(settings: Settings) -> FastAPI:
    application = create_app(settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def memory_adapter() -> InMemoryAdapter:
    return InMemoryAdapter("default", {"adapter": "memory"})


@pytest.fixture
def file_repo(memory_adapter: InMemoryAdapter) -> FileItemRepository:
    return FileItemRepository(memory_adapter)
