"""Pytest configuration and shared fixtures for tests."""

import os

# Settings are instantiated at import time; tests never reach a real database.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import create_async_engine

from src.clients.cache import ClientCache
from src.clients.service import ClientService
from src.core.config import settings
from src.core.context import AppContext
from src.core.database import create_session_factory
from src.integrations.storage import LogoStorage
from src.main import app
from src.models.client import Client


class FakeRedis:
    """In-memory stand-in for the redis.asyncio client used by the cache."""

    def __init__(self, should_fail: bool = False) -> None:
        self.should_fail = should_fail
        self.store: dict[str, str] = {}
        self.expiries: dict[str, int | None] = {}
        self.calls: list[tuple[str, str]] = []

    def _check(self) -> None:
        if self.should_fail:
            raise RedisConnectionError("redis unavailable")

    async def get(self, key: str) -> str | None:
        self.calls.append(("get", key))
        self._check()
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.calls.append(("set", key))
        self._check()
        self.store[key] = value
        self.expiries[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            self.calls.append(("delete", key))
            self._check()
            if self.store.pop(key, None) is not None:
                removed += 1
            self.expiries.pop(key, None)
        return removed

    async def ping(self) -> bool:
        self._check()
        return True

    async def aclose(self) -> None:
        return None

    def mutations(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] != "get"]


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def logo_dir(tmp_path: Path) -> Path:
    return tmp_path / "logos"


@pytest_asyncio.fixture
async def app_context(
    fake_redis: FakeRedis, logo_dir: Path
) -> AsyncGenerator[AppContext, None]:
    """AppContext over in-memory SQLite, FakeRedis and a temp logo directory."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Client.__table__.create)

    context = AppContext(
        db_engine=engine,
        session_factory=create_session_factory(engine),
        redis=fake_redis,
        logo_storage=LogoStorage(str(logo_dir)),
        settings=settings,
    )
    try:
        yield context
    finally:
        await engine.dispose()


@pytest.fixture
def service(app_context: AppContext) -> ClientService:
    return ClientService.from_context(app_context)


@pytest.fixture
def client_cache(fake_redis: FakeRedis) -> ClientCache:
    return ClientCache(fake_redis, prefix=settings.client_cache_prefix)


@pytest_asyncio.fixture
async def api_client(app_context: AppContext) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the test context installed."""
    app.state.context = app_context
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    del app.state.context
    app.dependency_overrides.clear()


@pytest.fixture
def client_payload() -> dict[str, str]:
    return {
        "name": "Acme Logistics",
        "slug": "acme-logistics",
        "is_project": "0",
        "self_capture": "1",
        "client_prefix": "ACME",
        "address": "12 Harbour Road",
        "phone_number": "+62 21 555 0101",
        "city": "Jakarta",
    }
