"""Service test fixtures — async DB, fake image store, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - db_manager patched so the readiness probe sees the test engine
    - get_image_store overridden with a recording fake — no files touched

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so every session in a
      test sees the same database
    - Assertions on stored state use fresh sessions from test_session_factory,
      never the request's session
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

import postboard.infrastructure.database as db_module
from postboard.api.dependencies import get_image_store
from postboard.db.base import Base
from postboard.infrastructure.database import get_db, DatabaseSessionManager
from postboard.main import app
from postboard.services.credentials import CredentialService


class FakeImageStore:
    """Records image store calls instead of touching the filesystem."""

    def __init__(self):
        self.saved: list[tuple[str, bytes]] = []
        self.deleted: list[str] = []
        self.fail_deletes = False

    async def save(self, data: bytes, original_name: str | None) -> str:
        path = f"images/stored-{len(self.saved)}-{original_name}"
        self.saved.append((path, data))
        return path

    async def delete(self, path: str) -> bool:
        self.deleted.append(path)
        if self.fail_deletes:
            raise OSError("disk on fire")
        return True


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_images():
    return FakeImageStore()


@pytest.fixture
def credentials():
    return CredentialService(secret="test-signing-secret", bcrypt_rounds=4)


@pytest.fixture
async def client(test_engine, test_session_factory, fake_images):
    """FastAPI test client with DB and image store dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_store] = lambda: fake_images

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
