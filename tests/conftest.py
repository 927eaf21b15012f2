"""Pytest configuration and shared fixtures.

Usage Guide:
- For ORM model tests: import factories from tests.factories
- For schema and normalizer tests: use the payload factories (make_github_*)
- For stage and orchestrator tests: use `fake_github` and `sync_config`
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from github_org_mirror.config import SyncConfig
from github_org_mirror.db.models import Base, User

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Define a consistent "test epoch" for deterministic date matching across tests.
# All hardcoded dates should reference these constants for consistency.
# -----------------------------------------------------------------------------

# Base dates (datetime objects for Pydantic/ORM)
JAN_10 = datetime(2024, 1, 10, 9, 0, 0, tzinfo=UTC)   # Oldest activity
JAN_12 = datetime(2024, 1, 12, 16, 0, 0, tzinfo=UTC)  # Before the watermark
JAN_15 = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)  # Watermark of partial syncs
JAN_16 = datetime(2024, 1, 16, 14, 0, 0, tzinfo=UTC)  # After the watermark
JAN_20 = datetime(2024, 1, 20, 16, 0, 0, tzinfo=UTC)  # Latest activity

# ISO 8601 strings (for GitHub API mocks)
JAN_10_ISO = "2024-01-10T09:00:00Z"
JAN_12_ISO = "2024-01-12T16:00:00Z"
JAN_15_ISO = "2024-01-15T10:00:00Z"
JAN_15_AFTERNOON_ISO = "2024-01-15T14:00:00Z"
JAN_16_ISO = "2024-01-16T14:00:00Z"
JAN_20_ISO = "2024-01-20T16:00:00Z"


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
async def test_engine():
    """Create an in-memory SQLite engine for tests.

    Each test gets a fresh database with all tables created.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Create an async session configured like the application's.

    Uncommitted changes are rolled back after each test.
    """
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def user(db_session) -> User:
    """A committed user with a token and no previous sync."""
    from tests.factories import make_user

    created = make_user(db_session)
    await db_session.commit()
    return created


# -----------------------------------------------------------------------------
# Sync Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sync_config() -> SyncConfig:
    """Sync configuration without pauses and with small pages."""
    return SyncConfig(
        per_page=2,
        page_delay_ms=0,
        history_page_delay_ms=0,
        rate_limit_backoff_seconds=0,
        member_cap=20,
        extra_repos=[],
    )


@pytest.fixture
def fake_github():
    """An empty fake GitHub API; tests register the routes they need."""
    from tests.fixtures.fake_github import FakeGitHub

    return FakeGitHub()


# -----------------------------------------------------------------------------
# Utility Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def utc_now() -> datetime:
    """Current UTC datetime for tests."""
    return datetime.now(UTC)
