"""
Root conftest.py for pytest configuration and shared fixtures.
"""
import os
from datetime import UTC, datetime, timedelta
from typing import Callable, Generator

import pytest
import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

# Set test environment BEFORE importing any app code
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture(scope="function")
def test_db_engine() -> Generator[Engine, None, None]:
    """
    Fresh in-memory SQLite database per test, with the full schema.
    """
    from services.snapshots.app.db import Base, build_engine
    # Import all models so they're registered with Base.metadata
    from services.snapshots.app.models import compat, snapshots  # noqa: F401

    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_db_engine):
    from services.snapshots.app.db import build_sessionmaker

    return build_sessionmaker(test_db_engine)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def job_context(session_factory):
    """JobContext against the SQLite database with a fixed clock."""
    from services.snapshots.app.context import JobContext
    from services.snapshots.app.core.config import Settings
    from services.snapshots.app.dialects import SqliteQueries

    return JobContext(
        settings=Settings(database_url="sqlite:///:memory:", db_backend="sqlite"),
        session_factory=session_factory,
        queries=SqliteQueries(),
        logger=structlog.get_logger("test"),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def make_snapshots(db_session) -> Callable[..., list]:
    """Insert snapshots aged ``age_days`` days relative to FIXED_NOW."""
    from services.snapshots.app.models.snapshots import Snapshot

    def _make(age_days: float, count: int = 1, server_id: int = 1000010000) -> list:
        created = FIXED_NOW - timedelta(days=age_days)
        rows = [
            Snapshot(
                org_id=1,
                server_id=server_id,
                reason="Package profile changed",
                created_at=created,
                updated_at=created,
            )
            for _ in range(count)
        ]
        db_session.add_all(rows)
        db_session.commit()
        return rows

    return _make


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables and cached settings after each test."""
    from services.snapshots.app.core.config import get_settings

    original_env = os.environ.copy()
    get_settings.cache_clear()
    yield
    os.environ.clear()
    os.environ.update(original_env)
    get_settings.cache_clear()
    structlog.contextvars.clear_contextvars()
