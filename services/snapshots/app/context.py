from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable

from sqlalchemy.orm import Session

from .core.config import Settings
from .core.logging import get_logger
from .db import build_engine, build_sessionmaker
from .dialects import SnapshotQueries, get_queries


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class JobContext:
    """Everything the purge and report operations need, built once per run."""

    settings: Settings
    session_factory: Callable[[], Session]
    queries: SnapshotQueries
    logger: Any
    clock: Callable[[], datetime] = field(default=_utcnow)


def build_context(settings: Settings, logger: Any | None = None) -> JobContext:
    engine = build_engine(settings.database_url)
    backend = settings.db_backend or engine.dialect.name
    queries = get_queries(backend)
    logger = logger or get_logger("snapshots")
    logger.info("context.ready", backend=queries.name, database_url=settings.database_url)
    return JobContext(
        settings=settings,
        session_factory=build_sessionmaker(engine),
        queries=queries,
        logger=logger,
    )
