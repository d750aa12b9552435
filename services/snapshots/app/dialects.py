"""Dialect-specific SQL for the snapshot purge and age report.

Control flow lives in ``services.purge`` and ``services.reporting``; the
classes here only differ where the SQL does. A backend is picked once at
startup through :func:`get_queries`.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import DateTime, Integer, bindparam, text
from sqlalchemy.orm import Session

from .models.snapshots import SNAPSHOT_TABLES, ServerGroupMember, Snapshot

BUCKET_COUNT = 5

_SNAPSHOTS = Snapshot.__tablename__
_MEMBERS = ServerGroupMember.__tablename__


def _cutoff_param(name: str):
    return bindparam(name, type_=DateTime(timezone=True))


class SnapshotQueries:
    """Parameterized queries shared by purge and reporting."""

    name = "generic"

    lock_sql: Optional[str] = None
    count_expired_sql = f"SELECT COUNT(*) FROM {_SNAPSHOTS} WHERE created_at < :cutoff"
    delete_batch_sql = (
        f"DELETE FROM {_SNAPSHOTS} WHERE id IN ("
        f"SELECT id FROM {_SNAPSHOTS} WHERE created_at < :cutoff "
        "ORDER BY id LIMIT :batch_size)"
    )
    # Derived table so every backend can group on the bucket column
    age_buckets_sql = (
        "SELECT age, COUNT(*) AS snapshots, COUNT(DISTINCT server_id) AS servers "
        "FROM (SELECT CASE "
        "WHEN created_at >= :b1 THEN 1 "
        "WHEN created_at >= :b2 THEN 2 "
        "WHEN created_at >= :b3 THEN 3 "
        "WHEN created_at >= :b4 THEN 4 "
        f"ELSE 5 END AS age, server_id FROM {_SNAPSHOTS}) buckets "
        "GROUP BY age ORDER BY age"
    )

    def lock_group_members(self, session: Session) -> bool:
        """Take the membership lock for the current transaction, if the backend has one."""
        if not self.lock_sql:
            return False
        session.execute(text(self.lock_sql))
        return True

    def count_expired(self, session: Session, cutoff: datetime) -> int:
        stmt = text(self.count_expired_sql).bindparams(_cutoff_param("cutoff"))
        return int(session.execute(stmt, {"cutoff": cutoff}).scalar_one() or 0)

    def delete_expired_batch(self, session: Session, cutoff: datetime, batch_size: int) -> int:
        stmt = text(self.delete_batch_sql).bindparams(
            _cutoff_param("cutoff"), bindparam("batch_size", type_=Integer())
        )
        result = session.execute(stmt, {"cutoff": cutoff, "batch_size": batch_size})
        return int(result.rowcount or 0)

    def table_counts(self, session: Session) -> List[Tuple[str, int]]:
        counts = []
        for table in SNAPSHOT_TABLES:
            rows = session.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one()
            counts.append((table, int(rows or 0)))
        return counts

    def age_buckets(
        self, session: Session, now: datetime, interval_days: int
    ) -> Dict[int, Tuple[int, int]]:
        """Map bucket number to (snapshots, distinct servers); empty buckets are absent."""
        bounds = {
            f"b{k}": now - timedelta(days=k * interval_days) for k in range(1, BUCKET_COUNT)
        }
        stmt = text(self.age_buckets_sql).bindparams(*(_cutoff_param(k) for k in bounds))
        rows = session.execute(stmt, bounds).all()
        return {int(age): (int(snapshots), int(servers)) for age, snapshots, servers in rows}


class PostgresQueries(SnapshotQueries):
    name = "postgresql"
    lock_sql = f"LOCK TABLE {_MEMBERS} IN EXCLUSIVE MODE"


class OracleQueries(SnapshotQueries):
    name = "oracle"
    lock_sql = f"LOCK TABLE {_MEMBERS} IN EXCLUSIVE MODE"
    delete_batch_sql = (
        f"DELETE FROM {_SNAPSHOTS} "
        "WHERE created_at < :cutoff AND ROWNUM <= :batch_size"
    )


class SqliteQueries(SnapshotQueries):
    # SQLite has no table locks; the delete takes the database write lock
    name = "sqlite"


_REGISTRY = {q.name: q for q in (PostgresQueries, OracleQueries, SqliteQueries)}


def get_queries(backend: str) -> SnapshotQueries:
    key = (backend or "").lower()
    if key == "postgres":
        key = "postgresql"
    try:
        return _REGISTRY[key]()
    except KeyError:
        raise ValueError(f"Unsupported database backend: {backend!r}") from None
