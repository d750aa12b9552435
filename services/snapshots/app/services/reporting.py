from __future__ import annotations

import math
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from ..context import JobContext
from ..dialects import BUCKET_COUNT
from ..schemas.results import AgeBucket, SnapshotReport, TableCount


def bucket_for_age(age_days: float, interval_days: int) -> int:
    """Bucket 1..4 covers one interval each; bucket 5 is everything older."""
    if interval_days <= 0:
        raise ValueError(f"interval_days must be positive; got {interval_days}")
    bucket = math.ceil(max(age_days, 0) / interval_days)
    return min(max(bucket, 1), BUCKET_COUNT)


def bucket_label(bucket: int, interval_days: int) -> str:
    if not 1 <= bucket <= BUCKET_COUNT:
        raise ValueError(f"bucket must be between 1 and {BUCKET_COUNT}; got {bucket}")
    if bucket == BUCKET_COUNT:
        return f">{(BUCKET_COUNT - 1) * interval_days}"
    return f"{(bucket - 1) * interval_days + 1}-{bucket * interval_days}"


def build_report(ctx: JobContext, interval_days: int) -> SnapshotReport:
    """Row counts for the snapshot family plus an age histogram. Read only."""
    if interval_days <= 0:
        raise ValueError(f"interval_days must be positive; got {interval_days}")

    now = ctx.clock()
    with ctx.session_factory() as session:
        try:
            counts = ctx.queries.table_counts(session)
            histogram = ctx.queries.age_buckets(session, now, interval_days)
        except SQLAlchemyError as exc:
            ctx.logger.error("report.failed", error=str(exc))
            raise
        finally:
            session.rollback()

    buckets: List[AgeBucket] = []
    for bucket in range(1, BUCKET_COUNT + 1):
        snapshots, servers = histogram.get(bucket, (0, 0))
        buckets.append(
            AgeBucket(
                bucket=bucket,
                label=bucket_label(bucket, interval_days),
                snapshots=snapshots,
                servers=servers,
            )
        )

    report = SnapshotReport(
        generated_at=now,
        interval_days=interval_days,
        tables=[TableCount(table=name, rows=rows) for name, rows in counts],
        buckets=buckets,
    )
    ctx.logger.info(
        "report.generated",
        interval_days=interval_days,
        snapshots=sum(b.snapshots for b in buckets),
    )
    return report


def render_report(report: SnapshotReport) -> str:
    table_width = max([len("Table name")] + [len(t.table) for t in report.tables])
    lines = [f"{'Table name':<{table_width}} : rows"]
    for t in report.tables:
        lines.append(f"{t.table:<{table_width}} : {t.rows:d}")

    lines.append("")
    lines.append(f"Snapshots by age, {report.interval_days}-day interval")
    label_width = max([len("Age (days)")] + [len(b.label) for b in report.buckets])
    header = f"{'Age (days)':>{label_width}} | {'Snapshots':>10} | {'Servers':>10}"
    lines.append(header)
    lines.append("-" * len(header))
    for b in report.buckets:
        lines.append(f"{b.label:>{label_width}} | {b.snapshots:>10d} | {b.servers:>10d}")
    return "\n".join(lines)
