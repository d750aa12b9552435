from __future__ import annotations

from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from ..context import JobContext
from ..schemas.results import PurgeResult


class PurgeStalledError(RuntimeError):
    """A delete batch removed nothing while rows still matched the cutoff."""


def purge_snapshots(ctx: JobContext, num_days: int, batch_size: int) -> PurgeResult:
    """Delete snapshots older than ``num_days`` in commits of at most ``batch_size`` rows.

    The cutoff is fixed when the run starts. Every batch locks group
    membership, deletes, commits and then re-counts, so an interrupted run
    keeps its committed batches and can simply be started again.
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be a positive integer; got {batch_size}")
    if num_days < 0:
        raise ValueError(f"num_days must not be negative; got {num_days}")

    cutoff = ctx.clock() - timedelta(days=num_days)
    result = PurgeResult(num_days=num_days, batch_size=batch_size, cutoff=cutoff)
    log = ctx.logger.bind(num_days=num_days, batch_size=batch_size)

    with ctx.session_factory() as session:
        try:
            remaining = ctx.queries.count_expired(session, cutoff)
            log.info("purge.started", cutoff=cutoff.isoformat(), qualifying=remaining)

            while remaining > 0:
                ctx.queries.lock_group_members(session)
                deleted = ctx.queries.delete_expired_batch(session, cutoff, batch_size)
                session.commit()
                if deleted <= 0:
                    raise PurgeStalledError(
                        f"{remaining} snapshots older than {num_days} days remain but none were deleted"
                    )
                result.batches.append(deleted)
                remaining = ctx.queries.count_expired(session, cutoff)
                log.info(
                    "purge.batch_committed",
                    batch=result.commits,
                    deleted=deleted,
                    remaining=remaining,
                )
        except (SQLAlchemyError, PurgeStalledError) as exc:
            log.error(
                "purge.failed",
                error=str(exc),
                committed_batches=result.commits,
                deleted=result.total_deleted,
            )
            raise

    result.remaining = remaining
    log.info("purge.completed", commits=result.commits, deleted=result.total_deleted)
    return result
