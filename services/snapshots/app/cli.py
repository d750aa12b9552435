"""Report on and purge aged rows from the snapshot tables.

Usage:
  snapshot-maintenance --reports [--interval-older-than 90]
  snapshot-maintenance --delete-older-than 30 [--batch-size 1000]
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional, Sequence

from .context import JobContext, build_context
from .core.config import Settings, get_settings, validate_settings
from .core.logging import configure_structlog, get_logger, invoking_user
from .services.purge import purge_snapshots
from .services.reporting import build_report, render_report


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value!r}")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return number


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snapshot-maintenance",
        description="Report on or delete system snapshots past a retention threshold.",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--reports",
        action="store_true",
        help="Show snapshot table sizes and an age histogram; changes nothing.",
    )
    mode.add_argument(
        "--delete-older-than",
        type=_non_negative_int,
        metavar="DAYS",
        help="Delete snapshots created more than DAYS days ago.",
    )
    parser.add_argument(
        "--interval-older-than",
        type=_positive_int,
        default=settings.default_interval_days,
        metavar="DAYS",
        help="Width of each age bucket in the report (default: %(default)s).",
    )
    parser.add_argument(
        "--batch-size",
        type=_positive_int,
        default=settings.default_batch_size,
        metavar="ROWS",
        help="Snapshots deleted per commit (default: %(default)s).",
    )
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    context_factory: Callable[..., JobContext] = build_context,
) -> int:
    try:
        settings = get_settings()
    except ValueError as exc:
        # pydantic ValidationError for malformed environment values
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1
    args = build_parser(settings).parse_args(argv)

    try:
        validate_settings(settings)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    user = invoking_user(settings.default_audit_user)
    try:
        configure_structlog(settings.audit_log_path, user, settings.log_level)
    except OSError as exc:
        print(f"Unable to open audit log {settings.audit_log_path}: {exc}", file=sys.stderr)
        return 1

    logger = get_logger("snapshots")
    mode = "reports" if args.reports else "purge"
    logger.info("run.started", mode=mode)

    ctx = context_factory(settings, logger)

    if args.reports:
        report = build_report(ctx, args.interval_older_than)
        print(render_report(report))
        return 0

    result = purge_snapshots(ctx, args.delete_older_than, args.batch_size)
    print(
        f"Deleted {result.total_deleted} snapshots older than {result.num_days} days "
        f"in {result.commits} batches (cutoff {result.cutoff.isoformat()})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
