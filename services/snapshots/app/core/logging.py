import logging
import os
import re
import sys
from typing import Any, Dict

import structlog

_DSN_PASSWORD = re.compile(r"(://[^:/@\s]+:)[^@\s]+@")


def _configure_stdlib_logging(audit_log_path: str, level: int) -> None:
    # FileHandler opens eagerly so an unwritable audit log fails here,
    # before any database work starts.
    audit_handler = logging.FileHandler(audit_log_path, encoding="utf-8")
    console_handler = logging.StreamHandler(sys.stderr)
    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[console_handler, audit_handler],
        force=True,
    )


def invoking_user(default: str = "root") -> str:
    """Name of the operator running the job, as seen through sudo."""
    return os.getenv("SUDO_USER") or os.getenv("USER") or default


def configure_structlog(audit_log_path: str, user: str, level: str = "INFO") -> None:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    _configure_stdlib_logging(audit_log_path, numeric_level)

    secret_keys = {"password", "database_url", "dsn"}

    def _redact_event_logger(_logger, _name, event_dict: Dict[str, Any]):  # type: ignore[override]
        for k, v in list(event_dict.items()):
            if not isinstance(v, str):
                continue
            if str(k).lower() in secret_keys:
                if "://" in v:
                    event_dict[k] = _DSN_PASSWORD.sub(r"\1[REDACTED]@", v)
                else:
                    event_dict[k] = "[REDACTED]"
            elif "://" in v:
                event_dict[k] = _DSN_PASSWORD.sub(r"\1[REDACTED]@", v)
        return event_dict

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(user=user)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _redact_event_logger,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)
