"""
log.py — structlog setup for hosts that want cash events rendered.

The library only emits events (incompatible_currency, division_by_zero,
invalid_configuration, cash_defaults_updated) through module loggers.
Nothing is configured on import; a host calls setup_logging() once at start.

    setup_logging()                        CASH_LOG_LEVEL / CASH_LOG_JSON
    setup_logging("debug")                 console output, DEBUG and up
    setup_logging("warning", json_logs=True)
"""

from __future__ import annotations
import logging
from typing import Optional

import structlog

from .config import CashSettings


def _resolve_level(name: str) -> int:
    """Standard level number for a name; unknown names fall back to INFO."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    settings: Optional[CashSettings] = None,
) -> None:
    """
    Configure structlog for console or JSON output.

    Arguments left as None are read from settings, or from a fresh
    CashSettings (environment variables) when no settings are given.
    """
    if log_level is None or json_logs is None:
        settings = settings or CashSettings()
        log_level = settings.log_level if log_level is None else log_level
        json_logs = settings.log_json if json_logs is None else json_logs

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        # ConsoleRenderer formats exc_info itself
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
