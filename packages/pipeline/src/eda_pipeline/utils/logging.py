"""
utils/logging.py — structlog setup shared by the CLI and the pipelines.

Output goes through the stdlib root logger on stdout, rendered either as
colored key=value lines (log_format="console") or one JSON object per line
(log_format="json"). Both settings default to eda_shared.config.settings.

Usage:
    from eda_pipeline.utils.logging import configure_logging, get_logger

    configure_logging(log_format="json")
    log = get_logger(__name__, pipeline="covid")
    log.info("covid_pipeline_start", scope="global")
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from eda_shared.config import settings

_PROCESSORS: tuple[Any, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
)


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
) -> None:
    """
    Configure structlog for this process.

    Without arguments this is a no-op once logging is configured, so a
    pipeline run() started from the CLI keeps the CLI's --log-level and
    --log-format.
    """
    if log_level is None and log_format is None and structlog.is_configured():
        return

    level = logging.getLevelName((log_level or settings.log_level).upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    structlog.configure(
        processors=[*_PROCESSORS, _renderer(log_format or settings.log_format)],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.BoundLogger:
    """Return a structlog logger for name with initial_values bound to every event."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial_values) if initial_values else logger  # type: ignore[return-value]
