"""structlog configuration shared by the API and the CLI."""

import logging
from typing import TextIO

import structlog

from ngo_admin.config import Settings


def configure_logging(
    settings: Settings,
    *,
    json_logs: bool | None = None,
    level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog processors and level.

    Args:
        settings: Application settings (log level, environment)
        json_logs: Force JSON output on or off; defaults to JSON in production
        level: Level name overriding settings.log_level
        stream: Where log lines are written; stdout by default
    """
    level_name = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.is_production

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if json_logs
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )
