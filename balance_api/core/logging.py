"""Logging configuration and utilities.

Modules log through ``logging.getLogger(__name__)`` with ``extra={...}``; the
root handler renders those records with structlog so every extra key ends up
in the output line.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.stdlib import ExtraAdder, ProcessorFormatter, add_logger_name

from balance_api.core.config import Settings

# Characters of an API key kept visible in log lines
API_KEY_VISIBLE_CHARS = 4


def setup_logging(settings: Settings) -> None:
    """Configure structured logging."""
    log_level = str(getattr(settings.app.log_level, "value", settings.app.log_level)).upper()

    renderer: Any
    if settings.observability.log_record_format == "json":
        renderer = JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = ProcessorFormatter(
        foreign_pre_chain=[
            add_log_level,
            add_logger_name,
            ExtraAdder(),
            TimeStamper(fmt="iso"),
        ],
        processors=[
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(handlers=[handler], level=log_level, force=True)


def mask_api_key(api_key: str | None) -> str:
    """Return a log-safe rendering of a team API key."""
    if not api_key:
        return "<missing>"
    if len(api_key) <= API_KEY_VISIBLE_CHARS:
        return "*" * len(api_key)
    return api_key[:API_KEY_VISIBLE_CHARS] + "*" * (len(api_key) - API_KEY_VISIBLE_CHARS)
