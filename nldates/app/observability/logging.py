"""
Structured event logging.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


_configured = False


def setup_logging(level: str = "info") -> None:
    global _configured
    log_level = getattr(logging, str(level or "info").upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "nldates") -> Any:
    if not _configured:
        setup_logging()
    return structlog.get_logger(name)


def log_event(event: str, level: str = "info", **fields: Any) -> None:
    logger = get_logger()
    emit = getattr(logger, level, logger.info)
    emit(event, **fields)
