"""
Structured logging for the visit engine.

Every log line is a structlog event name plus key/value fields. Fields bound
with `structlog.contextvars` (the request middleware binds request_id, method
and path; `calendar_store.book_visit` binds lead_id and staff_id) are merged
into each line logged while they are bound.
"""

import logging
import sys
from typing import Any, Optional
import structlog
from fieldsales.config import config

# Third-party loggers that repeat what the request metrics already record
QUIET_LOGGERS = ("uvicorn.access", "httpx")

SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None):
    """
    Configure structlog on top of stdlib logging.

    Args:
        level: stdlib level name; defaults to LOG_LEVEL.
        json_logs: render JSON lines; defaults to on unless DEBUG is set.
    """
    level_name = (level or config.LOG_LEVEL).upper()
    if json_logs is None:
        json_logs = not config.DEBUG

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = None) -> Any:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("visit_scheduled", visit_id="3f2a...", staff_id="u2")
        logger.info("booking_rejected", reason="SlotTaken")
    """
    return structlog.get_logger(name)


configure_logging()

logger = get_logger("fieldsales")
