"""
Structured logging for ShiftSense using structlog.

Every event carries the service name and version; request handlers add a
``request_id`` through :func:`bind_request_context`, so all events logged
while a request is in flight (store upserts, batch rows, webhook calls) can
be correlated.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from shiftsense import __version__
from shiftsense.config import Settings, get_settings

SERVICE_NAME = "shiftsense"

# Chatty third-party loggers capped at WARNING outside debug mode
NOISY_LOGGERS = ("httpx", "httpcore", "multipart", "uvicorn.access")


def add_severity(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add severity level for structured logging."""
    event_dict["severity"] = method_name.upper()
    return event_dict


def add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


def _select_renderer(settings: Settings) -> Processor:
    """JSON lines in production, human-readable console output otherwise."""
    if settings.log_format == "json" and not settings.dev_mode:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=not settings.testing)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        settings: Application settings (defaults to the cached instance)
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    if not settings.debug:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_severity,
            add_service_context,
            structlog.processors.UnicodeDecoder(),
            _select_renderer(settings),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(request_id: str, **fields: Any) -> None:
    """Start a fresh per-request log context."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **fields)


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
