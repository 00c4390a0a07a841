"""Structured logging for the progress engine.

Service and store layers log structured events through structlog. Engine
modules use stdlib loggers under ``careerquest``; both share one level.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

import structlog

from careerquest.config import Settings


def _stamp(settings: Settings) -> structlog.types.Processor:
    """Processor adding the service name and deployment environment to every event."""

    def processor(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:  # noqa: ANN401
        event_dict.setdefault("service", "careerquest")
        event_dict.setdefault("environment", settings.environment)
        return event_dict

    return processor


def setup_logging(settings: Settings) -> None:
    """Configure structlog for JSON or console output at the configured level."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            # user_id is bound per write by the progress service
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            _stamp(settings),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level)
    logging.getLogger("careerquest").setLevel(level)
