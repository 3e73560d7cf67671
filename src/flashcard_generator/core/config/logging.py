"""Logging configuration and setup for the flashcard generator."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog
from rich.console import Console
from rich.logging import RichHandler
from structlog.types import EventDict, WrappedLogger

from ..redaction import REDACTED, redact_secrets

if TYPE_CHECKING:
    from .config import Settings


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Supported logging output formats."""

    JSON = "json"
    TEXT = "text"


SENSITIVE_KEYS = frozenset({"api_key", "authorization", "token", "secret", "password"})

# Libraries that log full request lines at INFO
THIRD_PARTY_LEVELS: dict[str, LogLevel] = {
    "httpx": LogLevel.WARNING,
    "httpcore": LogLevel.WARNING,
}


def _mask_value(value: Any) -> Any:
    if isinstance(value, str):
        return redact_secrets(value)
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in SENSITIVE_KEYS and v else _mask_value(v) for k, v in value.items()
        }
    if isinstance(value, list | tuple):
        return [_mask_value(item) for item in value]
    return value


def mask_sensitive_data(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Structlog processor that keeps API keys out of rendered log lines."""
    for key, value in list(event_dict.items()):
        if key.lower() in SENSITIVE_KEYS and value:
            event_dict[key] = REDACTED
        else:
            event_dict[key] = _mask_value(value)
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure stdlib logging and structlog from settings.

    Text format renders through rich for local development; JSON format
    writes one object per line to stdout for log aggregation.

    Args:
        settings: Application settings; defaults to ``get_settings()``
    """
    if settings is None:
        from .config import get_settings

        settings = get_settings()

    _configure_stdlib_logging(settings)
    _configure_structured_logging(settings)

    structlog.get_logger(__name__).info(
        "Logging configuration applied",
        log_level=LogLevel(settings.LOG_LEVEL).value,
        log_format=LogFormat(settings.LOG_FORMAT).value,
        environment=settings.ENVIRONMENT.value,
    )


def _configure_stdlib_logging(settings: Settings) -> None:
    """Route stdlib records (httpx, asyncio) through a console handler."""
    log_level = logging.getLevelNamesMapping()[LogLevel(settings.LOG_LEVEL).value]

    handler: logging.Handler
    if settings.LOG_FORMAT == LogFormat.TEXT:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter(fmt="%(name)s - %(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
                '"logger": "%(name)s", "message": "%(message)s"}'
            )
        )
    handler.setLevel(log_level)

    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    for lib_name, lib_level in THIRD_PARTY_LEVELS.items():
        logging.getLogger(lib_name).setLevel(lib_level.value)


def _configure_structured_logging(settings: Settings) -> None:
    """Configure structlog processors with secret masking before rendering."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_sensitive_data,
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.LOG_FORMAT == LogFormat.TEXT:
        processors.extend([structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=True)])
    else:
        processors.extend([structlog.processors.format_exc_info, structlog.processors.JSONRenderer()])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[LogLevel(settings.LOG_LEVEL).value]
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
