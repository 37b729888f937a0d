"""Structured logging configuration for Hookpost.

Provides JSON-formatted structured logging using structlog.
Supports both development (colored console) and production (JSON) modes.
Webhook secrets are masked before any renderer sees the event.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.typing import Processor

# Keys whose values must never reach a log sink
SECRET_KEYS = frozenset({"secret", "webhook_secret", "delivery_salt"})

_REDACTED = "***"

# Track if logging has been configured
_configured = False


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask secret values in a log event.

    Top-level keys and one level of nested mappings are checked, which
    covers request header maps and webhook records passed as context.
    """
    for key, value in list(event_dict.items()):
        if key in SECRET_KEYS:
            event_dict[key] = _REDACTED
        elif isinstance(value, dict) and SECRET_KEYS.intersection(value):
            event_dict[key] = {
                k: (_REDACTED if k in SECRET_KEYS else v) for k, v in value.items()
            }
    return event_dict


def configure_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging for Hookpost.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format: Output format - "json" for production, "text" for development.

    Example:
        ```python
        from hookpost.logging import configure_logging, get_logger

        configure_logging(level="DEBUG", format="text")
        logger = get_logger()
        logger.info("Worker started", queue="hookpost-webhooks")
        ```
    """
    global _configured

    log_level = getattr(logging, level.upper(), logging.INFO)

    # Configure standard library logging to not duplicate structlog output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format.lower() == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name. Uses calling module name if None.

    Returns:
        A bound structlog logger.
    """
    # Auto-configure with defaults if not already configured
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log messages.

    Context is task-local and persists across function calls. The
    dispatcher uses this to tag every line of one delivery attempt.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.

    Example:
        ```python
        bind_context(webhook_id="7", delivery_id="9f2c...")
        logger.info("Sending")  # Includes webhook_id and delivery_id
        ```
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    """Remove specific keys from the logging context.

    Args:
        *keys: Keys to remove from context.
    """
    structlog.contextvars.unbind_contextvars(*keys)


# Convenience: pre-configured logger for quick imports
logger = get_logger("hookpost")
