"""Logging and observability configuration using Pydantic Logfire.

All modules use Python's standard logging library (logging.getLogger(__name__)),
and Logfire captures and enriches these logs.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})

Structured logging utilities:
    log_with_context(logger, "info", "Message", task_id="...", error="...")
    log_with_week_context(logger, "info", "Message", week="2025-01-06", member_id="alice@example.com")
"""

import logging

import logfire
from fastapi import FastAPI

from weekboard.core.config import settings


def configure_logfire() -> None:
    """Configure Pydantic Logfire with token from environment."""
    logfire.configure(
        token=settings.logfire_token,
        service_name="weekboard",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def instrument_fastapi(app: FastAPI) -> None:
    """Add Logfire instrumentation to FastAPI application."""
    logfire.instrument_fastapi(app)
    logger = logging.getLogger(__name__)
    logger.info("FastAPI instrumentation configured")


def span(name: str, **attributes: object) -> logfire.LogfireSpan:
    """Create a custom span for service layer functions.

    Attributes such as week, owner or task_id are attached to the span.

    Usage:
        with span("task_service.load_week", week="2025-01-06", owner="alice@example.com"):
            ...
    """
    return logfire.span(name, **attributes)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log a message with structured context fields.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Additional context fields (member_id, week, task_id, etc.)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)


def log_with_week_context(
    logger: logging.Logger,
    level: str,
    message: str,
    week: str | None = None,
    member_id: str | None = None,
    **extra: object,
) -> None:
    """Log a message scoped to a work week and, optionally, the member acting in it.

    Unset scope fields are left out rather than logged as null.

    Usage:
        log_with_week_context(logger, "info", "Task created", week="2025-01-06", member_id="alice@example.com")
    """
    scope = {key: value for key, value in (("week", week), ("member_id", member_id)) if value}
    log_with_context(logger, level, message, **scope, **extra)
