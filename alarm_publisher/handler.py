"""AWS Lambda entry point for the alarm publisher."""

from __future__ import annotations

from typing import Any

import structlog

from alarm_publisher.alerting.publisher import Publisher
from alarm_publisher.core.config import get_config
from alarm_publisher.core.logging import setup_logging

logger = structlog.get_logger(__name__)

_publisher: Publisher | None = None


def get_publisher() -> Publisher:
    """Return the process-wide publisher, building it on first use."""
    global _publisher  # noqa: PLW0603
    if _publisher is None:
        config = get_config()
        setup_logging(config.logging)
        _publisher = Publisher(config)
    return _publisher


def reset_publisher() -> None:
    """Drop the cached publisher (useful for testing)."""
    global _publisher  # noqa: PLW0603
    _publisher = None


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Publish one alert for a CloudWatch alarm state change event."""
    structlog.contextvars.clear_contextvars()
    if context is not None:
        structlog.contextvars.bind_contextvars(
            aws_request_id=getattr(context, "aws_request_id", None),
            function_name=getattr(context, "function_name", None),
        )

    try:
        publisher = get_publisher()
        logger.info("alarm_event_received", alarm_event=event)
        return publisher.publish(event)
    except Exception:
        logger.exception("invocation_failed", event_id=event.get("id"))
        raise
