"""Alert delivery exceptions."""

from __future__ import annotations

from alarm_publisher.core.exceptions import PublisherError


class AlertDeliveryError(PublisherError):
    """Base exception for failures getting an alert onto the queue."""


class QueueLookupError(AlertDeliveryError):
    """The notification queue URL could not be resolved."""


class DispatchError(AlertDeliveryError):
    """Sending the alert message to the queue failed."""
