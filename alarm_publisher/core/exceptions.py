"""Base exception hierarchy for the alarm publisher."""

from __future__ import annotations


class PublisherError(Exception):
    """Base exception for all publisher errors."""


class ConfigurationError(PublisherError):
    """Configuration is missing, malformed, or has no recipients."""


class InvalidEventError(PublisherError):
    """The incoming event is not a CloudWatch alarm state change."""
