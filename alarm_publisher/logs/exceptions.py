"""Exceptions for log-search lookups."""

from __future__ import annotations

from alarm_publisher.core.exceptions import PublisherError


class LogLookupError(PublisherError):
    """The log-search call failed or returned an unusable record."""
