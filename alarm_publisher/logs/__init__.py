"""Log-side helpers: field lookup, sample fetching, console deep links."""

from alarm_publisher.logs.exceptions import LogLookupError
from alarm_publisher.logs.fetcher import LogSampleFetcher
from alarm_publisher.logs.properties import resolve_property
from alarm_publisher.logs.query_link import (
    build_deep_link,
    build_query_detail,
    jsurl_stringify,
    time_window,
    to_insights_condition,
)

__all__ = [
    "LogLookupError",
    "LogSampleFetcher",
    "build_deep_link",
    "build_query_detail",
    "jsurl_stringify",
    "resolve_property",
    "time_window",
    "to_insights_condition",
]
