"""Log sample lookup: one matching log event from the alarm's window."""

from __future__ import annotations

import json
from typing import Any

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from alarm_publisher.core.types import LogRecord
from alarm_publisher.logs.exceptions import LogLookupError

logger = structlog.get_logger(__name__)


class LogSampleFetcher:
    """Fetches a single log record matching the alarm's filter pattern.

    Lookup failures never fail the alert: they are logged, counted in
    ``error_count`` and reported as "no sample" (``None``).
    """

    def __init__(self, logs_client: Any) -> None:
        self._client = logs_client
        self._error_count = 0

    @property
    def error_count(self) -> int:
        return self._error_count

    def fetch(
        self,
        log_group: str,
        filter_pattern: str,
        start_ms: int,
        end_ms: int,
    ) -> LogRecord | None:
        try:
            message = self._first_message(log_group, filter_pattern, start_ms, end_ms)
            if message is None:
                logger.warning(
                    "log_sample_missing",
                    log_group=log_group,
                    start=start_ms,
                    end=end_ms,
                )
                return None
            return self._decode(message)
        except LogLookupError:
            self._error_count += 1
            logger.exception("log_lookup_failed", log_group=log_group)
            return None

    def _first_message(
        self,
        log_group: str,
        filter_pattern: str,
        start_ms: int,
        end_ms: int,
    ) -> str | None:
        try:
            response = self._client.filter_log_events(
                logGroupName=log_group,
                filterPattern=filter_pattern,
                startTime=start_ms,
                endTime=end_ms,
                limit=1,
            )
        except (BotoCoreError, ClientError) as exc:
            raise LogLookupError(f"filter_log_events failed for {log_group}") from exc

        events = response.get("events") or []
        if not events:
            return None
        return events[0].get("message") or None

    @staticmethod
    def _decode(message: str) -> LogRecord:
        try:
            record = json.loads(message)
        except json.JSONDecodeError as exc:
            raise LogLookupError("log event message is not JSON") from exc
        if not isinstance(record, dict):
            raise LogLookupError(
                f"log event message is a JSON {type(record).__name__}, expected an object"
            )
        return record
