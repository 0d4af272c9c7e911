"""Alert pipeline: one alarm event in, one queue message out."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any

import boto3
import structlog
from pydantic import ValidationError

from alarm_publisher.alerting.assembler import AlertAssembler
from alarm_publisher.alerting.dispatcher import QueueDispatcher
from alarm_publisher.core.config import PublisherConfig
from alarm_publisher.core.exceptions import InvalidEventError
from alarm_publisher.core.types import AlarmEvent, Alert
from alarm_publisher.logs.fetcher import LogSampleFetcher
from alarm_publisher.logs.query_link import build_deep_link, time_window

logger = structlog.get_logger(__name__)

ClockFn = Callable[[], int]


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class Publisher:
    """Process-wide pipeline context.

    Built once per process; holds the AWS clients, the memoized queue URL
    (inside the dispatcher) and the static alert settings. Each call to
    :meth:`publish` runs the steps sequentially:

    1. resolve the queue URL (first call only)
    2. fetch one log sample from ``[now - period, now]``
    3. build the Logs Insights deep link
    4. assemble the alert
    5. send it
    """

    def __init__(
        self,
        config: PublisherConfig,
        *,
        logs_client: Any | None = None,
        sqs_client: Any | None = None,
        clock: ClockFn | None = None,
    ) -> None:
        # Fails before any client is created when recipients are empty.
        self._assembler = AlertAssembler(config)
        self._config = config
        self._clock = clock or _epoch_ms
        self._fetcher = LogSampleFetcher(
            logs_client or boto3.client("logs", region_name=config.region)
        )
        self._dispatcher = QueueDispatcher(
            sqs_client or boto3.client("sqs", region_name=config.region),
            queue_name=config.queue_name,
            queue_account=config.queue_account,
        )

    @property
    def config(self) -> PublisherConfig:
        return self._config

    @property
    def fetcher(self) -> LogSampleFetcher:
        return self._fetcher

    @property
    def dispatcher(self) -> QueueDispatcher:
        return self._dispatcher

    @staticmethod
    def parse_event(raw_event: Mapping[str, Any] | AlarmEvent) -> AlarmEvent:
        if isinstance(raw_event, AlarmEvent):
            return raw_event
        try:
            return AlarmEvent.model_validate(raw_event)
        except ValidationError as exc:
            raise InvalidEventError(f"not a CloudWatch alarm event: {exc}") from exc

    def build_alert(self, raw_event: Mapping[str, Any] | AlarmEvent) -> Alert:
        """Run the pipeline up to, but not including, delivery."""
        event = self.parse_event(raw_event)
        cfg = self._config

        start_ms, end_ms = time_window(self._clock(), cfg.period_minutes)
        log_sample = self._fetcher.fetch(cfg.log_group_name, cfg.filter_pattern, start_ms, end_ms)

        deep_link = build_deep_link(
            cfg.filter_pattern,
            account=event.account,
            region=event.region,
            log_group=cfg.log_group_name,
            start_ms=start_ms,
            end_ms=end_ms,
            portal_url=cfg.console.portal_url,
            role_name=cfg.console.role_name,
        )
        alert = self._assembler.assemble(event, log_sample, deep_link)
        logger.debug(
            "alert_assembled",
            alert_id=alert.id,
            has_log_sample=log_sample is not None,
            detail_count=len(alert.details),
        )
        return alert

    def publish(self, raw_event: Mapping[str, Any] | AlarmEvent) -> dict[str, Any]:
        """Build the alert for *raw_event* and send it. Returns the SQS response."""
        event = self.parse_event(raw_event)
        # No destination means nothing to do, so resolve it before any log lookup.
        _ = self._dispatcher.queue_url
        alert = self.build_alert(event)
        return self._dispatcher.send(alert)
