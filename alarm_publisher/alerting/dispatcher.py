"""Queue dispatcher: delivers an Alert to the SQS notification queue."""

from __future__ import annotations

from typing import Any

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from alarm_publisher.alerting.exceptions import DispatchError, QueueLookupError
from alarm_publisher.core.types import Alert

# Dedicated structured logger for every alert handed to the queue.
decision_logger = structlog.get_logger("decision_log")

logger = structlog.get_logger(__name__)


class QueueDispatcher:
    """Sends alerts to one queue owned by (possibly) another account.

    The queue URL is resolved on first use and kept for the lifetime of the
    dispatcher. Concurrent first uses may both resolve it; the result is the
    same either way.
    """

    def __init__(self, sqs_client: Any, queue_name: str, queue_account: str) -> None:
        self._client = sqs_client
        self._queue_name = queue_name
        self._queue_account = queue_account
        self._queue_url: str | None = None

    @property
    def queue_url(self) -> str:
        if self._queue_url is None:
            self._queue_url = self._resolve_queue_url()
        return self._queue_url

    def _resolve_queue_url(self) -> str:
        try:
            response = self._client.get_queue_url(
                QueueName=self._queue_name,
                QueueOwnerAWSAccountId=self._queue_account,
            )
        except (BotoCoreError, ClientError) as exc:
            raise QueueLookupError(
                f"could not resolve queue {self._queue_name} in {self._queue_account}"
            ) from exc

        queue_url = response.get("QueueUrl")
        if not queue_url:
            raise QueueLookupError("no notification queue url!")
        logger.info("queue_url_resolved", queue_name=self._queue_name, queue_url=queue_url)
        return queue_url

    def send(self, alert: Alert) -> dict[str, Any]:
        """Send *alert* once. Errors propagate; there is no retry here."""
        queue_url = self.queue_url
        decision_logger.info(
            "sending_alert",
            queue_url=queue_url,
            payload=alert.model_dump(mode="json"),
        )
        try:
            return self._client.send_message(
                QueueUrl=queue_url,
                MessageBody=alert.to_json(),
            )
        except (BotoCoreError, ClientError) as exc:
            raise DispatchError(f"send_message to {queue_url} failed") from exc
