"""Builds the outbound Alert from an alarm event and an optional log sample."""

from __future__ import annotations

from alarm_publisher.alerting.text import (
    ERROR_MESSAGE_MAX_LENGTH,
    stringify_value,
    truncate,
    wrap_as_code_block,
)
from alarm_publisher.core.config import PublisherConfig
from alarm_publisher.core.exceptions import ConfigurationError
from alarm_publisher.core.types import (
    ALERT_TAGS,
    AlarmEvent,
    Alert,
    Detail,
    JsonValue,
    LogRecord,
    Recipient,
)
from alarm_publisher.logs.properties import resolve_property

LINK_LABEL = "See error in CloudWatch"


def _present(value: JsonValue) -> bool:
    return value is not None and value != ""


class AlertAssembler:
    """Turns (event, log sample, deep link) into one bounded Alert.

    - The description carries the error message (if any) and the deep link.
    - Details always start with account, alarm name and state timestamp.
    - Configured extra details and the fenced stack trace are appended only
      when a stack trace was found in the sample.
    - Recipients are flattened OpsGenie, Mattermost, then Jira.
    """

    def __init__(self, config: PublisherConfig) -> None:
        if config.recipients.is_empty():
            raise ConfigurationError("Must have at least one Recipient")
        self._config = config
        self._recipients: list[Recipient] = config.recipients.flatten()

    def assemble(
        self,
        event: AlarmEvent,
        log_sample: LogRecord | None,
        deep_link: str,
    ) -> Alert:
        error_message: JsonValue = None
        stack_trace: JsonValue = None
        if log_sample is not None:
            error_message = resolve_property(self._config.error_message_property, log_sample)
            stack_trace = resolve_property(self._config.stack_trace_property, log_sample)

        return Alert(
            title=self._config.title,
            description=self._description(error_message, deep_link),
            id=event.id,
            priority=self._config.priority.value,
            recipients=list(self._recipients),
            source=self._config.log_group_name,
            details=self._details(event, stack_trace),
            tags=list(ALERT_TAGS),
        )

    @staticmethod
    def _description(error_message: JsonValue, deep_link: str) -> str:
        link = f"[{LINK_LABEL}]({deep_link})"
        if not _present(error_message):
            return link
        message = truncate(stringify_value(error_message), ERROR_MESSAGE_MAX_LENGTH)
        return f"Error message: {message}\n{link}"

    def _details(self, event: AlarmEvent, stack_trace: JsonValue) -> list[Detail]:
        details = [
            Detail(key="account", value=event.account),
            Detail(key="alarmName", value=event.detail.alarm_name),
            Detail(key="timestamp", value=event.detail.state.timestamp),
        ]
        # Extra details ride along with the stack trace only; a sample
        # without one gets the fixed details alone.
        if _present(stack_trace):
            details.extend(self._config.details)
            details.append(
                Detail(key="stackTrace", value=wrap_as_code_block(stringify_value(stack_trace)))
            )
        return details
