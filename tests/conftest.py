"""Shared fixtures: a canned alarm event, config factory, fake AWS clients."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from alarm_publisher.core.config import PublisherConfig, reset_config
from alarm_publisher.core.types import Recipients

EPOCH_NOW = 1722348633322
FIVE_MINUTES_AGO = EPOCH_NOW - 5 * 60_000

FILTER_PATTERN = "{ $.['level'] = \"ERROR\" }"

EXPECTED_LINK = (
    "https://company.awsapps.com/start/#/console?account_id=TestAccount"
    "&role_name=CompanyReadOnly&destination=https%3A%2F%2Fconsole.aws.amazon.com"
    "%2Fcloudwatch%2Fhome%3Fregion%3Dtestregion%23logsV2%3Alogs-insights%3FqueryDetail%3D"
    f"~(end~{EPOCH_NOW}~start~{FIVE_MINUTES_AGO}~timeType~'ABSOLUTE~unit~'minutes"
    "~editorString~'fields*20*40timestamp*2c*20*40message*2c*20*40logStream*2c*20*40log"
    "*0a*7c*20filter*20level*3d*22ERROR*22*0a*7c*20sort*20*40timestamp*20desc"
    "*0a*7c*20limit*20200~source~(~'test-log-group))"
)


def make_config(**kw: Any) -> PublisherConfig:
    defaults: dict[str, Any] = {
        "queue_account": "test_account",
        "queue_name": "queue_name",
        "title": "Detected 1 error(s) in test-log-group",
        "priority": "P2",
        "filter_pattern": FILTER_PATTERN,
        "log_group_name": "test-log-group",
        "period_minutes": 5,
        "error_message_property": "message",
        "stack_trace_property": "stacktrace",
        "recipients": Recipients(mattermost_channel_names=["test-mattermost-channel"]),
    }
    defaults.update(kw)
    return PublisherConfig(**defaults)


def log_events_response(*messages: str) -> dict[str, Any]:
    return {
        "events": [
            {
                "ingestionTime": EPOCH_NOW - 30_000,
                "eventId": "some-log-event",
                "logStreamName": "some-log-stream",
                "timestamp": EPOCH_NOW - 60_000,
                "message": message,
            }
            for message in messages
        ]
    }


@pytest.fixture(autouse=True)
def _clean_config() -> None:
    """Reset the global config cache before each test."""
    reset_config()


@pytest.fixture()
def alarm_event() -> dict[str, Any]:
    return {
        "id": "test-alert-id",
        "detail-type": "CloudWatch Alarm State Change",
        "resources": ["arn", "arn2"],
        "region": "testregion",
        "account": "TestAccount",
        "source": "aws.cloudwatch",
        "time": "2022-01-01T00:00:00.000Z",
        "version": "0",
        "detail": {
            "alarmName": "TestErrorLogAlarm",
            "configuration": {
                "description": "My Description",
                "metrics": [{"id": "metricId1"}],
            },
            "previousState": {
                "reason": "Reason",
                "reasonData": "{}",
                "timestamp": "2021-01-01T00:00:00.000+0000",
                "value": "OK",
            },
            "state": {
                "reason": "Reason",
                "reasonData": "{}",
                "timestamp": "2024-07-30T14:12:32.835+0000",
                "value": "ALARM",
            },
        },
    }


@pytest.fixture()
def parsing_error_message() -> str:
    return json.dumps(
        {
            "message": "Parsing error",
            "stacktrace": 'Unrecognized field "wrongParameter" (class se.company.class.dto.SomeDto)',
        }
    )


@pytest.fixture()
def sqs_client() -> MagicMock:
    client = MagicMock()
    client.get_queue_url.return_value = {"QueueUrl": "QueueUrl"}
    client.send_message.return_value = {"MessageId": "msg-1"}
    return client


@pytest.fixture()
def logs_client() -> MagicMock:
    client = MagicMock()
    client.filter_log_events.return_value = {"events": []}
    return client


@pytest.fixture()
def config_factory() -> Any:
    return make_config


@pytest.fixture()
def expected_link() -> str:
    return EXPECTED_LINK


@pytest.fixture()
def now_ms() -> int:
    return EPOCH_NOW


@pytest.fixture()
def log_events() -> Any:
    return log_events_response
