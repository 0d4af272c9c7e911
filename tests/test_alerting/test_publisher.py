"""End-to-end pipeline tests for Publisher with fake logs and SQS clients."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from alarm_publisher.alerting.exceptions import QueueLookupError
from alarm_publisher.alerting.publisher import Publisher
from alarm_publisher.core.exceptions import ConfigurationError, InvalidEventError
from alarm_publisher.core.types import Detail, Recipients


@pytest.fixture()
def make_publisher(
    config_factory: Any, logs_client: MagicMock, sqs_client: MagicMock, now_ms: int
) -> Any:
    def _make(**kw: Any) -> Publisher:
        return Publisher(
            config_factory(**kw),
            logs_client=logs_client,
            sqs_client=sqs_client,
            clock=lambda: now_ms,
        )

    return _make


def _sent_body(sqs_client: MagicMock) -> dict[str, Any]:
    return json.loads(sqs_client.send_message.call_args.kwargs["MessageBody"])


# ── Happy path ──────────────────────────────────────────────────


class TestPublish:
    def test_full_alert_on_queue(
        self,
        make_publisher: Any,
        logs_client: MagicMock,
        sqs_client: MagicMock,
        alarm_event: dict[str, Any],
        log_events: Any,
        parsing_error_message: str,
        expected_link: str,
        now_ms: int,
    ) -> None:
        logs_client.filter_log_events.return_value = log_events(parsing_error_message)
        publisher = make_publisher(
            recipients=Recipients(
                mattermost_channel_names=["test-mattermost-channel"],
                opsgenie_teams=["opsgenie-team1", "opsgenie-team2"],
                jira_team_ids=["jirTeamId"],
            )
        )

        publisher.publish(alarm_event)

        logs_client.filter_log_events.assert_called_once_with(
            logGroupName="test-log-group",
            filterPattern="{ $.['level'] = \"ERROR\" }",
            startTime=now_ms - 300_000,
            endTime=now_ms,
            limit=1,
        )
        sqs_client.send_message.assert_called_once()
        expected = {
            "title": "Detected 1 error(s) in test-log-group",
            "description": (
                f"Error message: Parsing error\n[See error in CloudWatch]({expected_link})"
            ),
            "id": "test-alert-id",
            "priority": "P2",
            "recipients": [
                {"key": "opsgenieResponderTeam", "value": "opsgenie-team1"},
                {"key": "opsgenieResponderTeam", "value": "opsgenie-team2"},
                {"key": "mattermostChannelName", "value": "test-mattermost-channel"},
                {"key": "jiraTeamId", "value": "jirTeamId"},
            ],
            "source": "test-log-group",
            "details": [
                {"key": "account", "value": "TestAccount"},
                {"key": "alarmName", "value": "TestErrorLogAlarm"},
                {"key": "timestamp", "value": "2024-07-30T14:12:32.835+0000"},
                {
                    "key": "stackTrace",
                    "value": (
                        '\n```\nUnrecognized field "wrongParameter" '
                        "(class se.company.class.dto.SomeDto)\n```"
                    ),
                },
            ],
            "tags": ["AWS", "CloudwatchAlarm"],
        }
        kwargs = sqs_client.send_message.call_args.kwargs
        assert kwargs["QueueUrl"] == "QueueUrl"
        assert kwargs["MessageBody"] == json.dumps(expected, indent=2)

    def test_no_log_sample(
        self,
        make_publisher: Any,
        sqs_client: MagicMock,
        alarm_event: dict[str, Any],
        expected_link: str,
    ) -> None:
        make_publisher(details=[Detail(key="team", value="core")]).publish(alarm_event)
        body = _sent_body(sqs_client)
        assert body["description"] == f"[See error in CloudWatch]({expected_link})"
        assert [d["key"] for d in body["details"]] == ["account", "alarmName", "timestamp"]

    def test_log_lookup_failure_still_sends(
        self,
        make_publisher: Any,
        logs_client: MagicMock,
        sqs_client: MagicMock,
        alarm_event: dict[str, Any],
    ) -> None:
        logs_client.filter_log_events.side_effect = ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "slow down"}},
            "FilterLogEvents",
        )
        publisher = make_publisher()
        publisher.publish(alarm_event)
        assert sqs_client.send_message.call_count == 1
        assert publisher.fetcher.error_count == 1
        assert _sent_body(sqs_client)["description"].startswith("[See error in CloudWatch]")

    def test_extra_details_with_stack_trace(
        self,
        make_publisher: Any,
        logs_client: MagicMock,
        sqs_client: MagicMock,
        alarm_event: dict[str, Any],
        log_events: Any,
        parsing_error_message: str,
    ) -> None:
        logs_client.filter_log_events.return_value = log_events(parsing_error_message)
        make_publisher(details=[Detail(key="team", value="core")]).publish(alarm_event)
        keys = [d["key"] for d in _sent_body(sqs_client)["details"]]
        assert keys == ["account", "alarmName", "timestamp", "team", "stackTrace"]

    def test_queue_url_resolved_once_per_process(
        self, make_publisher: Any, sqs_client: MagicMock, alarm_event: dict[str, Any]
    ) -> None:
        publisher = make_publisher()
        publisher.publish(alarm_event)
        publisher.publish(alarm_event)
        assert sqs_client.get_queue_url.call_count == 1
        assert sqs_client.send_message.call_count == 2


# ── Failures ────────────────────────────────────────────────────


class TestFailures:
    def test_queue_url_rejection_aborts(
        self,
        make_publisher: Any,
        logs_client: MagicMock,
        sqs_client: MagicMock,
        alarm_event: dict[str, Any],
    ) -> None:
        sqs_client.get_queue_url.side_effect = ClientError(
            {"Error": {"Code": "AWS.SimpleQueueService.NonExistentQueue", "Message": "error"}},
            "GetQueueUrl",
        )
        with pytest.raises(QueueLookupError):
            make_publisher().publish(alarm_event)
        logs_client.filter_log_events.assert_not_called()
        sqs_client.send_message.assert_not_called()

    def test_no_recipients_fails_at_construction(
        self, make_publisher: Any, sqs_client: MagicMock
    ) -> None:
        with pytest.raises(ConfigurationError):
            make_publisher(recipients=Recipients())
        sqs_client.get_queue_url.assert_not_called()
        sqs_client.send_message.assert_not_called()

    def test_invalid_event(self, make_publisher: Any, sqs_client: MagicMock) -> None:
        with pytest.raises(InvalidEventError):
            make_publisher().publish({"id": "x", "detail": {}})
        sqs_client.send_message.assert_not_called()


# ── Dry run ─────────────────────────────────────────────────────


class TestBuildAlert:
    def test_build_alert_does_not_touch_queue(
        self, make_publisher: Any, sqs_client: MagicMock, alarm_event: dict[str, Any]
    ) -> None:
        alert = make_publisher().build_alert(alarm_event)
        assert alert.id == "test-alert-id"
        sqs_client.get_queue_url.assert_not_called()
        sqs_client.send_message.assert_not_called()
