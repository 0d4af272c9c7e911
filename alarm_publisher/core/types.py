"""Domain types: alarm events, recipients, and the outbound alert."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# A decoded JSON value: object / array / string / number / bool / null.
JsonValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]

# A single structured log line, as decoded from the log-search response.
LogRecord = dict[str, JsonValue]

ALERT_TAGS: tuple[str, ...] = ("AWS", "CloudwatchAlarm")


class Priority(StrEnum):
    """Alert priority understood by the notification queue consumer."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"
    P5 = "P5"


class ChannelKind(StrEnum):
    """Notification target system: the value is the recipient key on the wire."""

    OPSGENIE = "opsgenieResponderTeam"
    MATTERMOST = "mattermostChannelName"
    JIRA = "jiraTeamId"


# ── Alarm event ─────────────────────────────────────────────────


class _EventModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AlarmState(_EventModel):
    value: str
    reason: str = ""
    timestamp: str
    reason_data: str | None = Field(default=None, alias="reasonData")


class PreviousAlarmState(_EventModel):
    value: str
    timestamp: str
    reason: str | None = None
    reason_data: str | None = Field(default=None, alias="reasonData")


class AlarmTrigger(_EventModel):
    """Metric metadata of the alarm that fired."""

    metric_name: str = Field(alias="metricName")
    namespace: str
    statistic_type: str = Field(default="", alias="statisticType")
    statistic: str = ""
    unit: str | None = None
    dimensions: dict[str, str] = Field(default_factory=dict)
    threshold: float = 0.0
    comparison_operator: str = Field(default="", alias="comparisonOperator")
    evaluation_periods: int = Field(default=1, alias="evaluationPeriods")


class AlarmMetricRef(_EventModel):
    id: str


class AlarmConfiguration(_EventModel):
    description: str | None = None
    metrics: list[AlarmMetricRef] | None = None


class AlarmDetail(_EventModel):
    alarm_name: str = Field(alias="alarmName")
    state: AlarmState
    previous_state: PreviousAlarmState | None = Field(default=None, alias="previousState")
    trigger: AlarmTrigger | None = None
    configuration: AlarmConfiguration | None = None


class AlarmEvent(_EventModel):
    """EventBridge "CloudWatch Alarm State Change" event.

    Envelope keys we do not use (``detail-type``, ``resources``, ``time``,
    ...) are ignored.
    """

    id: str
    account: str
    region: str
    detail: AlarmDetail


# ── Recipients / alert ──────────────────────────────────────────


class Recipient(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value: str


class Detail(BaseModel):
    """Auxiliary key/value pair attached to an alert."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str


class Recipients(BaseModel):
    """Configured targets grouped per channel kind."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    opsgenie_teams: list[str] = Field(default_factory=list, alias="opsgenieTeams")
    jira_team_ids: list[str] = Field(default_factory=list, alias="jiraTeamIds")
    mattermost_channel_names: list[str] = Field(
        default_factory=list, alias="mattermostChannelNames"
    )

    @field_validator(
        "opsgenie_teams", "jira_team_ids", "mattermost_channel_names", mode="before"
    )
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def is_empty(self) -> bool:
        return not (self.opsgenie_teams or self.jira_team_ids or self.mattermost_channel_names)

    def flatten(self) -> list[Recipient]:
        """All recipients in delivery order: OpsGenie, Mattermost, then Jira."""
        groups = (
            (ChannelKind.OPSGENIE, self.opsgenie_teams),
            (ChannelKind.MATTERMOST, self.mattermost_channel_names),
            (ChannelKind.JIRA, self.jira_team_ids),
        )
        return [
            Recipient(key=kind.value, value=target)
            for kind, targets in groups
            for target in targets
        ]


class Alert(BaseModel):
    """Normalised, size-bounded alert ready for the notification queue."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    id: str
    priority: str
    recipients: list[Recipient]
    source: str
    details: list[Detail]
    tags: list[str] = Field(default_factory=lambda: list(ALERT_TAGS))

    def to_json(self) -> str:
        """Pretty-printed (2-space) JSON body for the queue message."""
        return json.dumps(self.model_dump(mode="json"), indent=2, ensure_ascii=False)
