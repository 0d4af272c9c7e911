"""Pydantic publisher configuration loaded from YAML or the Lambda environment."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from alarm_publisher.core.exceptions import ConfigurationError
from alarm_publisher.core.types import Detail, Priority, Recipients

_config: PublisherConfig | None = None

_DEFAULT_CONFIG_PATH = Path("config/publisher.yaml")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class ConsoleConfig(BaseModel):
    """Where deep links into the log console are routed through."""

    portal_url: str = "https://company.awsapps.com/start"
    role_name: str = "CompanyReadOnly"


class PublisherConfig(BaseModel):
    """Everything one alarm publisher needs, fixed for the process lifetime."""

    queue_account: str
    queue_name: str
    title: str
    filter_pattern: str
    log_group_name: str
    period_minutes: int = Field(gt=0)
    priority: Priority = Priority.P1
    error_message_property: str = ""
    stack_trace_property: str = ""
    recipients: Recipients = Recipients()
    # Extra details, emitted in this order after the fixed ones.
    details: list[Detail] = Field(default_factory=list)
    region: str | None = None
    console: ConsoleConfig = ConsoleConfig()
    logging: LoggingConfig = LoggingConfig()


def build_config(data: Mapping[str, Any]) -> PublisherConfig:
    """Validate raw settings, turning pydantic errors into ConfigurationError."""
    try:
        return PublisherConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigurationError(f"invalid publisher configuration: {exc}") from exc


def load_config(path: str | Path | None = None) -> PublisherConfig:
    """Load configuration from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/publisher.yaml.

    Returns:
        Parsed PublisherConfig instance.
    """
    global _config  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise ConfigurationError(f"config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)
    if not isinstance(raw, dict):
        raise ConfigurationError(f"config file {config_path} must contain a mapping")

    _config = build_config(raw)
    return _config


def read_indexed_details(environ: Mapping[str, str]) -> list[Detail]:
    """Read DETAIL_<i>_KEY / DETAIL_<i>_VALUE pairs until the first gap."""
    details: list[Detail] = []
    index = 0
    while True:
        key = environ.get(f"DETAIL_{index}_KEY")
        value = environ.get(f"DETAIL_{index}_VALUE")
        if not key or not value:
            return details
        details.append(Detail(key=key, value=value))
        index += 1


def _parse_recipients(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError("RECIPIENTS is not valid JSON") from exc
    if not isinstance(parsed, dict):
        raise ConfigurationError("RECIPIENTS must be a JSON object")
    return parsed


def config_from_env(environ: Mapping[str, str] | None = None) -> PublisherConfig:
    """Build configuration from the Lambda environment variable contract."""
    env = os.environ if environ is None else environ

    data: dict[str, Any] = {
        "queue_account": env.get("QUEUE_ACCOUNT"),
        "queue_name": env.get("QUEUE_NAME"),
        "title": env.get("TITLE"),
        "filter_pattern": env.get("FILTER_PATTERN"),
        "log_group_name": env.get("LOG_GROUP_NAME"),
        "period_minutes": env.get("PERIOD"),
        "priority": env.get("PRIORITY") or Priority.P1,
        "error_message_property": env.get("ERROR_MESSAGE_PROPERTY", ""),
        "stack_trace_property": env.get("STACK_TRACE_PROPERTY", ""),
        "recipients": _parse_recipients(env.get("RECIPIENTS")),
        "details": read_indexed_details(env),
        "region": env.get("AWS_REGION"),
        "logging": {
            "level": env.get("LOG_LEVEL", "INFO"),
            "format": env.get("LOG_FORMAT", "json"),
        },
    }
    missing = sorted(
        name
        for name, field in (
            ("QUEUE_ACCOUNT", "queue_account"),
            ("QUEUE_NAME", "queue_name"),
            ("TITLE", "title"),
            ("FILTER_PATTERN", "filter_pattern"),
            ("LOG_GROUP_NAME", "log_group_name"),
            ("PERIOD", "period_minutes"),
        )
        if not data[field]
    )
    if missing:
        raise ConfigurationError(f"missing required environment variables: {', '.join(missing)}")

    return build_config(data)


def get_config() -> PublisherConfig:
    """Return the cached configuration, reading the environment if not yet loaded."""
    global _config  # noqa: PLW0603
    if _config is None:
        _config = config_from_env()
    return _config


def reset_config() -> None:
    """Reset the cached configuration (useful for testing)."""
    global _config  # noqa: PLW0603
    _config = None
