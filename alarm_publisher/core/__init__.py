"""Core module: config, types, logging, exceptions."""

from alarm_publisher.core.config import (
    PublisherConfig,
    config_from_env,
    get_config,
    load_config,
    reset_config,
)
from alarm_publisher.core.exceptions import ConfigurationError, PublisherError
from alarm_publisher.core.logging import setup_logging
from alarm_publisher.core.types import (
    AlarmEvent,
    Alert,
    ChannelKind,
    Detail,
    LogRecord,
    Priority,
    Recipient,
    Recipients,
)

__all__ = [
    "AlarmEvent",
    "Alert",
    "ChannelKind",
    "ConfigurationError",
    "Detail",
    "LogRecord",
    "Priority",
    "PublisherConfig",
    "PublisherError",
    "Recipient",
    "Recipients",
    "config_from_env",
    "get_config",
    "load_config",
    "reset_config",
    "setup_logging",
]
