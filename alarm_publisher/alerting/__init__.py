"""Alert assembly and delivery."""

from alarm_publisher.alerting.assembler import AlertAssembler
from alarm_publisher.alerting.dispatcher import QueueDispatcher
from alarm_publisher.alerting.exceptions import (
    AlertDeliveryError,
    DispatchError,
    QueueLookupError,
)
from alarm_publisher.alerting.publisher import Publisher
from alarm_publisher.alerting.text import truncate, wrap_as_code_block

__all__ = [
    "AlertAssembler",
    "AlertDeliveryError",
    "DispatchError",
    "Publisher",
    "QueueDispatcher",
    "QueueLookupError",
    "truncate",
    "wrap_as_code_block",
]
