"""Length bounds for free text sent to chat channels."""

from __future__ import annotations

import json

from alarm_publisher.core.types import JsonValue

# Mattermost rejects posts longer than this.
MESSAGE_SIZE_LIMIT = 16_383

ERROR_MESSAGE_MAX_LENGTH = 2_000
STACK_TRACE_MAX_LENGTH = 13_000

ELLIPSIS = "..."

_FENCE = "```"
CODE_BLOCK_OVERHEAD = len(f"\n{_FENCE}\n\n{_FENCE}")


def truncate(text: str, max_length: int) -> str:
    """Cut *text* to at most *max_length* characters, marking the cut with ``...``."""
    if len(text) <= max_length:
        return text
    if max_length < len(ELLIPSIS):
        return text[:max(max_length, 0)]
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def wrap_as_code_block(text: str) -> str:
    """Fence *text* for chat rendering, bounded to STACK_TRACE_MAX_LENGTH."""
    return f"\n{_FENCE}\n{truncate(text, STACK_TRACE_MAX_LENGTH)}\n{_FENCE}"


def stringify_value(value: JsonValue) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
