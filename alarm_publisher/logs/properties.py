"""Field lookup into semi-structured log records."""

from __future__ import annotations

from collections.abc import Mapping

from alarm_publisher.core.types import JsonValue


def resolve_property(path: str, record: Mapping[str, JsonValue]) -> JsonValue:
    """Return the value at *path* in *record*, or None when it is not there.

    A key literally equal to *path* wins (ECS-style logs use flat keys such
    as ``"error.message"``). Otherwise *path* is split on ``.`` and walked
    through nested objects. The value is returned with its JSON type intact.

    Example::

        resolve_property("error.message", {"error": {"message": "boom"}})  # "boom"
        resolve_property("error.message", {"error.message": "boom"})       # "boom"
    """
    if path in record:
        return record[path]

    current: JsonValue = record  # type: ignore[assignment]
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return None
        current = current[segment]
    return current
