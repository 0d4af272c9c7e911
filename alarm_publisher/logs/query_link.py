"""Deep links into CloudWatch Logs Insights for an alarm's filter pattern.

The console reads its query from a JSURL-encoded ``queryDetail`` fragment.
The link is routed through the SSO portal so it opens in the alarm's
account, and the whole destination is percent-encoded the way browsers'
``encodeURIComponent`` does it. Output is a pure function of its inputs.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

MINUTE_MS = 60_000

QUERY_ROW_LIMIT = 200

CONSOLE_URL = "https://console.aws.amazon.com/cloudwatch/home"

_INSIGHTS_FIELDS = "@timestamp, @message, @logStream, @log"

# Characters JavaScript's encodeURI / encodeURIComponent leave untouched,
# beyond the letters, digits and "_.-~" that quote() always keeps.
_URI_SAFE = ";,/?:@&=+$!*'()#"
_URI_COMPONENT_SAFE = "!*'()"

_JSURL_PLAIN = re.compile(r"[A-Za-z0-9_.\-]")

_OUTER_BRACES = re.compile(r"^\{|\}$")
_WHITESPACE = re.compile(r"\s+")


# ── Filter pattern → Insights condition ─────────────────────────


def to_insights_condition(filter_pattern: str) -> str:
    """Translate a metric-filter pattern into a Logs Insights filter condition.

    ``{ $.['level'] = "ERROR" }`` becomes ``level="ERROR"``.
    """
    cleaned = _OUTER_BRACES.sub("", filter_pattern.strip())
    cleaned = cleaned.replace("$.['", "").replace("']", "")
    return _WHITESPACE.sub("", cleaned)


# ── JSURL ───────────────────────────────────────────────────────


def _jsurl_escape(text: str) -> str:
    out: list[str] = []
    for ch in text:
        if _JSURL_PLAIN.match(ch):
            out.append(ch)
        elif ch == "$":
            out.append("!")
        else:
            code = ord(ch)
            if code < 0x100:
                out.append(f"*{code:02x}")
            elif code <= 0xFFFF:
                out.append(f"**{code:04x}")
            else:
                # Escaped per UTF-16 code unit.
                code -= 0x10000
                out.append(f"**{0xD800 + (code >> 10):04x}")
                out.append(f"**{0xDC00 + (code & 0x3FF):04x}")
    return "".join(out)


def _jsurl_number(value: int | float) -> str:
    if isinstance(value, float):
        if not math.isfinite(value):
            return "~null"
        if value.is_integer() and abs(value) < 1e21:
            return f"~{int(value)}"
    return f"~{value}"


def jsurl_stringify(value: Any) -> str:
    """Encode *value* in JSURL, the compact URL-safe JSON used by the console."""
    if value is None:
        return "~null"
    if isinstance(value, bool):
        return "~true" if value else "~false"
    if isinstance(value, (int, float)):
        return _jsurl_number(value)
    if isinstance(value, str):
        return "~'" + _jsurl_escape(value)
    if isinstance(value, Mapping):
        pairs = [_jsurl_escape(str(k)) + jsurl_stringify(v) for k, v in value.items()]
        return "~(" + "~".join(pairs) + ")"
    if isinstance(value, Sequence):
        items = "".join(jsurl_stringify(v) for v in value)
        return "~(" + (items or "~") + ")"
    raise TypeError(f"cannot JSURL-encode {type(value).__name__}")


# ── Query + link ────────────────────────────────────────────────


def time_window(now_ms: int, period_minutes: int) -> tuple[int, int]:
    """Absolute ``(start, end)`` window in epoch ms ending at *now_ms*."""
    return now_ms - period_minutes * MINUTE_MS, now_ms


def build_query_detail(
    condition: str,
    log_group: str,
    start_ms: int,
    end_ms: int,
) -> dict[str, Any]:
    """Logs Insights query descriptor. Key order is part of the encoded link."""
    editor_string = (
        f"fields {_INSIGHTS_FIELDS}\n"
        f"| filter {condition}\n"
        "| sort @timestamp desc\n"
        f"| limit {QUERY_ROW_LIMIT}"
    )
    return {
        "end": end_ms,
        "start": start_ms,
        "timeType": "ABSOLUTE",
        "unit": "minutes",
        "editorString": editor_string,
        "source": [log_group],
    }


def build_deep_link(
    filter_pattern: str,
    account: str,
    region: str,
    log_group: str,
    start_ms: int,
    end_ms: int,
    *,
    portal_url: str = "https://company.awsapps.com/start",
    role_name: str = "CompanyReadOnly",
) -> str:
    """Fully encoded portal URL that lands on the pre-filled Insights query."""
    detail = build_query_detail(
        to_insights_condition(filter_pattern), log_group, start_ms, end_ms
    )
    destination = (
        f"{CONSOLE_URL}?region={region}"
        f"#logsV2:logs-insights?queryDetail={jsurl_stringify(detail)}"
    )
    portal = f"{portal_url}/#/console?account_id={account}&role_name={role_name}&destination="
    return quote(portal, safe=_URI_SAFE) + quote(destination, safe=_URI_COMPONENT_SAFE)
