"""Timestamp parsing and ISO-8601 rendering with UTC enforcement.

Luminance datetime annotations carry `{"timestamp": "<ISO-8601>"}` with
millisecond precision and a `Z` suffix (`2024-01-15T10:30:00.000Z`). CRM
values arrive as ISO strings, date-only strings, US-style dates, RFC 2822
strings or epoch numbers; this module turns all of them into that one format.

Conversion Heuristic (epoch numbers):
    Values < 1_000_000_000_000 treated as seconds (Unix epoch range ~1970-2033)
    Values >= 1_000_000_000_000 treated as milliseconds (HubSpot / Salesforce API format)

Public Functions:
    epoch_ms_to_dt: Convert epoch timestamp to UTC-aware datetime
    parse_datetime: Best-effort parse of an arbitrary value to a UTC datetime
    format_iso: Render a datetime in the Luminance timestamp format
    utc_now_iso: Current time in the Luminance timestamp format
    to_iso_timestamp: parse_datetime + format_iso with "now" as the fallback

Design Invariant:
    All datetimes MUST be timezone-aware UTC. Values without an offset are
    interpreted as UTC. Tests scan the codebase for naive constructors.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

logger = logging.getLogger(__name__)

__all__ = [
    "epoch_ms_to_dt",
    "parse_datetime",
    "format_iso",
    "utc_now_iso",
    "to_iso_timestamp",
]

_EPOCH_DIGITS = re.compile(r"^-?\d{10,}(\.\d+)?$")
_FALLBACK_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%d %b %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
)


def epoch_ms_to_dt(ms: float) -> datetime:
    """Convert epoch timestamp (milliseconds or seconds) to timezone-aware UTC datetime.

    Args:
        ms: Epoch timestamp in milliseconds or seconds

    Returns:
        Timezone-aware datetime in UTC
    """
    if abs(ms) < 1_000_000_000_000:
        return datetime.fromtimestamp(ms, tz=timezone.utc)
    return datetime.fromtimestamp(ms / 1000.0, tz=timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Best-effort conversion of a CRM value to a UTC datetime.

    Accepts datetime objects, epoch numbers (int/float or long digit strings),
    ISO-8601 strings (with or without time / offset / `Z`), a handful of
    common human formats and RFC 2822 dates.

    Returns:
        UTC-aware datetime, or None when the value is empty or unparsable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    try:
        if isinstance(value, (int, float)):
            return epoch_ms_to_dt(value)
    except (OverflowError, OSError, ValueError):
        return None
    text = str(value).strip()
    if not text:
        return None
    if _EPOCH_DIGITS.match(text):
        try:
            return epoch_ms_to_dt(float(text))
        except (OverflowError, OSError, ValueError):
            return None
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    try:
        return _as_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError):
        return None


def format_iso(dt: datetime) -> str:
    """Render `dt` as `YYYY-MM-DDTHH:MM:SS.mmmZ` in UTC."""
    return _as_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return format_iso(datetime.now(timezone.utc))


def _is_blank(value: Any) -> bool:
    # Zero counts as missing, not as the 1970 epoch.
    if value is None or isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    return isinstance(value, str) and value == ""


def to_iso_timestamp(value: Any) -> str:
    """Normalize `value` to an ISO-8601 timestamp; empty, zero or invalid input yields now."""
    if _is_blank(value):
        return utc_now_iso()
    parsed = parse_datetime(value)
    if parsed is None:
        logger.warning("Unparsable date value %r; substituting current time", value)
        return utc_now_iso()
    return format_iso(parsed)
