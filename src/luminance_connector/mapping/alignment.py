"""Type alignment between CRM field types and Luminance annotation types.

Two steps turn a raw CRM value into annotation content:

align_field_types(value, source_type, target_type, default_currency)
    Converts the value between the declared type vocabularies:

    ==========  =========  ==============================================
    source      target     result
    ==========  =========  ==============================================
    same        same       value unchanged
    currency    number     bare amount (money objects unwrapped), falsy -> 0
    currency    text       stringified, None -> ""
    number      currency   {"value": value or 0, "currency": default}
    number      text       stringified, None -> ""
    date        any        ISO-8601 timestamp, invalid/empty -> now
    timestamp   text       value, falsy -> now
    text        number     leading float parse, non-numeric -> 0
    text        currency   {"value": parsed or 0, "currency": default}
    other       other      value unchanged
    ==========  =========  ==============================================

shape_content(aligned, source_type, target_type, default_currency)
    Builds the Luminance content dict. Temporal sources always produce
    `{"timestamp"}` whatever the target; otherwise the target decides.

"Falsy" follows JSON-world semantics: None, False, 0, NaN and "" are falsy,
empty containers are not. Nothing in this module raises for bad data.
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Dict

from .time_utils import to_iso_timestamp, utc_now_iso

__all__ = [
    "is_falsy",
    "stringify",
    "parse_number",
    "align_field_types",
    "shape_content",
]

_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_TEMPORAL_SOURCES = ("date", "timestamp")


def is_falsy(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value == ""
    return False


def _or_zero(value: Any) -> Any:
    return 0 if is_falsy(value) else value


def _whole(number: float) -> Any:
    if math.isfinite(number) and number == int(number):
        return int(number)
    return number


def stringify(value: Any) -> str:
    """Render a value as text the way it would appear in a JSON document."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(_whole(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def parse_number(value: Any) -> Any:
    """Parse the leading number of `value`; non-numeric input yields 0.

    Whole numbers come back as int so that `"42"` maps to `42`, not `42.0`.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return _whole(value) if isinstance(value, float) else value
    match = _LEADING_FLOAT.match(stringify(value))
    if not match:
        return 0
    try:
        number = float(match.group(1))
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return _whole(number)


def _unwrap_amount(value: Any) -> Any:
    if isinstance(value, dict) and "value" in value:
        return value["value"]
    return value


def align_field_types(
    value: Any,
    source_type: str,
    target_type: str,
    default_currency: str,
) -> Any:
    if source_type == target_type:
        return value

    if source_type == "currency":
        if target_type == "number":
            return _or_zero(_unwrap_amount(value))
        if target_type == "text":
            return stringify(_unwrap_amount(value))
        return value

    if source_type == "number":
        if target_type == "currency":
            return {"value": _or_zero(value), "currency": default_currency}
        if target_type == "text":
            return stringify(value)
        return value

    if source_type == "date":
        return to_iso_timestamp(value)

    if source_type == "timestamp":
        if target_type == "text":
            return utc_now_iso() if is_falsy(value) else value
        return value

    if source_type == "text":
        if target_type == "number":
            return parse_number(value)
        if target_type == "currency":
            return {"value": parse_number(value), "currency": default_currency}
        return value

    return value


def _timestamp_text(aligned: Any) -> Any:
    if is_falsy(aligned):
        return utc_now_iso()
    if isinstance(aligned, str):
        return aligned
    # Epoch numbers from HubSpot datetime properties.
    return to_iso_timestamp(aligned)


def shape_content(
    aligned: Any,
    source_type: str,
    target_type: str,
    default_currency: str,
) -> Dict[str, Any]:
    """Build annotation content for an aligned value.

    Args:
        aligned: Output of `align_field_types`
        source_type: Declared CRM field type (temporal sources win)
        target_type: Declared Luminance field type
        default_currency: Currency used when the value carries none

    Returns:
        One of {"value"}, {"value", "currency"} or {"timestamp"}
    """
    if source_type in _TEMPORAL_SOURCES:
        return {"timestamp": _timestamp_text(aligned)}

    if target_type == "currency":
        if isinstance(aligned, dict):
            amount = aligned.get("value")
            currency = aligned.get("currency")
        else:
            amount, currency = aligned, None
        return {"value": _or_zero(amount), "currency": currency or default_currency}
    if target_type == "timestamp":
        return {"timestamp": _timestamp_text(aligned)}
    if target_type == "number":
        return {"value": _or_zero(aligned)}
    return {"value": aligned if aligned is not None else ""}
