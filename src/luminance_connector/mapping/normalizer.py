"""Normalization of loosely shaped mapping configuration.

Platform config variables and previous step results reach the connector in
whatever shape the workflow author wired up: a native list, an object nesting
the list under some key, an object-of-objects, or any of those JSON-encoded as
a string. This module turns them into a plain ordered list (or a plain dict)
before any mapping logic runs.

Shape Dispatch (`to_mapping_list`, first match wins):
    1. list / tuple                      -> list, order preserved
    2. dict with a list under a known key -> that list (keys checked in
       NESTED_LIST_KEYS order)
    3. non-empty dict of dicts           -> list(values), iteration order
    4. str                               -> JSON-decode, then recurse
    5. anything else                     -> []

JSON decoding goes through `parse_json`, which returns a `JsonParseResult`
instead of raising. The lenient policy (malformed JSON -> empty result) is
applied in exactly one place per coercion function and logged at WARNING so
that a broken config variable is visible in the step logs.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    "NESTED_LIST_KEYS",
    "JsonParseResult",
    "parse_json",
    "to_mapping_list",
    "to_object",
    "require_mapping_list",
]

NESTED_LIST_KEYS: tuple[str, ...] = ("mymappings", "mappings", "items", "data")


@dataclass(frozen=True)
class JsonParseResult:
    """Outcome of decoding a JSON string: either `value` or `error` is meaningful."""

    ok: bool
    value: Any = None
    error: Optional[str] = None


def parse_json(text: str) -> JsonParseResult:
    try:
        return JsonParseResult(ok=True, value=json.loads(text))
    except (TypeError, ValueError) as e:
        return JsonParseResult(ok=False, error=str(e))


def _preview(text: str, limit: int = 80) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def to_mapping_list(value: Any) -> List[Any]:
    """Coerce `value` into an ordered list of entries.

    Args:
        value: List, nesting dict, dict-of-dicts or JSON string of any of those

    Returns:
        List of entries (possibly empty). Never raises.
    """
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, dict):
        for key in NESTED_LIST_KEYS:
            nested = value.get(key)
            if isinstance(nested, list):
                return list(nested)
        values = list(value.values())
        if values and all(isinstance(v, dict) for v in values):
            return values
        return []
    if isinstance(value, str):
        result = parse_json(value)
        if not result.ok:
            logger.warning(
                "Mapping configuration is not valid JSON (%s); treating as empty: %r",
                result.error,
                _preview(value),
            )
            return []
        return to_mapping_list(result.value)
    return []


def to_object(value: Any) -> Dict[str, Any]:
    """Coerce `value` into a dict, decoding JSON strings; anything else yields {}."""
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        result = parse_json(value)
        if not result.ok:
            logger.warning(
                "Expected a JSON object but could not decode (%s); treating as empty: %r",
                result.error,
                _preview(value),
            )
            return {}
        return to_object(result.value)
    return {}


def require_mapping_list(value: Any) -> List[Any]:
    """Like `to_mapping_list` but raise `ConfigurationError` when nothing is found."""
    entries = to_mapping_list(value)
    if not entries:
        raise ConfigurationError("no mapping list found")
    return entries
