"""Substring filter over tag (annotation type) records.

Typically used to narrow `GET /annotation_types` down to the tags a CRM
integration owns (`sf_*` for Salesforce, `hs_*` for HubSpot) before they are
fed to reconciliation.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .normalizer import to_mapping_list

__all__ = ["DEFAULT_FILTER_FIELD", "DEFAULT_FILTER", "parse_needles", "filter_tags"]

DEFAULT_FILTER_FIELD = "name"
DEFAULT_FILTER = "sf_"


def parse_needles(filter_string: Optional[str]) -> List[str]:
    """Split a comma-separated filter into trimmed, lower-cased, non-empty needles."""
    raw = filter_string or DEFAULT_FILTER
    return [s.strip().lower() for s in raw.split(",") if s.strip()]


def filter_tags(
    items: Any,
    field_name: Optional[str] = DEFAULT_FILTER_FIELD,
    filter_string: Optional[str] = DEFAULT_FILTER,
) -> List[Dict[str, Any]]:
    """Keep records whose `field_name` contains any needle (case-insensitive)."""
    field = field_name or DEFAULT_FILTER_FIELD
    needles = parse_needles(filter_string)
    kept: List[Dict[str, Any]] = []
    for item in to_mapping_list(items):
        if not isinstance(item, dict):
            continue
        value = item.get(field)
        if value is None:
            continue
        haystack = str(value).lower()
        if any(n in haystack for n in needles):
            kept.append(item)
    return kept
