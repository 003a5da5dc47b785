"""Mapping entry parsing and CRM field value resolution.

Raw mapping entries come from the Salesforce and HubSpot field-mapper forms
(see `form_schema`). They share the `luminanceFields` key (annotation type id
as a string) but differ in how the CRM side is described:

Salesforce entry:
    {"luminanceFields": "2233",
     "salesforceField": "{\"fieldKey\": \"Name\", \"objectName\": \"Account\", ...}",
     "salesforceopportunityField": "Name",          # legacy flat key
     "salesforceFieldType": "text", "luminanceFieldType": "text"}

HubSpot entry:
    {"luminanceFields": "2233",
     "hubspotField": "{\"fieldKey\": \"amount\", \"objectName\": \"deals\", \"fieldType\": \"number\"}",
     "luminanceFieldType": "currency"}

The two source systems also resolve values differently:

    resolve_salesforce_value: the secondary record only when objectName is
        "Account", otherwise the primary record.
    resolve_hubspot_value: the primary record if it has the key, else the
        secondary record if it has the key.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Optional

from ..models.mapping import SOURCE_TYPES, TARGET_TYPES, FieldSelector, MappingEntry
from .normalizer import parse_json, to_object

logger = logging.getLogger(__name__)

__all__ = [
    "PRIMARY_OBJECT_NAME",
    "SECONDARY_OBJECT_NAME",
    "parse_annotation_type_id",
    "coerce_source_type",
    "coerce_target_type",
    "normalize_hubspot_source_type",
    "parse_selector",
    "salesforce_entry",
    "hubspot_entry",
    "resolve_salesforce_value",
    "resolve_hubspot_value",
]

PRIMARY_OBJECT_NAME = "Opportunity"
SECONDARY_OBJECT_NAME = "Account"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_annotation_type_id(raw: Any) -> Optional[int]:
    """Parse the leading integer of a configured annotation type id.

    `"2233"` -> 2233, `"2233 (sf_amount)"` -> 2233, `"abc"` -> None.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    if raw is None:
        return None
    match = _LEADING_INT.match(str(raw))
    if not match:
        logger.warning("Unparsable annotation type id %r; annotation will carry null id", raw)
        return None
    return int(match.group(1))


def _coerce_type(raw: Any, allowed: tuple[str, ...]) -> str:
    if raw is None:
        return "text"
    name = str(raw).strip().lower()
    if name in allowed:
        return name
    if name:
        logger.debug("Unknown field type %r; treating as text", raw)
    return "text"


def coerce_source_type(raw: Any) -> str:
    return _coerce_type(raw, SOURCE_TYPES)


def coerce_target_type(raw: Any) -> str:
    return _coerce_type(raw, TARGET_TYPES)


def normalize_hubspot_source_type(hs_type: Optional[str]) -> str:
    """Map a HubSpot property type onto the source type vocabulary."""
    t = (hs_type or "").lower()
    if "number" in t:
        return "number"
    if t == "date":
        return "date"
    if t == "datetime" or "time" in t:
        return "timestamp"
    return "text"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def parse_selector(raw: Any) -> Optional[Dict[str, Any]]:
    """Decode a JSON field descriptor; returns None when `raw` is not one.

    Descriptors normally arrive JSON-encoded (JSON Forms option values must be
    strings) but an already-decoded dict is accepted too.
    """
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    result = parse_json(raw)
    if not result.ok or not isinstance(result.value, dict):
        logger.debug("Field selector %r is not a JSON descriptor; using it as a flat key", raw)
        return None
    return result.value


def _flat_key(raw: Any) -> str:
    if isinstance(raw, str) and parse_selector(raw) is None:
        return raw.strip()
    return ""


def salesforce_entry(raw: Any) -> MappingEntry:
    """Parse a Salesforce mapping entry; missing pieces fall back to defaults."""
    data = to_object(raw)
    object_name = PRIMARY_OBJECT_NAME
    field_key = _text(data.get("salesforceopportunityField")) or _flat_key(data.get("salesforceField"))
    field_type: Optional[str] = None
    is_custom = False

    descriptor = parse_selector(data.get("salesforceField"))
    if descriptor is not None:
        object_name = _text(descriptor.get("objectName")) or object_name
        field_key = _text(descriptor.get("fieldKey")) or field_key
        field_type = descriptor.get("fieldType")
        is_custom = bool(descriptor.get("isCustom", False))

    return MappingEntry(
        annotation_type_id=parse_annotation_type_id(data.get("luminanceFields")),
        selector=FieldSelector(
            field_key=field_key,
            object_name=object_name,
            field_type=_text(field_type) or None,
            is_custom=is_custom,
        ),
        source_type=coerce_source_type(data.get("salesforceFieldType")),
        target_type=coerce_target_type(data.get("luminanceFieldType")),
    )


def hubspot_entry(raw: Any) -> MappingEntry:
    """Parse a HubSpot mapping entry; the source type comes from the property type."""
    data = to_object(raw)
    field_key = _flat_key(data.get("hubspotField"))
    object_name = ""
    field_type: Optional[str] = None

    descriptor = parse_selector(data.get("hubspotField"))
    if descriptor is not None:
        field_key = _text(descriptor.get("fieldKey"))
        object_name = _text(descriptor.get("objectName"))
        field_type = _text(descriptor.get("fieldType")) or None

    return MappingEntry(
        annotation_type_id=parse_annotation_type_id(data.get("luminanceFields")),
        selector=FieldSelector(
            field_key=field_key,
            object_name=object_name,
            field_type=field_type,
            is_custom=bool(descriptor.get("isCustom", False)) if descriptor else False,
        ),
        source_type=normalize_hubspot_source_type(field_type),
        target_type=coerce_target_type(data.get("luminanceFieldType")),
    )


def resolve_salesforce_value(
    selector: FieldSelector,
    primary: Optional[Dict[str, Any]],
    secondary: Optional[Dict[str, Any]],
) -> Any:
    record = secondary if selector.object_name == SECONDARY_OBJECT_NAME else primary
    if not isinstance(record, dict):
        return None
    return record.get(selector.field_key)


def resolve_hubspot_value(
    selector: FieldSelector,
    primary: Optional[Dict[str, Any]],
    secondary: Optional[Dict[str, Any]],
) -> Any:
    key = selector.field_key
    for record in (primary, secondary):
        if isinstance(record, dict) and key in record:
            return record[key]
    return None
