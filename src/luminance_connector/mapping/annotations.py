"""Annotation construction pipeline.

Turns a mapping configuration plus the CRM records it refers to into Luminance
matter-tag annotations:

    raw mappings --to_mapping_list--> entries --salesforce_entry / hubspot_entry-->
    MappingEntry --resolve_*_value--> raw value --align_field_types-->
    aligned value --shape_content--> Annotation

The whole call fails with `ConfigurationError` only when no mapping entries
can be found. Individual entries never fail: every entry yields an annotation,
with type-appropriate zero values standing in for missing or unparsable data.

Source systems:
    "salesforce": `align_from_crm_record` (Account -> secondary record)
    "hubspot":    `align_from_hubspot_record` (primary first, then secondary)
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..models.luminance import Annotation, MatterTagPayload
from ..models.mapping import FieldSelector, MappingEntry
from .alignment import align_field_types, shape_content
from .field_resolution import (
    hubspot_entry,
    resolve_hubspot_value,
    resolve_salesforce_value,
    salesforce_entry,
)
from .naming import matter_name
from .normalizer import require_mapping_list, to_object

logger = logging.getLogger(__name__)

__all__ = [
    "SOURCE_SYSTEMS",
    "align_from_crm_record",
    "align_from_hubspot_record",
    "build_annotations",
    "build_matter_tag_payload",
]

Record = Optional[Dict[str, Any]]
Resolver = Callable[[FieldSelector, Record, Record], Any]

SOURCE_SYSTEMS: tuple[str, ...] = ("salesforce", "hubspot")


def _align(entry: MappingEntry, value: Any, default_currency: str) -> Annotation:
    aligned = align_field_types(value, entry.source_type, entry.target_type, default_currency)
    content = shape_content(aligned, entry.source_type, entry.target_type, default_currency)
    return Annotation(annotation_type_id=entry.annotation_type_id, content=content)


def _align_with(
    resolver: Resolver,
    entry: MappingEntry,
    primary: Record,
    secondary: Record,
    default_currency: str,
) -> Annotation:
    value = resolver(entry.selector, primary, secondary)
    if value is None:
        logger.debug(
            "No value for field %r (object=%r) mapped to annotation type %s",
            entry.selector.field_key,
            entry.selector.object_name,
            entry.annotation_type_id,
        )
    return _align(entry, value, default_currency)


def align_from_crm_record(
    entry: MappingEntry,
    primary: Record,
    secondary: Record,
    default_currency: str,
) -> Annotation:
    """Build one annotation from Salesforce records (Opportunity / Account)."""
    return _align_with(resolve_salesforce_value, entry, primary, secondary, default_currency)


def align_from_hubspot_record(
    entry: MappingEntry,
    primary: Record,
    secondary: Record,
    default_currency: str,
) -> Annotation:
    """Build one annotation from HubSpot property sets."""
    return _align_with(resolve_hubspot_value, entry, primary, secondary, default_currency)


_STRATEGIES: Dict[str, tuple[Callable[[Any], MappingEntry], Callable[..., Annotation]]] = {
    "salesforce": (salesforce_entry, align_from_crm_record),
    "hubspot": (hubspot_entry, align_from_hubspot_record),
}


def build_annotations(
    mappings: Any,
    primary: Record,
    secondary: Record,
    default_currency: str,
    *,
    source_system: str = "salesforce",
) -> List[Annotation]:
    """Build one annotation per mapping entry, preserving configuration order.

    Args:
        mappings: Mapping configuration in any shape accepted by `to_mapping_list`
        primary: Primary CRM record (Opportunity, or HubSpot properties)
        secondary: Optional secondary record (Account, or associated object)
        default_currency: Currency applied to money values that carry none
        source_system: "salesforce" or "hubspot"

    Raises:
        ConfigurationError: when no mapping entries can be located
        ValueError: for an unknown source system
    """
    try:
        parse_entry, align = _STRATEGIES[source_system]
    except KeyError:
        raise ValueError(
            f"Unknown source system {source_system!r}; expected one of {', '.join(SOURCE_SYSTEMS)}"
        ) from None
    entries = require_mapping_list(mappings)
    # Records may arrive JSON-encoded; anything that is not an object reads as empty.
    primary_record = to_object(primary)
    secondary_record = to_object(secondary)
    annotations = [
        align(parse_entry(raw), primary_record, secondary_record, default_currency)
        for raw in entries
    ]
    logger.debug(
        "Built %d annotation(s) from %s mapping (currency=%s)",
        len(annotations),
        source_system,
        default_currency,
    )
    return annotations


def build_matter_tag_payload(
    mappings: Any,
    primary: Record,
    secondary: Record,
    default_currency: str,
    *,
    source_system: str = "salesforce",
    name_prefix: Optional[str] = None,
) -> MatterTagPayload:
    """Build the matter-tag request body; `name` is set only when a prefix is given."""
    annotations = build_annotations(
        mappings,
        primary,
        secondary,
        default_currency,
        source_system=source_system,
    )
    return MatterTagPayload(
        name=matter_name(name_prefix),
        required_matter_annotations=annotations,
    )
