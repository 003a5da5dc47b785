"""Tag-type reconciliation of previously built annotations.

The annotation builder only knows the declared type of the CRM field. The
Luminance annotation type's own semantic type (as returned by
`GET /annotation_types`) is authoritative, so this stage reshapes each
annotation's content to match it, overriding whatever the builder produced.

Rules (case-insensitive substring match on the tag type, applied in order,
each only when the content still has a `value` key):

    "datetime" -> {"timestamp": ISO-8601 of value, or now when unparsable}
    "party"    -> {"party": value}            (renamed, no conversion)
    "money"    -> {"value": value, "currency": existing or default}

Annotations whose type id is unknown pass through unchanged. Inputs are never
mutated; a new payload dict is returned with every other key carried over.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from ..models.luminance import TagTypeRecord
from .field_resolution import parse_annotation_type_id
from .normalizer import to_mapping_list, to_object
from .time_utils import to_iso_timestamp

logger = logging.getLogger(__name__)

__all__ = [
    "ANNOTATIONS_KEY",
    "build_type_lookup",
    "reconcile_content",
    "reconcile",
]

ANNOTATIONS_KEY = "required_matter_annotations"


def build_type_lookup(tag_records: Any) -> Dict[int, str]:
    """Map annotation type id -> semantic type, skipping records without either."""
    lookup: Dict[int, str] = {}
    for item in to_mapping_list(tag_records):
        if not isinstance(item, dict):
            continue
        try:
            record = TagTypeRecord.model_validate(item)
        except ValidationError:
            logger.debug("Skipping tag record without usable id/type: %r", item)
            continue
        if not record.type:
            continue
        lookup[record.id] = record.type
    return lookup


def reconcile_content(content: Any, type_name: str, default_currency: str) -> Dict[str, Any]:
    """Return a reshaped copy of `content` for the given semantic type name."""
    out = dict(to_object(content))
    lowered = type_name.lower()

    if "datetime" in lowered and "value" in out:
        out["timestamp"] = to_iso_timestamp(out.pop("value"))

    if "party" in lowered and "value" in out:
        out["party"] = out.pop("value")

    if "money" in lowered and "value" in out:
        if not out.get("currency"):
            out["currency"] = default_currency

    return out


def reconcile(
    tag_records: Any,
    mapping_result: Any,
    default_currency: str,
) -> Dict[str, Any]:
    """Reshape the annotations of a built payload according to their tag types.

    Args:
        tag_records: Tag metadata list (`[{id, type, name}]`), any accepted shape
        mapping_result: Output of the annotation builder (dict or JSON string)
        default_currency: Currency added to money annotations lacking one

    Returns:
        New payload dict with `required_matter_annotations` replaced
    """
    lookup = build_type_lookup(tag_records)
    payload = to_object(mapping_result)

    transformed: List[Dict[str, Any]] = []
    for annotation in to_mapping_list(payload.get(ANNOTATIONS_KEY)):
        annotation = to_object(annotation)
        type_id = parse_annotation_type_id(annotation.get("annotation_type_id"))
        type_name = lookup.get(type_id, "") if type_id is not None else ""
        transformed.append(
            {
                "annotation_type_id": type_id,
                "content": reconcile_content(annotation.get("content"), type_name, default_currency),
            }
        )

    unknown = sum(1 for a in transformed if a["annotation_type_id"] not in lookup)
    if unknown:
        logger.info(
            "%d of %d annotation(s) have no matching tag type; content left as built",
            unknown,
            len(transformed),
        )
    return {**payload, ANNOTATIONS_KEY: transformed}
