"""JSON Forms documents for the CRM <> Luminance field-mapper config page.

The platform renders these documents as the mapping editor; what the user
saves is exactly the `mymappings` list that `annotations.build_annotations`
consumes later. Each CRM field option's value is the JSON field descriptor
parsed by `field_resolution.parse_selector`, and each annotation-type option's
value is the stringified annotation type id (JSON Forms option values must
be strings).

Fetching CRM field metadata and annotation types is the caller's job; this
module only shapes already-fetched lists:

    crm_fields:       [{"objectName", "name", "label"?, "type"?, "custom"?}]
    annotation_types: [{"id", "name"?, "type"?}]

A second document pair, `build_status_update_form`, renders the per-contract-type
status-update picker whose saved `mappings` object is read back by
`config_mappings.normalize_config_mappings`.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from .alignment import stringify
from .config_mappings import OPTIONAL_KEYS, REQUIRED_KEY, contract_type_key
from .normalizer import to_mapping_list

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_TAG_PREFIXES",
    "FIELD_PROPERTY",
    "field_descriptor",
    "select_annotation_types",
    "build_field_mapping_form",
    "parse_contract_types",
    "build_status_update_form",
]

DEFAULT_TAG_PREFIXES: Dict[str, tuple[str, ...]] = {
    "salesforce": ("sf_", "SF_"),
    "hubspot": ("hs_", "HS_"),
}
FIELD_PROPERTY: Dict[str, str] = {
    "salesforce": "salesforceField",
    "hubspot": "hubspotField",
}
_DISPLAY_NAME: Dict[str, str] = {
    "salesforce": "Salesforce",
    "hubspot": "HubSpot",
}


def field_descriptor(field: Dict[str, Any]) -> str:
    """Serialize a CRM field to the selector descriptor stored in the mapping."""
    return json.dumps(
        {
            "fieldKey": stringify(field.get("name")),
            "objectName": stringify(field.get("objectName")),
            "fieldType": stringify(field.get("type") or field.get("fieldType") or "string"),
            "isCustom": bool(field.get("custom") or field.get("isCustom") or False),
        }
    )


def select_annotation_types(annotation_types: Any, prefixes: Iterable[str]) -> List[Dict[str, Any]]:
    """Keep annotation types whose name starts with a prefix; all of them if none match."""
    all_types = [t for t in to_mapping_list(annotation_types) if isinstance(t, dict)]
    prefixes = tuple(prefixes)
    matching = [t for t in all_types if stringify(t.get("name")).startswith(prefixes)]
    if not matching:
        logger.info("No annotation types match prefixes %s; offering all %d", prefixes, len(all_types))
        return all_types
    return matching


def _field_label(field: Dict[str, Any]) -> str:
    return stringify(field.get("label") or field.get("name"))


def build_field_mapping_form(
    crm_fields: Any,
    annotation_types: Any,
    *,
    source_system: str = "salesforce",
    tag_prefixes: Optional[Iterable[str]] = None,
    property_filter: Optional[str] = None,
    max_options: Optional[int] = 500,
) -> Dict[str, Any]:
    """Build the `{"schema", "uiSchema"}` pair for the field-mapper form.

    Args:
        crm_fields: CRM field metadata across the selected objects
        annotation_types: Luminance annotation types
        source_system: "salesforce" or "hubspot"; picks the option property
            name and the default tag prefixes
        tag_prefixes: Override tag name prefixes; empty iterable disables the filter
        property_filter: Case-insensitive substring over field name, label and object
        max_options: Cap on options per dropdown (at least 1); None disables the cap

    Raises:
        ValueError: for an unknown source system or when no CRM fields are given
    """
    if source_system not in FIELD_PROPERTY:
        raise ValueError(f"Unknown source system {source_system!r}")
    fields = [f for f in to_mapping_list(crm_fields) if isinstance(f, dict)]
    if not fields:
        raise ValueError("No accessible fields found for the specified objects")

    needle = (property_filter or "").strip().lower()
    shown = fields
    if needle:
        shown = [
            f
            for f in fields
            if needle in stringify(f.get("name")).lower()
            or needle in _field_label(f).lower()
            or needle in stringify(f.get("objectName")).lower()
        ]
    shown = sorted(shown, key=lambda f: (stringify(f.get("objectName")), _field_label(f)))

    prefixes = DEFAULT_TAG_PREFIXES[source_system] if tag_prefixes is None else tuple(tag_prefixes)
    if prefixes:
        tags = select_annotation_types(annotation_types, prefixes)
    else:
        tags = [t for t in to_mapping_list(annotation_types) if isinstance(t, dict)]

    if max_options is not None:
        cap = max(1, max_options)
        shown = shown[:cap]
        tags = tags[:cap]

    field_property = FIELD_PROPERTY[source_system]
    display = _DISPLAY_NAME[source_system]
    schema = {
        "type": "object",
        "properties": {
            "mymappings": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        field_property: {
                            "type": "string",
                            "oneOf": [
                                {
                                    "title": f"{_field_label(f)} ({stringify(f.get('objectName'))})",
                                    "const": field_descriptor(f),
                                }
                                for f in shown
                            ],
                        },
                        "luminanceFields": {
                            "type": "string",
                            "oneOf": [
                                {
                                    "title": (
                                        f"{stringify(t.get('name')) or 'Annotation Type ' + stringify(t.get('id'))}"
                                        f" ({stringify(t.get('type')) or 'unknown'})"
                                    ),
                                    "const": stringify(t.get("id")),
                                }
                                for t in tags
                            ],
                        },
                    },
                },
            }
        },
    }

    elements: List[Dict[str, Any]] = []
    if needle or len(shown) < len(fields):
        filtered_note = f' (filtered by "{needle}")' if needle else ""
        elements.append(
            {
                "type": "Label",
                "text": (
                    f"Showing {len(shown)} of {len(fields)} {display} fields{filtered_note}. "
                    "Adjust 'Property Filter' or 'Max Options' to refine the list."
                ),
            }
        )
    elements.append(
        {
            "type": "Control",
            "scope": "#/properties/mymappings",
            "label": f"{display} <> Luminance Field Mapper",
        }
    )
    return {"schema": schema, "uiSchema": {"type": "VerticalLayout", "elements": elements}}


_STATUS_LABELS: Dict[str, str] = {
    REQUIRED_KEY: "Matter ID",
    "luminanceDocumentLink": "Luminance Document Link",
    "luminanceStatus": "Luminance Status",
    "luminanceAssignee": "Luminance Assignee",
    "luminanceLastUpdated": "Luminance Last Updated",
}
_NO_CONTRACT_TYPES_TEXT = (
    "Set the Contract Types config variable to configure per-contract mappings (e.g., 'NDA, MSA')."
)


def parse_contract_types(contract_types: Any) -> List[str]:
    """Split a comma-separated string (or list) into trimmed, non-empty names."""
    if isinstance(contract_types, str):
        raw: List[Any] = contract_types.split(",")
    else:
        raw = to_mapping_list(contract_types)
    return [name for name in (stringify(item).strip() for item in raw) if name]


def build_status_update_form(crm_fields: Any, contract_types: Any) -> Dict[str, Any]:
    """Build the per-contract-type field picker used by status updates.

    For each contract type the form offers a required `matterId_<key>` picker
    and optional pickers for the status tags (`luminanceStatus_<key>`, ...),
    where `<key>` is `contract_type_key(contract type)`. Optional pickers
    default to null so that unselected tags are still present in the saved
    `mappings` object.

    Contract types that normalize to an empty or already-seen key are skipped.
    With no usable contract type a placeholder form asking for them is returned.

    Raises:
        ValueError: when contract types are given but no CRM fields are usable
    """
    names: List[str] = []
    keys: List[str] = []
    for name in parse_contract_types(contract_types):
        key = contract_type_key(name)
        if not key or key in keys:
            logger.debug("Skipping contract type %r (key %r)", name, key)
            continue
        names.append(name)
        keys.append(key)

    if not names:
        return {
            "schema": {"type": "object", "properties": {}},
            "uiSchema": {
                "type": "VerticalLayout",
                "elements": [{"type": "Label", "text": _NO_CONTRACT_TYPES_TEXT}],
            },
        }

    fields = [f for f in to_mapping_list(crm_fields) if isinstance(f, dict)]
    if not fields:
        raise ValueError("No accessible fields found for the specified objects")
    options = [
        {"title": f"{_field_label(f)} ({stringify(f.get('objectName'))})", "const": field_descriptor(f)}
        for f in fields
    ]

    properties: Dict[str, Any] = {}
    defaults: Dict[str, None] = {}
    required: List[str] = []
    groups: List[Dict[str, Any]] = []
    for name, key in zip(names, keys):
        controls: List[Dict[str, Any]] = []
        for tag in (REQUIRED_KEY,) + OPTIONAL_KEYS:
            prop = f"{tag}_{key}"
            title = f"{_STATUS_LABELS[tag]} ({name})"
            if tag == REQUIRED_KEY:
                properties[prop] = {"type": "string", "title": title, "oneOf": options}
                required.append(prop)
            else:
                properties[prop] = {"type": ["string", "null"], "title": title, "default": None, "oneOf": options}
                defaults[prop] = None
            controls.append(
                {"type": "Control", "scope": f"#/properties/mappings/properties/{prop}", "label": title}
            )
        groups.append({"type": "Group", "label": f"Mappings for {name}", "elements": controls})

    schema = {
        "type": "object",
        "properties": {
            "mappings": {
                "type": "object",
                "properties": properties,
                "required": required,
                "default": defaults,
            }
        },
    }
    return {"schema": schema, "uiSchema": {"type": "VerticalLayout", "elements": groups}}
