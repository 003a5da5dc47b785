"""Per-contract-type configuration helpers.

The status-update config form stores one set of field pickers per contract
type, suffixing each key with a normalized contract-type key:

    {"mappings": {"matterId_nda": "{\"fieldKey\": \"Id\", ...}",
                  "luminanceStatus_nda": null,
                  "matterId_msa": "..."}}

`normalize_config_mappings` extracts the set for one contract type, strips the
suffix and decodes the JSON field descriptors. The `matterId` picker is
mandatory; the optional status pickers are always present in the output
(None when not configured).
"""
from __future__ import annotations

import re
from typing import Any, Dict

from ..errors import ConfigurationError
from .alignment import stringify
from .normalizer import parse_json, to_object

__all__ = [
    "REQUIRED_KEY",
    "OPTIONAL_KEYS",
    "contract_type_key",
    "normalize_config_mappings",
    "map_status_update",
    "create_initial_matter_payload",
]

REQUIRED_KEY = "matterId"
OPTIONAL_KEYS: tuple[str, ...] = (
    "luminanceDocumentLink",
    "luminanceStatus",
    "luminanceAssignee",
    "luminanceLastUpdated",
)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def contract_type_key(contract_type: Any) -> str:
    """`"Master Services / MSA"` -> `"master_services_msa"`."""
    return _NON_ALNUM.sub("_", stringify(contract_type)).strip("_").lower()


def _decode(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    result = parse_json(value)
    return result.value if result.ok else value


def normalize_config_mappings(payload: Any, selected_contract_type: Any) -> Dict[str, Any]:
    """Extract the mapping set configured for one contract type.

    Args:
        payload: Object (or JSON string) with a `mappings` property
        selected_contract_type: Contract type name as shown in the config

    Returns:
        {"mappings": {...}, "selectedContractType": <name>}

    Raises:
        ConfigurationError: if the contract type is blank or has no matterId mapping
    """
    root = to_object(payload)
    mappings = to_object(root.get("mappings"))
    ct_key = contract_type_key(selected_contract_type)
    if not ct_key:
        raise ConfigurationError("selectedContractType is required")

    suffix = f"_{ct_key}"
    filtered: Dict[str, Any] = {}
    for key, value in mappings.items():
        if key.endswith(suffix):
            filtered[key[: -len(suffix)]] = _decode(value)

    if REQUIRED_KEY not in filtered:
        raise ConfigurationError(
            f"Missing required mapping: {REQUIRED_KEY} for contract type '{stringify(selected_contract_type)}'"
        )
    for key in OPTIONAL_KEYS:
        filtered.setdefault(key, None)

    return {"mappings": filtered, "selectedContractType": stringify(selected_contract_type)}


def map_status_update(payload: Any) -> Dict[str, str]:
    """Rename a Luminance status update onto the config variable keys."""
    source = to_object(payload)
    return {
        "luminanceDocumentLink": stringify(source.get("document_link")),
        "luminanceAssignee": stringify(source.get("assignee")),
        "luminanceStatus": stringify(source.get("contract_status")),
    }


def create_initial_matter_payload(name: Any, workflow_id: Any) -> Dict[str, str]:
    return {"name": stringify(name), "workflow_id": stringify(workflow_id)}
