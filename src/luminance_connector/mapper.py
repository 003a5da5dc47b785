"""Public facade for CRM record to Luminance matter-tag mapping.

This module provides the stable public API used by the connector's actions
and CLI. All mapping logic is delegated to the `luminance_connector.mapping`
package; results are returned as plain JSON-ready dicts in the Luminance wire
format so they can be posted verbatim.

Public Functions:
    build_annotations_from_mapping: Salesforce records -> matter-tag payload
    build_annotations_from_hubspot_mapping: HubSpot properties -> matter-tag payload
    create_luminance_matter_tag_payload: Reconcile a payload against tag types
    filter_out_specific_tags: Substring filter over tag records
    normalize_config_mappings: Per-contract-type config extraction
    map_status_update_to_config_variables: Status update -> config variable keys
    create_initial_matter_payload: Body for matter creation
    build_field_mapping_form: JSON Forms documents for the field mapper
    build_status_update_form: JSON Forms documents for the status-update picker

Defaults for currency, name prefix and tag filter come from `Settings` when the
caller passes None.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .config import get_settings
from .mapping.annotations import build_matter_tag_payload
from .mapping.config_mappings import (
    create_initial_matter_payload,
    map_status_update,
    normalize_config_mappings,
)
from .mapping.form_schema import build_field_mapping_form, build_status_update_form
from .mapping.reconciliation import reconcile
from .mapping.tag_filter import filter_tags

__all__ = [
    "build_annotations_from_mapping",
    "build_annotations_from_hubspot_mapping",
    "create_luminance_matter_tag_payload",
    "filter_out_specific_tags",
    "normalize_config_mappings",
    "map_status_update_to_config_variables",
    "create_initial_matter_payload",
    "build_field_mapping_form",
    "build_status_update_form",
]


def _currency(default_currency: Optional[str]) -> str:
    if default_currency:
        return default_currency
    return get_settings().DEFAULT_CURRENCY


def _prefix(name_prefix: Optional[str]) -> Optional[str]:
    if name_prefix is not None:
        return name_prefix
    return get_settings().MATTER_NAME_PREFIX


def build_annotations_from_mapping(
    mappings: Any,
    primary_data: Optional[Dict[str, Any]],
    secondary_data: Optional[Dict[str, Any]] = None,
    *,
    name_prefix: Optional[str] = None,
    default_currency: Optional[str] = None,
) -> Dict[str, Any]:
    """Map Salesforce Opportunity / Account data into a matter-tag payload.

    Args:
        mappings: `mymappings` config in any accepted shape
        primary_data: Opportunity record
        secondary_data: Related Account record (used for objectName "Account")
        name_prefix: When non-empty, adds `name` = "<prefix> - <random suffix>"
        default_currency: Currency for money values lacking one

    Returns:
        `{"required_matter_annotations": [...], "name"?: str}`

    Raises:
        ConfigurationError: if no mapping list can be located
    """
    payload = build_matter_tag_payload(
        mappings,
        primary_data,
        secondary_data,
        _currency(default_currency),
        source_system="salesforce",
        name_prefix=_prefix(name_prefix),
    )
    return payload.to_wire()


def build_annotations_from_hubspot_mapping(
    mappings: Any,
    primary_data: Optional[Dict[str, Any]],
    secondary_data: Optional[Dict[str, Any]] = None,
    *,
    name_prefix: Optional[str] = None,
    default_currency: Optional[str] = None,
) -> Dict[str, Any]:
    """Map HubSpot property sets into a matter-tag payload.

    Values are looked up in `primary_data` first and in `secondary_data` when
    the primary set lacks the property.
    """
    payload = build_matter_tag_payload(
        mappings,
        primary_data,
        secondary_data,
        _currency(default_currency),
        source_system="hubspot",
        name_prefix=_prefix(name_prefix),
    )
    return payload.to_wire()


def create_luminance_matter_tag_payload(
    tags: Any,
    mapping_results: Any,
    default_currency: Optional[str] = None,
) -> Dict[str, Any]:
    """Merge mapped annotations with tag types and coerce values to Luminance formats."""
    return reconcile(tags, mapping_results, _currency(default_currency))


def filter_out_specific_tags(
    items: Any,
    field_name: Optional[str] = None,
    filter_string: Optional[str] = None,
) -> List[Dict[str, Any]]:
    settings = get_settings()
    return filter_tags(
        items,
        field_name or settings.TAG_FILTER_FIELD,
        filter_string or settings.TAG_FILTER,
    )


def map_status_update_to_config_variables(payload: Any) -> Dict[str, str]:
    return map_status_update(payload)
