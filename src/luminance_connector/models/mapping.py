"""Pydantic models for parsed field-mapping configuration.

Mapping configuration arrives from the platform's JSON Forms config variables
in loosely typed shapes (see `mapping.normalizer`). Once an entry has been
located it is parsed into a frozen `MappingEntry`, which is what the alignment
stage works with. Construction from the raw Salesforce / HubSpot shapes lives
in `mapping.field_resolution`.
"""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

SourceType = Literal["text", "number", "currency", "date", "timestamp"]
TargetType = Literal["text", "number", "currency", "timestamp"]

SOURCE_TYPES: tuple[str, ...] = ("text", "number", "currency", "date", "timestamp")
TARGET_TYPES: tuple[str, ...] = ("text", "number", "currency", "timestamp")


class FieldSelector(BaseModel):
    """Identifies which CRM object and field a mapping entry reads.

    Mirrors the JSON descriptor stored in the config variable:
    `{"fieldKey": ..., "objectName": ..., "fieldType": ..., "isCustom": ...}`.
    """

    model_config = ConfigDict(frozen=True)

    field_key: str = ""
    object_name: str = ""
    field_type: Optional[str] = None
    is_custom: bool = False


class MappingEntry(BaseModel):
    """One configured correspondence between a CRM field and an annotation type."""

    model_config = ConfigDict(frozen=True)

    # None when the configured id could not be parsed; serialized as null.
    annotation_type_id: Optional[int] = None
    selector: FieldSelector = FieldSelector()
    source_type: SourceType = "text"
    target_type: TargetType = "text"
