"""Pydantic models for the Luminance side of the mapping.

These models define the logical structure of matter-tag annotations and the
outbound payload before it is handed to the HTTP boundary. The field names
(`annotation_type_id`, `content`, `required_matter_annotations`, `name`) and the
content keys (`value`, `currency`, `timestamp`, `party`) are the Luminance wire
format and must not be renamed.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Annotation(BaseModel):
    """A typed fact attached to a matter.

    `content` is one of `{value}`, `{value, currency}`, `{timestamp}` or
    `{party}`. It is kept as a plain dict because the reconciliation stage
    reshapes it according to the tag's authoritative type.
    """

    annotation_type_id: Optional[int] = None
    content: Dict[str, Any] = Field(default_factory=dict)


class TagTypeRecord(BaseModel):
    """Authoritative semantic type of a Luminance annotation type."""

    model_config = ConfigDict(extra="ignore")

    id: int
    type: str
    name: Optional[str] = None


class MatterTagPayload(BaseModel):
    """Request body for creating / tagging a matter.

    `name` is only present when a prefix was supplied to the builder.
    """

    name: Optional[str] = None
    required_matter_annotations: List[Annotation] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the exact JSON shape the Luminance API expects."""
        wire: Dict[str, Any] = {
            "required_matter_annotations": [
                {"annotation_type_id": a.annotation_type_id, "content": dict(a.content)}
                for a in self.required_matter_annotations
            ]
        }
        if self.name:
            wire["name"] = self.name
        return wire
