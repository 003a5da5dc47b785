"""Internal mapping subpackage for decomposed transformation logic.

This package contains the core implementation of CRM record to Luminance
matter-tag mapping, decomposed into focused, single-responsibility modules. All
functions within this package are pure (no network I/O) and, apart from the
random matter name suffix and "now" fallbacks, deterministic.

The public API lives in the top-level `mapper.py` facade. Callers should not
import directly from this package unless accessing internal helpers for
testing purposes.

Modules:
    normalizer: Coercion of loosely shaped config into lists / dicts
    field_resolution: Mapping entry parsing and per-CRM value lookup
    alignment: Type alignment and annotation content shaping
    annotations: Annotation construction pipeline and payload builder
    reconciliation: Tag-type driven content reshaping
    tag_filter: Substring filter over tag records
    config_mappings: Per-contract-type config extraction and small payloads
    form_schema: JSON Forms documents for the field-mapper config page
    naming: Matter name generation
    time_utils: Timestamp parsing and ISO-8601 rendering

Design Invariants:
    - No network calls permitted
    - Individual mapping entries never fail; only an empty mapping list raises
    - Salesforce and HubSpot field resolution stay separate strategies
    - Timezone-aware UTC timestamps only
"""
from __future__ import annotations

from . import naming as naming  # noqa: F401
from . import normalizer as normalizer  # noqa: F401
from . import time_utils as time_utils  # noqa: F401

__all__ = ["naming", "normalizer", "time_utils"]
