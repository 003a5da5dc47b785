"""Exception types raised by the connector.

Only configuration problems that make a whole invocation meaningless surface
as exceptions. Per-field problems (bad JSON, unparsable numbers or dates,
missing values) are handled by the lenient defaults of the mapping package.
"""
from __future__ import annotations

__all__ = ["ConfigurationError", "LuminanceAPIError"]


class ConfigurationError(ValueError):
    """Mapping configuration cannot be resolved into something usable."""


class LuminanceAPIError(RuntimeError):
    """A request to the Luminance API failed or returned an error status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
