"""Application configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads configuration parameters
from environment variables and a `.env` file. It centralizes the connector's
tunable parameters: the Luminance API location and credentials, the defaults
applied by the mapping engine (currency, matter name prefix, tag filter) and
logging behavior.

Credentials are always injected through the environment; nothing in the
package carries a literal client id, secret or tenant URL.

The `get_settings` function provides a cached, singleton instance of the
configuration, ensuring consistent settings throughout the application.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict

_TOKEN_PATH_SUFFIX = "/auth/oauth2/token"
_API_PATH = "/api2"


class Settings(BaseSettings):
    """Defines all connector configuration parameters.

    Values are read from environment variables or a `.env` file. A validator
    derives the API base URL from the OAuth token URL when only the latter is
    configured.
    """

    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Luminance API
    LUMINANCE_BASE_URL: str = Field(
        default="", description="Base URL of the Luminance API, e.g. https://acme.app.luminance.com/api2"
    )
    LUMINANCE_TOKEN_URL: Optional[str] = Field(
        default=None,
        description="OAuth2 token URL; base URL (<host>/api2) is derived from it when LUMINANCE_BASE_URL is blank",
    )
    LUMINANCE_ACCESS_TOKEN: str = Field(default="", description="Bearer token for the Luminance API")
    HTTP_TIMEOUT: int = Field(default=30, description="Timeout (seconds) for Luminance API requests")

    # Mapping defaults
    DEFAULT_CURRENCY: str = Field(
        default="USD", description="ISO 4217 code applied to money values that carry no currency"
    )
    MATTER_NAME_PREFIX: Optional[str] = Field(
        default=None,
        description="Optional prefix for generated matter names (<prefix> - <random suffix>)",
    )
    TAG_FILTER_FIELD: str = Field(default="name", description="Tag record field tested by the tag filter")
    TAG_FILTER: str = Field(
        default="sf_",
        description="Comma-separated, case-insensitive substrings a tag must contain to be kept",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @field_validator("DEFAULT_CURRENCY", mode="before")
    @classmethod
    def normalize_currency(cls, v: Any) -> str:
        """Upper-case and trim the currency code; blank falls back to USD."""
        if v is None:
            return "USD"
        code = str(v).strip().upper()
        return code or "USD"

    @field_validator("MATTER_NAME_PREFIX", "LUMINANCE_TOKEN_URL", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if isinstance(v, str):
            trimmed = v.strip()
            return trimmed or None
        return None

    @model_validator(mode="after")
    def derive_base_url_if_needed(self) -> "Settings":
        """Derive `LUMINANCE_BASE_URL` from the token URL when it is not set.

        `https://acme.app.luminance.com/auth/oauth2/token` becomes
        `https://acme.app.luminance.com/api2`.

        Returns:
            The validated `Settings` instance, with a trailing-slash-free base URL.
        """
        if not self.LUMINANCE_BASE_URL and self.LUMINANCE_TOKEN_URL:
            host = self.LUMINANCE_TOKEN_URL.replace(_TOKEN_PATH_SUFFIX, "").rstrip("/")
            self.LUMINANCE_BASE_URL = host + _API_PATH
        self.LUMINANCE_BASE_URL = self.LUMINANCE_BASE_URL.rstrip("/")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:  # pragma: no cover - trivial
    """Return a cached, singleton instance of the connector settings."""
    return Settings()
