"""Thin Luminance API boundary.

The mapping engine never performs I/O; this module is the single place where
its inputs (annotation types) are fetched and its outputs (matter-tag
payloads) are sent. Each call is one HTTP request with bearer authentication.
No retries or backoff.

Endpoints (relative to `LUMINANCE_BASE_URL`):
    GET  /annotation_types?limit=<n|null>
    POST /projects/{project_id}/matters/create
    POST /projects/{project_id}/matters/{matter_id}/annotations

Any transport failure or status >= 400 raises `LuminanceAPIError`.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union, cast

import httpx

from .config import Settings
from .errors import LuminanceAPIError

logger = logging.getLogger(__name__)

__all__ = ["LuminanceClient"]


class LuminanceClient:
    def __init__(self, *, base_url: str, access_token: str, timeout: int = 30):
        if not base_url:
            raise LuminanceAPIError("Luminance base URL is empty; set LUMINANCE_BASE_URL or LUMINANCE_TOKEN_URL")
        if not access_token:
            raise LuminanceAPIError("Luminance access token is empty; set LUMINANCE_ACCESS_TOKEN")
        self.base = base_url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "LuminanceClient":
        return cls(
            base_url=settings.LUMINANCE_BASE_URL,
            access_token=settings.LUMINANCE_ACCESS_TOKEN,
            timeout=settings.HTTP_TIMEOUT,
        )

    def _check(self, resp: httpx.Response, what: str) -> Any:
        if resp.status_code >= 400:
            raise LuminanceAPIError(
                f"{what} failed status={resp.status_code} body={resp.text[:500]}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise LuminanceAPIError(f"invalid {what} JSON: {e}", status_code=resp.status_code) from e

    def get_annotation_types(self, limit: Optional[Union[int, str]] = None) -> List[Dict[str, Any]]:
        """Fetch annotation types (tags). `limit=None` requests all of them."""
        url = f"{self.base}/annotation_types"
        params = {"limit": "null" if limit is None else str(limit)}
        try:
            resp = httpx.get(url, params=params, headers=self.headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise LuminanceAPIError(f"annotation types request failed: {e}") from e
        data = self._check(resp, "annotation types")
        logger.debug("Fetched %d annotation type(s)", len(data) if isinstance(data, list) else 0)
        return cast(List[Dict[str, Any]], data)

    def _post(self, path: str, body: Dict[str, Any], what: str) -> Dict[str, Any]:
        url = f"{self.base}{path}"
        try:
            resp = httpx.post(url, json=body, headers=self.headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise LuminanceAPIError(f"{what} request failed: {e}") from e
        return cast(Dict[str, Any], self._check(resp, what))

    def create_matter(self, project_id: int, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._post(f"/projects/{project_id}/matters/create", body, "create matter")

    def add_matter_annotations(
        self, project_id: int, matter_id: int, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Post a matter-tag payload to an existing matter."""
        logger.info(
            "Posting %d annotation(s) to project=%s matter=%s",
            len(payload.get("required_matter_annotations") or []),
            project_id,
            matter_id,
        )
        return self._post(
            f"/projects/{project_id}/matters/{matter_id}/annotations",
            payload,
            "add matter annotations",
        )
