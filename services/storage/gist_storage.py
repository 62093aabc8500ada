"""
GitHub Gist backend.

The whole catalog is one JSON file inside a private Gist, so every device
running the app sees the same stock.
"""

from __future__ import annotations
import json
import logging
from typing import Any, Dict, Optional

import requests

from services.utils.secrets import get_secret, is_truthy
from .local_storage import empty_catalog, ensure_shape

logger = logging.getLogger(__name__)

GIST_API = "https://api.github.com/gists"
DEFAULT_FILENAME = "stokpro_catalog.json"


class GistError(Exception):
    """Any failure talking to the Gist API or reading the catalog file it returns."""


class GistStorage:
    """Reads and writes the catalog file of a single Gist."""

    def __init__(
        self,
        gist_id: Optional[str] = None,
        token: Optional[str] = None,
        filename: Optional[str] = None,
        timeout: float = 15,
    ):
        self.gist_id = gist_id or get_secret("GITHUB_GIST_ID")
        self.token = token or get_secret("GITHUB_TOKEN")
        self.filename = filename or get_secret("GITHUB_GIST_FILENAME") or DEFAULT_FILENAME
        self.timeout = timeout
        self._disabled = False

    @property
    def url(self) -> str:
        return f"{GIST_API}/{self.gist_id}"

    def is_available(self) -> bool:
        """Configured, not switched off with DISABLE_GIST, and no earlier failure."""
        if self._disabled or is_truthy(get_secret("DISABLE_GIST")):
            return False
        return bool(self.gist_id and self.token)

    def disable(self) -> None:
        """Stop using the Gist for the rest of this session."""
        self._disabled = True

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _call(self, method: str, action: str, url: Optional[str] = None, **kwargs: Any) -> requests.Response:
        if not self.gist_id:
            raise GistError("GITHUB_GIST_ID is not configured")
        try:
            response = requests.request(
                method, url or self.url, headers=self._headers(), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise GistError(f"{action} error: {e}") from e

        if response.status_code in (401, 403, 404):
            raise GistError(f"{action} refused by GitHub (HTTP {response.status_code})")
        try:
            response.raise_for_status()
        except requests.RequestException as e:
            raise GistError(f"{action} error: {e}") from e
        return response

    def load(self) -> Dict[str, Any]:
        """
        Fetch the catalog file.

        A missing or blank file yields an empty catalog so a fresh Gist can
        be used straight away. Content that cannot be trusted in full is an
        error, never an empty catalog, so it cannot overwrite the local cache.

        Raises:
            GistError: network failure, a non-2xx answer, an unreadable API
                response, truncated file content or invalid catalog JSON
        """
        response = self._call("GET", "Gist fetch")
        try:
            entry = (response.json().get("files") or {}).get(self.filename) or {}
            content = entry.get("content") or ""
        except (ValueError, AttributeError) as e:
            raise GistError(f"Gist fetch returned an unreadable response: {e}") from e

        # The API cuts file content at about 1 MB; the full text is at raw_url.
        if entry.get("truncated"):
            raw_url = entry.get("raw_url")
            if not raw_url:
                raise GistError(f"Gist file {self.filename} came back truncated without a raw_url")
            content = self._call("GET", "Gist raw fetch", url=raw_url).text
        if not content.strip():
            return empty_catalog()
        try:
            return ensure_shape(json.loads(content))
        except json.JSONDecodeError as e:
            raise GistError(f"Gist file {self.filename} is not valid JSON: {e}") from e

    def save(self, data: Dict[str, Any]) -> None:
        """
        Replace the catalog file's content.

        Raises:
            GistError: network failure or a non-2xx answer
        """
        body = {"files": {self.filename: {"content": json.dumps(data, ensure_ascii=False, indent=2)}}}
        self._call("PATCH", "Gist save", data=json.dumps(body))
        logger.debug("Catalog pushed to gist %s/%s", self.gist_id, self.filename)
