"""HTTP client for the Marvel Rivals statistics API."""
import logging
from typing import Any, Optional

import requests

from ..config import DEFAULT_API_BASE, DEFAULT_TIMEOUT, Settings
from ..errors import UpstreamError

log = logging.getLogger("rivalstrmnl.client")


class StatsClient:
    """Per-run connection settings for the stats provider.

    Built once per run and passed to every fetch; the API key lives here
    rather than in module-level headers.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "StatsClient":
        return cls(settings.api_key, base_url=settings.api_base, timeout=settings.timeout)

    def headers(self) -> dict:
        return {
            "x-api-key": self.api_key,
            "Accept": "application/json",
        }

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get_json(self, path: str, params: Optional[dict] = None) -> Any:
        url = self.url(path)
        log.debug("GET %s params=%s", url, params)
        try:
            resp = self.session.get(url, headers=self.headers(), params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UpstreamError(f"Request failed: {exc}", endpoint=path) from exc

        if resp.status_code >= 400:
            log.error("HTTP %s from %s: %s", resp.status_code, path, resp.text[:200])
            raise UpstreamError("Stats API returned an error", endpoint=path, status=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError("Stats API returned invalid JSON", endpoint=path, status=resp.status_code) from exc
