import logging
import time
from typing import Dict, Optional

import requests

from ..config import DEFAULT_PUBLISH_DELAY, DEFAULT_TIMEOUT, DEFAULT_WEBHOOK_BASE, Settings
from ..errors import DownstreamError

log = logging.getLogger("rivalstrmnl.webhook")


class DisplayClient:
    """Posts merge variables to one TRMNL custom plugin."""

    def __init__(
        self,
        plugin_id: str,
        base_url: str = DEFAULT_WEBHOOK_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.plugin_id = plugin_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "DisplayClient":
        return cls(settings.plugin_id, base_url=settings.webhook_base, timeout=settings.timeout)

    @property
    def url(self) -> str:
        return f"{self.base_url}/custom_plugins/{self.plugin_id}"

    def post_merge_variables(self, document: Dict[str, str]) -> None:
        """
        Send one merge-variables update with deep merge enabled.

        Raises DownstreamError on a transport failure or any 4xx/5xx.
        """
        payload = {
            "merge_variables": document,
            "deep_merge": True,
        }

        log.info("[webhook] Posting %d variable(s) to plugin %s", len(document), self.plugin_id)
        try:
            resp = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            log.error("[webhook] Request to plugin %s failed: %s", self.plugin_id, exc)
            raise DownstreamError(f"Request to plugin {self.plugin_id} failed: {exc}") from exc

        if resp.status_code >= 400:
            log.error(
                "[webhook] HTTP %s from plugin %s: %s",
                resp.status_code,
                self.plugin_id,
                resp.text[:200],
            )
            raise DownstreamError(f"Plugin {self.plugin_id} rejected update", status=resp.status_code)

        log.info("[webhook] Update delivered to plugin %s", self.plugin_id)


def publish_documents(
    display: DisplayClient,
    summary: Dict[str, str],
    matches: Dict[str, str],
    *,
    delay: float = DEFAULT_PUBLISH_DELAY,
) -> None:
    """Post the summary document, wait out the rate limit, then the match document.

    A failed first post raises before the delay; the second post is never
    attempted.
    """
    display.post_merge_variables(summary)
    log.info("[webhook] Waiting %ss before posting match details", delay)
    time.sleep(delay)
    display.post_merge_variables(matches)
