import logging

from ..errors import UpstreamError
from .client import StatsClient

log = logging.getLogger("rivalstrmnl.refresh")


def trigger_refresh(client: StatsClient, username: str) -> bool:
    """Ask the stats provider to recompute a player's stats.

    No-wait, no-retry: the provider recomputes in the background and the
    next scheduled run sees the result. A failed request is logged and
    reported through the return value only.
    """
    path = f"player/{username}/update"
    try:
        client.get_json(path)
    except UpstreamError as exc:
        log.warning("Stats refresh request for %s not accepted: %s", username, exc)
        return False
    log.info("Requested stats refresh for %s", username)
    return True
