import logging
from typing import Any, List

from ..errors import UpstreamError
from ..models.match import MatchSummary
from .client import StatsClient

log = logging.getLogger("rivalstrmnl.history")

FETCH_LIMIT = 10
MATCH_SLOTS = 5


def _scores(raw: Any) -> List[int]:
    if isinstance(raw, dict):
        raw = [raw[k] for k in sorted(raw, key=str)]
    if not isinstance(raw, list):
        return []
    out = []
    for value in raw[:2]:
        try:
            out.append(int(value))
        except (TypeError, ValueError):
            return []
    return out


def _epoch(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def parse_match_history(payload: Any) -> List[MatchSummary]:
    if isinstance(payload, dict):
        payload = payload.get("match_history")
    if not isinstance(payload, list):
        raise UpstreamError("Unexpected match history shape", endpoint="match-history")

    summaries = []
    for match in payload:
        if not isinstance(match, dict) or not match.get("match_uid"):
            continue
        summaries.append(
            MatchSummary(
                match_uid=str(match["match_uid"]),
                timestamp=_epoch(match.get("match_time_stamp")),
                map_id=match.get("match_map_id"),
                season=str(match.get("match_season") or ""),
                game_mode_id=match.get("game_mode_id"),
                scores=_scores(match.get("score_info")),
            )
        )
    return summaries


def fetch_match_history(client: StatsClient, username: str, limit: int = MATCH_SLOTS) -> List[MatchSummary]:
    """Return up to ``limit`` of the player's most recent matches, newest first."""
    payload = client.get_json(
        f"player/{username}/match-history",
        params={"skip": 0, "limit": FETCH_LIMIT},
    )
    summaries = parse_match_history(payload)
    summaries.sort(key=lambda m: m.timestamp, reverse=True)
    log.info("Match history for %s: %d returned, keeping %d", username, len(summaries), min(len(summaries), limit))
    return summaries[:limit]
