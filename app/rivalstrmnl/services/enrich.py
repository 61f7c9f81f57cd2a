"""Per-match detail lookup and normalization."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Sequence

from ..errors import UpstreamError
from ..models.match import MatchRecord, MatchSummary
from .client import StatsClient
from .reference import ReferenceResolver

log = logging.getLogger("rivalstrmnl.enrich")

OUTCOMES = {0: "Loss", 1: "Win", 2: "No Result"}
GAME_MODES = {1: "Quick Match", 2: "Competitive"}

# Display clock: UTC shifted -6h, then +1h for daylight saving.
DISPLAY_OFFSET = timedelta(hours=-6) + timedelta(hours=1)
START_TIME_FORMAT = "%m/%d/%Y %H:%M"


def format_start_time(epoch_seconds: int) -> str:
    moment = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc) + DISPLAY_OFFSET
    return moment.strftime(START_TIME_FORMAT)


def game_mode_label(game_mode_id: Any) -> str:
    try:
        return GAME_MODES.get(int(game_mode_id), f"Mode {game_mode_id}")
    except (TypeError, ValueError):
        return f"Mode {game_mode_id}"


def outcome_label(is_win: Any) -> str:
    try:
        code = int(is_win)
    except (TypeError, ValueError):
        code = 2
    return OUTCOMES.get(code, OUTCOMES[2])


def score_string(scores: Sequence[int], outcome: str) -> str:
    """Order the two team scores for display.

    Wins read larger first, losses smaller first; anything else keeps the
    order the API listed them in.
    """
    if len(scores) != 2:
        return ""
    low, high = sorted(scores)
    if outcome == OUTCOMES[1]:
        return f"{high} - {low}"
    if outcome == OUTCOMES[0]:
        return f"{low} - {high}"
    return f"{scores[0]} - {scores[1]}"


def _whole(value: Any) -> int:
    try:
        return int(round(float(value or 0)))
    except (TypeError, ValueError):
        return 0


def find_player_row(detail: Any, username: str, match_uid: str) -> dict:
    players = ((detail or {}).get("match_details") or {}).get("match_players")
    if not isinstance(players, list):
        raise UpstreamError("Match detail has no player list", endpoint=f"match/{match_uid}")
    for row in players:
        if isinstance(row, dict) and row.get("nick_name") == username:
            return row
    raise UpstreamError(f"Player {username} not found in match", endpoint=f"match/{match_uid}")


def _top_hero_id(row: dict):
    heroes = [h for h in row.get("player_heroes") or [] if isinstance(h, dict)]
    if not heroes:
        return None
    return max(heroes, key=lambda h: h.get("play_time") or 0).get("hero_id")


def enrich_match(
    client: StatsClient,
    summary: MatchSummary,
    username: str,
    resolver: ReferenceResolver,
) -> MatchRecord:
    detail = client.get_json(f"match/{summary.match_uid}")
    row = find_player_row(detail, username, summary.match_uid)

    outcome = outcome_label(row.get("is_win"))
    hero_id = _top_hero_id(row)

    return MatchRecord(
        game_mode=game_mode_label(summary.game_mode_id),
        start_time=format_start_time(summary.timestamp),
        map_name=resolver.map_name(summary.map_id),
        season=summary.season,
        outcome=outcome,
        score=score_string(summary.scores, outcome),
        kills=_whole(row.get("kills")),
        deaths=_whole(row.get("deaths")),
        assists=_whole(row.get("assists")),
        damage=_whole(row.get("total_hero_damage")),
        damage_taken=_whole(row.get("total_damage_taken")),
        healing=_whole(row.get("total_hero_heal")),
        hero=resolver.hero_name(hero_id) if hero_id is not None else "",
    )


def enrich_matches(
    client: StatsClient,
    summaries: Sequence[MatchSummary],
    username: str,
    resolver: ReferenceResolver,
) -> List[MatchRecord]:
    records = []
    for summary in summaries:
        log.debug("Enriching match %s", summary.match_uid)
        records.append(enrich_match(client, summary, username, resolver))
    return records
