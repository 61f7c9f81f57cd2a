"""Player profile lookup and ranked summary."""
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..config import DEFAULT_REFRESH_COOLDOWN, DEFAULT_STALE_AFTER
from ..errors import UpstreamError
from ..models.player import PlayerProfile
from .client import StatsClient
from .reference import ReferenceResolver, title_case
from .refresh import trigger_refresh

log = logging.getLogger("rivalstrmnl.account")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _safe_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept epoch seconds (number or numeric string) or an ISO-8601 string."""
    if value in (None, ""):
        return None
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        pass
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_stale(last_update: Optional[datetime], *, stale_after: float = DEFAULT_STALE_AFTER) -> bool:
    if last_update is None:
        return True
    return _now() - last_update >= timedelta(seconds=stale_after)


def win_rate(wins: int, games: int) -> str:
    if games <= 0:
        return "0%"
    return f"{round(wins / games * 100)}%"


def kda_ratio(kills: int, deaths: int, assists: int) -> float:
    return round((kills + assists) / max(deaths, 1), 2)


def _top_hero(heroes: list) -> Optional[dict]:
    candidates = [h for h in heroes or [] if isinstance(h, dict)]
    if not candidates:
        return None
    return max(candidates, key=lambda h: h.get("play_time") or 0)


def _hero_display_name(hero: Optional[dict]) -> str:
    if hero and hero.get("hero_name"):
        return title_case(hero["hero_name"])
    return ""


def build_profile(payload: Any, username: str) -> PlayerProfile:
    """Shape a raw profile response into a PlayerProfile.

    Makes no requests; a ranked hero reported without a name is left blank
    for the caller to resolve.
    """
    if not isinstance(payload, dict):
        raise UpstreamError("Profile response is not an object", endpoint=f"player/{username}")
    player = payload.get("player")
    ranked = (payload.get("overall_stats") or {}).get("ranked")
    if not isinstance(player, dict) or not isinstance(ranked, dict):
        raise UpstreamError("Profile response is missing player or ranked stats", endpoint=f"player/{username}")

    rank = player.get("rank")
    if isinstance(rank, dict):
        rank = rank.get("rank")

    games = _safe_int(ranked.get("total_matches"))
    wins = _safe_int(ranked.get("total_wins"))
    kills = _safe_int(ranked.get("total_kills"))
    deaths = _safe_int(ranked.get("total_deaths"))
    assists = _safe_int(ranked.get("total_assists"))

    last_update = parse_timestamp((payload.get("updates") or {}).get("last_update_request"))

    return PlayerProfile(
        username=player.get("name") or payload.get("name") or username,
        rank=str(rank or ""),
        level=_safe_int(player.get("level")),
        most_played_hero=_hero_display_name(_top_hero(payload.get("heroes_ranked"))),
        ranked_games=games,
        ranked_wins=wins,
        ranked_win_rate=win_rate(wins, games),
        ranked_kills=kills,
        ranked_deaths=deaths,
        ranked_assists=assists,
        kda=kda_ratio(kills, deaths, assists),
        last_update_request=last_update.timestamp() if last_update else None,
    )


def _fetch_profile_payload(client: StatsClient, username: str) -> Any:
    return client.get_json(f"player/{username}")


def fetch_account(
    client: StatsClient,
    username: str,
    resolver: Optional[ReferenceResolver] = None,
    *,
    stale_after: float = DEFAULT_STALE_AFTER,
    cooldown: float = DEFAULT_REFRESH_COOLDOWN,
) -> PlayerProfile:
    """Fetch and summarize a player's profile.

    If the first fetch fails, a refresh is requested and the fetch is retried
    once after ``cooldown`` seconds; a second failure propagates. Stale stats
    trigger a refresh but are still used for this run.
    """
    try:
        payload = _fetch_profile_payload(client, username)
        profile = build_profile(payload, username)
        refreshed = False
    except UpstreamError as exc:
        log.warning(
            "Profile fetch for %s failed (%s); requesting refresh and retrying in %ss",
            username,
            exc,
            cooldown,
        )
        trigger_refresh(client, username)
        time.sleep(cooldown)
        try:
            payload = _fetch_profile_payload(client, username)
            profile = build_profile(payload, username)
        except UpstreamError:
            log.error("Profile fetch for %s failed after retry", username)
            raise
        refreshed = True

    last_update = parse_timestamp(profile.last_update_request)
    if not refreshed and is_stale(last_update, stale_after=stale_after):
        log.info("Stats for %s last updated %s; requesting refresh", username, last_update or "never")
        trigger_refresh(client, username)

    # Heroes listing failures are not retried.
    if not profile.most_played_hero and resolver is not None:
        hero = _top_hero(payload.get("heroes_ranked"))
        if hero and hero.get("hero_id") is not None:
            profile.most_played_hero = resolver.hero_name(hero["hero_id"])

    log.info(
        "Loaded profile for %s: rank=%s level=%s ranked=%s/%s",
        profile.username,
        profile.rank,
        profile.level,
        profile.ranked_wins,
        profile.ranked_games,
    )
    return profile
