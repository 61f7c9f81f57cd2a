"""Hero and map name lookups."""
import logging
import re
from typing import Dict, List, Optional

from ..errors import NotFoundError, UpstreamError
from .client import StatsClient

log = logging.getLogger("rivalstrmnl.reference")

UNKNOWN_MAP = "Unknown Map"

_WORD_START = re.compile(r"(^|[\s-])([a-z])")


def title_case(name: str) -> str:
    """Lowercase ``name`` and capitalize each word, hyphenated parts included.

    >>> title_case("SPIDER-MAN")
    'Spider-Man'
    """
    if not name:
        return ""
    text = _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), name.strip().lower())
    return text[:1].upper() + text[1:]


def _entries(payload, key: str) -> List[dict]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    raise UpstreamError(f"Unexpected {key} listing shape", endpoint=key)


def _index(entries: List[dict]) -> Dict[str, str]:
    table: Dict[str, str] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        ident = entry.get("id")
        if ident is None:
            continue
        table[str(ident)] = entry.get("name") or ""
    return table


class ReferenceResolver:
    """Resolves hero and map ids to display names.

    Each table is fetched at most once per resolver; a resolver lives for a
    single run, so names are always fresh.
    """

    def __init__(self, client: StatsClient):
        self.client = client
        self._heroes: Optional[Dict[str, str]] = None
        self._maps: Optional[Dict[str, str]] = None

    def heroes(self) -> Dict[str, str]:
        if self._heroes is None:
            self._heroes = _index(_entries(self.client.get_json("heroes"), "heroes"))
            log.debug("Loaded %d heroes", len(self._heroes))
        return self._heroes

    def maps(self) -> Dict[str, str]:
        if self._maps is None:
            payload = self.client.get_json("maps", params={"limit": 50})
            self._maps = _index(_entries(payload, "maps"))
            log.debug("Loaded %d maps", len(self._maps))
        return self._maps

    def lookup_hero(self, hero_id) -> str:
        name = self.heroes().get(str(hero_id))
        if name is None:
            raise NotFoundError("hero", hero_id)
        return title_case(name)

    def lookup_map(self, map_id) -> str:
        name = self.maps().get(str(map_id))
        if name is None:
            raise NotFoundError("map", map_id)
        return name

    def hero_name(self, hero_id) -> str:
        try:
            return self.lookup_hero(hero_id)
        except NotFoundError as exc:
            log.warning("%s; leaving hero name blank", exc)
            return ""

    def map_name(self, map_id) -> str:
        try:
            return self.lookup_map(map_id)
        except NotFoundError:
            log.warning("Map %s not in maps table", map_id)
            return UNKNOWN_MAP
