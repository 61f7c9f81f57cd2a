"""
Merge-variable documents for the TRMNL display.

The display is updated in two posts because a single post carrying the
profile and all five matches exceeds the plugin's payload limit.

RULES:
- No network calls
- Every value is emitted as text
- Document B always carries all five match slots
"""
from typing import Dict, Optional, Sequence

from ..models.match import MatchRecord
from ..models.player import PlayerProfile

MATCH_SLOTS = 5

# Document A key -> PlayerProfile attribute
SUMMARY_FIELDS = {
    "season": "season",
    "name": "username",
    "rank": "rank",
    "level": "level",
    "most_used_hero": "most_played_hero",
    "ranked_games": "ranked_games",
    "ranked_wins": "ranked_wins",
    "ranked_win_rate": "ranked_win_rate",
    "ranked_kills": "ranked_kills",
    "ranked_kda": "kda",
}

# Document B key suffix -> MatchRecord attribute
MATCH_FIELDS = {
    "outcome": "outcome",
    "score": "score",
    "start_time": "start_time",
    "map": "map_name",
    "hero": "hero",
    "kills": "kills",
    "deaths": "deaths",
    "assists": "assists",
    "damage": "damage",
    "healing": "healing",
}


def _text(value) -> str:
    return "" if value is None else str(value)


def match_key(slot: int, suffix: str) -> str:
    return f"match{slot}_{suffix}"


def build_summary_document(profile: PlayerProfile) -> Dict[str, str]:
    return {key: _text(getattr(profile, attr)) for key, attr in SUMMARY_FIELDS.items()}


def build_matches_document(records: Sequence[Optional[MatchRecord]]) -> Dict[str, str]:
    """Flatten up to five match records into slot-prefixed keys.

    Slots without a record are sent as empty strings so a deep merge clears
    whatever an earlier run left there.
    """
    document: Dict[str, str] = {}
    for slot in range(MATCH_SLOTS):
        record = records[slot] if slot < len(records) else None
        for suffix, attr in MATCH_FIELDS.items():
            value = getattr(record, attr) if record is not None else ""
            document[match_key(slot, suffix)] = _text(value)
    return document
