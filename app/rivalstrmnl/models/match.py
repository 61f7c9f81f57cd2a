from dataclasses import asdict, dataclass, field
from typing import List


@dataclass
class MatchSummary:
    match_uid: str
    timestamp: int
    map_id: int
    season: str
    game_mode_id: int
    scores: List[int] = field(default_factory=list)


@dataclass
class MatchRecord:
    game_mode: str
    start_time: str
    map_name: str
    season: str
    outcome: str
    score: str
    kills: int
    deaths: int
    assists: int
    damage: int
    damage_taken: int
    healing: int
    hero: str

    def to_json(self) -> dict:
        return asdict(self)
