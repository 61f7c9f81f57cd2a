from dataclasses import asdict, dataclass
from typing import Optional


@dataclass
class PlayerProfile:
    username: str
    rank: str
    level: int
    most_played_hero: str
    ranked_games: int
    ranked_wins: int
    ranked_win_rate: str
    ranked_kills: int
    ranked_deaths: int
    ranked_assists: int
    kda: float
    season: str = ""
    last_update_request: Optional[float] = None

    def to_json(self) -> dict:
        return asdict(self)
