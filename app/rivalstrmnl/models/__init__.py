from .match import MatchRecord, MatchSummary
from .player import PlayerProfile

__all__ = ["MatchRecord", "MatchSummary", "PlayerProfile"]
