import copy
import time

import pytest

from rivalstrmnl.config import Settings
from rivalstrmnl.services.client import StatsClient
from rivalstrmnl.webhook.sender import DisplayClient

STATS_BASE = "https://stats.test/api/v1"
WEBHOOK_BASE = "https://display.test/api"


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else str(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Stand-in for requests.Session serving canned responses by path.

    A route value may be a payload, a FakeResponse, an exception to raise,
    or a list of those consumed one per call. A list holding no FakeResponse
    or exception is served as a JSON array body.
    """

    def __init__(self, base, routes=None, events=None):
        self.base = base
        self.routes = dict(routes or {})
        self.events = events if events is not None else []
        self.calls = []
        self.posts = []
        self.post_responses = []
        self._queues = set()

    def _path(self, url):
        return url[len(self.base) + 1:]

    def _resolve(self, entry):
        if isinstance(entry, list) and (
            id(entry) in self._queues or any(isinstance(e, (FakeResponse, BaseException)) for e in entry)
        ):
            self._queues.add(id(entry))
            entry = entry.pop(0)
        if isinstance(entry, BaseException):
            raise entry
        if isinstance(entry, FakeResponse):
            return entry
        return FakeResponse(entry)

    def get(self, url, headers=None, params=None, timeout=None):
        path = self._path(url)
        self.calls.append((path, params, headers, timeout))
        self.events.append(("get", path))
        if path not in self.routes:
            return FakeResponse({"error": "not found"}, status_code=404)
        return self._resolve(self.routes[path])

    def post(self, url, json=None, timeout=None):
        self.posts.append((self._path(url), json, timeout))
        self.events.append(("post", json))
        if self.post_responses:
            return self._resolve(self.post_responses.pop(0))
        return FakeResponse({"message": "ok"})

    def paths(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def events():
    return []


@pytest.fixture
def stats_session(events):
    return FakeSession(STATS_BASE, events=events)


@pytest.fixture
def stats(stats_session):
    return StatsClient("test-key", base_url=STATS_BASE, timeout=5, session=stats_session)


@pytest.fixture
def display_session(events):
    return FakeSession(WEBHOOK_BASE, events=events)


@pytest.fixture
def display(display_session):
    return DisplayClient("plugin-1", base_url=WEBHOOK_BASE, timeout=5, session=display_session)


@pytest.fixture
def sleeps(monkeypatch, events):
    recorded = []

    def fake_sleep(seconds):
        recorded.append(seconds)
        events.append(("sleep", seconds))

    monkeypatch.setattr(time, "sleep", fake_sleep)
    return recorded


@pytest.fixture
def settings():
    return Settings(
        plugin_id="plugin-1",
        api_key="test-key",
        username="Tester",
        api_base=STATS_BASE,
        webhook_base=WEBHOOK_BASE,
        timeout=5,
    )


def _profile_payload(
    *,
    name="Tester",
    last_update="2025-03-10T12:00:00Z",
    wins=7,
    games=10,
    kills=20,
    deaths=5,
    assists=10,
    heroes=None,
):
    if heroes is None:
        heroes = [
            {"hero_id": 1011, "hero_name": "hulk", "play_time": 120.0},
            {"hero_id": 1036, "hero_name": "spider-man", "play_time": 900.5},
        ]
    return {
        "name": name,
        "player": {"name": name, "level": "42", "rank": {"rank": "Gold II"}},
        "heroes_ranked": heroes,
        "overall_stats": {
            "ranked": {
                "total_matches": games,
                "total_wins": wins,
                "total_kills": kills,
                "total_deaths": deaths,
                "total_assists": assists,
            }
        },
        "updates": {"last_update_request": last_update},
    }


def _history_entry(uid, ts, *, map_id=1032, season="2", mode=2, scores=(3, 1)):
    return {
        "match_uid": uid,
        "match_time_stamp": ts,
        "match_map_id": map_id,
        "match_season": season,
        "game_mode_id": mode,
        "score_info": list(scores),
    }


def _match_detail(username="Tester", *, is_win=1, heroes=None, others=("Someone",)):
    if heroes is None:
        heroes = [
            {"hero_id": 1036, "play_time": 300.0},
            {"hero_id": 1011, "play_time": 45.0},
        ]
    players = [{"nick_name": other, "is_win": 0, "player_heroes": []} for other in others]
    players.append(
        {
            "nick_name": username,
            "is_win": is_win,
            "kills": 12,
            "deaths": 4,
            "assists": 9,
            "total_damage_taken": 10234.6,
            "total_hero_heal": 512.4,
            "total_hero_damage": 15001.5,
            "player_heroes": heroes,
        }
    )
    return {"match_uid": "x", "match_details": {"match_players": players}}


_HEROES = [
    {"id": "1011", "name": "hulk"},
    {"id": "1036", "name": "SPIDER-MAN"},
    {"id": "1029", "name": "magik"},
]

_MAPS = {"maps": [{"id": 1032, "name": "Yggsgard: Yggdrasill Path"}, {"id": 1217, "name": "Tokyo 2099: Shin-Shibuya"}]}


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def make_profile():
    return _profile_payload


@pytest.fixture
def make_history_entry():
    return _history_entry


@pytest.fixture
def make_match_detail():
    return _match_detail


@pytest.fixture
def heroes_table():
    return copy.deepcopy(_HEROES)


@pytest.fixture
def maps_table():
    return copy.deepcopy(_MAPS)
