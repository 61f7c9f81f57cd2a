from datetime import datetime, timezone

import pytest

from rivalstrmnl import config, update_display
from rivalstrmnl.errors import UpstreamError
from rivalstrmnl.services import account
from rivalstrmnl.services.payload import MATCH_FIELDS
from rivalstrmnl.update_display import main, run_update


@pytest.fixture
def three_matches(stats_session, monkeypatch, make_profile, make_history_entry, make_match_detail, heroes_table, maps_table):
    monkeypatch.setattr(account, "_now", lambda: datetime(2025, 3, 10, 13, 0, tzinfo=timezone.utc))
    stats_session.routes.update(
        {
            "player/Tester": make_profile(last_update="2025-03-10T12:45:00Z"),
            "player/Tester/match-history": {
                "match_history": [
                    make_history_entry("m1", 1_741_600_000, season="1.5", scores=(1, 3)),
                    make_history_entry("m3", 1_741_608_000, season="2", scores=(2, 0)),
                    make_history_entry("m2", 1_741_604_000, season="2", scores=(0, 2)),
                ]
            },
            "match/m1": make_match_detail(is_win=0),
            "match/m2": make_match_detail(is_win=1),
            "match/m3": make_match_detail(is_win=2),
            "heroes": heroes_table,
            "maps": maps_table,
        }
    )


def test_end_to_end(settings, stats, display, display_session, stats_session, sleeps, events, three_matches):
    run_update(settings, stats=stats, display=display)

    posts = [e for e in events if e[0] in ("post", "sleep")]
    assert [e[0] for e in posts] == ["post", "sleep", "post"]
    assert posts[1] == ("sleep", 305)

    summary = posts[0][1]["merge_variables"]
    matches = posts[2][1]["merge_variables"]
    assert summary["name"] == "Tester"
    assert summary["season"] == "2"
    assert summary["ranked_win_rate"] == "70%"

    assert matches["match0_outcome"] == "No Result"
    assert matches["match1_outcome"] == "Win"
    assert matches["match1_score"] == "2 - 0"
    assert matches["match2_outcome"] == "Loss"
    assert matches["match2_score"] == "1 - 3"
    populated = [s for s in range(5) if matches[f"match{s}_outcome"]]
    assert populated == [0, 1, 2]
    for slot in (3, 4):
        assert all(matches[f"match{slot}_{suffix}"] == "" for suffix in MATCH_FIELDS)

    assert "player/Tester/update" not in stats_session.paths()
    assert stats_session.paths().count("heroes") == 1


def test_dry_run_posts_nothing(settings, stats, display, display_session, sleeps, three_matches):
    settings.dry_run = True

    run_update(settings, stats=stats, display=display)

    assert display_session.posts == []
    assert sleeps == []


def test_missing_config_exits_before_network(monkeypatch, tmp_path):
    for name in ("TRMNL_PLUGIN_ID", "RIVALS_API_KEY", "RIVALS_USERNAME"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", str(tmp_path / "none.config"))
    called = []
    monkeypatch.setattr(update_display, "run_update", lambda *a, **k: called.append(a))

    assert main(["--username", "Tester"]) == 2
    assert called == []


def test_upstream_failure_exit_code(monkeypatch, settings):
    def failing_run(_settings):
        raise UpstreamError("down", endpoint="player/Tester", status=503)

    monkeypatch.setattr(update_display, "load_settings", lambda *a, **k: settings)
    monkeypatch.setattr(update_display, "run_update", failing_run)

    assert main([]) == 1
