"""Per-league fetching: season fallback and failure isolation."""

import threading
from datetime import date

import pytest
import requests

from leagues import League, RANGE, SINGLE
from services import sportsdb
from services.sportsdb import fetch_all_leagues, fetch_events_for_league, fetch_season_events

PL = League(4328, "Premier League", RANGE)
F1 = League(4370, "F1", SINGLE)
TODAY = date(2024, 10, 20)


class RecordingFetch:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, league_id, season):
        self.calls.append((league_id, season))
        result = self.responses.get((league_id, season), [])
        if isinstance(result, Exception):
            raise result
        return result


class TestFetchEventsForLeague:
    def test_current_season_only_when_non_empty(self):
        fetch = RecordingFetch({(4328, "2024-2025"): [{"idEvent": "1"}]})
        assert fetch_events_for_league(PL, TODAY, fetch) == [{"idEvent": "1"}]
        assert fetch.calls == [(4328, "2024-2025")]

    def test_falls_back_to_previous_season_once(self):
        fetch = RecordingFetch({(4370, "2023"): [{"idEvent": "9"}]})
        assert fetch_events_for_league(F1, TODAY, fetch) == [{"idEvent": "9"}]
        assert fetch.calls == [(4370, "2024"), (4370, "2023")]

    def test_both_empty(self):
        fetch = RecordingFetch({})
        assert fetch_events_for_league(PL, TODAY, fetch) == []
        assert len(fetch.calls) == 2

    def test_failure_degrades_to_empty(self):
        fetch = RecordingFetch({(4328, "2024-2025"): requests.ConnectionError("down")})
        assert fetch_events_for_league(PL, TODAY, fetch) == []

    def test_failure_on_fallback_degrades_to_empty(self):
        fetch = RecordingFetch({(4328, "2023-2024"): ValueError("bad json")})
        assert fetch_events_for_league(PL, TODAY, fetch) == []


class TestFetchAllLeagues:
    def test_results_follow_league_order(self):
        fetch = RecordingFetch({
            (4328, "2024-2025"): [{"idEvent": "pl"}],
            (4370, "2024"): [{"idEvent": "f1"}],
        })
        assert fetch_all_leagues([F1, PL], TODAY, fetch) == [[{"idEvent": "f1"}], [{"idEvent": "pl"}]]

    def test_one_failing_league_does_not_affect_others(self):
        fetch = RecordingFetch({
            (4328, "2024-2025"): RuntimeError("boom"),
            (4370, "2024"): [{"idEvent": "f1"}],
        })
        assert fetch_all_leagues([PL, F1], TODAY, fetch) == [[], [{"idEvent": "f1"}]]

    def test_no_leagues(self):
        assert fetch_all_leagues([], TODAY) == []

    def test_leagues_are_fetched_concurrently(self):
        # each fetch waits for the other; one-at-a-time fetching breaks the barrier
        barrier = threading.Barrier(2, timeout=5)

        def fetch(league_id, season):
            barrier.wait()
            return [{"idEvent": str(league_id)}]

        assert fetch_all_leagues([PL, F1], TODAY, fetch) == [[{"idEvent": "4328"}], [{"idEvent": "4370"}]]


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code != 200:
            raise requests.HTTPError(f"{self.status_code}")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class TestFetchSeasonEvents:
    def test_builds_request(self, monkeypatch):
        seen = {}

        def fake_get(url, params=None, timeout=None):
            seen.update(url=url, params=params, timeout=timeout)
            return FakeResponse({"events": [{"idEvent": "1"}]})

        monkeypatch.setenv("THESPORTSDB_KEY", "abc123")
        monkeypatch.setattr(sportsdb.requests, "get", fake_get)

        assert fetch_season_events(4328, "2024-2025") == [{"idEvent": "1"}]
        assert seen["url"] == "https://www.thesportsdb.com/api/v1/json/abc123/eventsseason.php"
        assert seen["params"] == {"id": 4328, "s": "2024-2025"}

    def test_default_demo_key(self, monkeypatch):
        monkeypatch.delenv("THESPORTSDB_KEY", raising=False)
        assert sportsdb.api_key() == "3"

    def test_null_events_is_empty(self, monkeypatch):
        monkeypatch.setattr(sportsdb.requests, "get", lambda *a, **k: FakeResponse({"events": None}))
        assert fetch_season_events(1, "2024") == []

    def test_http_error_raises(self, monkeypatch):
        monkeypatch.setattr(sportsdb.requests, "get", lambda *a, **k: FakeResponse({}, status=500))
        with pytest.raises(requests.HTTPError):
            fetch_season_events(1, "2024")


class TestMaskedKey:
    def test_masks_middle(self):
        assert sportsdb.masked_key("abcdef12") == "ab****12"

    def test_short_key_fully_masked(self):
        assert sportsdb.masked_key("3") == "*"
