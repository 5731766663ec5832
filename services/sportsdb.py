# services/sportsdb.py
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Callable, Sequence

import requests

from leagues import League
from utils.dates import current_season, previous_season

logger = logging.getLogger(__name__)

SPORTSDB_BASE_URL = "https://www.thesportsdb.com/api/v1/json"
SPORTSDB_TIMEOUT = float(os.getenv("SPORTSDB_TIMEOUT", "15"))


def api_key() -> str:
    # "3" is TheSportsDB's public demo key
    return os.getenv("THESPORTSDB_KEY") or "3"


def masked_key(key: str | None = None) -> str:
    key = key if key is not None else api_key()
    if len(key) <= 4:
        return "*" * len(key)
    return f"{key[:2]}{'*' * (len(key) - 4)}{key[-2:]}"


def fetch_season_events(league_id: int, season: str) -> list[dict]:
    """
    One eventsseason.php call. Raises on transport, HTTP or JSON errors;
    a missing/null "events" list comes back as [].
    """
    url = f"{SPORTSDB_BASE_URL}/{api_key()}/eventsseason.php"
    r = requests.get(url, params={"id": league_id, "s": season}, timeout=SPORTSDB_TIMEOUT)
    r.raise_for_status()
    data = r.json()

    events = data.get("events") if isinstance(data, dict) else None
    return events if isinstance(events, list) else []


def fetch_events_for_league(
    league: League,
    today: date | None = None,
    fetch: Callable[[int, str], list[dict]] = fetch_season_events,
) -> list[dict]:
    """
    Current season first, previous season once if that is empty.
    Never raises: a failing league just contributes no events.
    """
    season = current_season(league, today)
    try:
        events = fetch(league.id, season)
        if not events:
            prev = previous_season(league, season)
            logger.info("%s: no events for %s, trying %s", league.name, season, prev)
            events = fetch(league.id, prev)
        return events or []
    except Exception as e:
        logger.warning("Fetch error %s (%s): %s: %s", league.name, league.id, type(e).__name__, e)
        return []


def fetch_all_leagues(
    leagues: Sequence[League],
    today: date | None = None,
    fetch: Callable[[int, str], list[dict]] = fetch_season_events,
) -> list[list[dict]]:
    """Fetch every league at once; result[i] belongs to leagues[i]."""
    if not leagues:
        return []
    with ThreadPoolExecutor(max_workers=len(leagues)) as pool:
        return list(pool.map(lambda lg: fetch_events_for_league(lg, today, fetch), leagues))
