# services/build.py
import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Sequence

from leagues import LEAGUES, League
from normalize import event_time, map_channel
from services.annotations import AnnotationStore
from services.sportsdb import fetch_all_leagues, fetch_season_events
from utils.dates import TZ, add_days, apply_time_offset, now_local

logger = logging.getLogger(__name__)

# Fixed for every sport; long F1 races can still be running when hidden.
MATCH_DURATION_MINUTES = 120
WINDOW_DAYS = 14
NOON = time(12, 0)


def match_end(date_str: str, time_str: str, tz=TZ) -> datetime:
    """
    Kickoff + MATCH_DURATION_MINUTES as an aware datetime in `tz`.
    No (or unparseable) kickoff time counts as local noon.
    """
    day = date.fromisoformat(date_str)
    try:
        start_t = time.fromisoformat(time_str) if time_str else NOON
    except ValueError:
        start_t = NOON
    start = datetime.combine(day, start_t, tzinfo=tz)
    return start + timedelta(minutes=MATCH_DURATION_MINUTES)


def build_match(ev: dict, league: League, time_str: str, store: AnnotationStore) -> dict:
    event_id = str(ev.get("idEvent") or "")
    home = ev.get("strHomeTeam") or ""
    away = ev.get("strAwayTeam") or ""
    return {
        "id": event_id,
        "time": time_str,
        "competition": league.name,
        "home": home,
        "away": away,
        "channel": map_channel(league.name, f"{home} {away}"),
        "priority": store.is_priority(event_id),
        "tags": store.tags_for(event_id),
    }


def _match_sort_key(m: dict) -> tuple[bool, str]:
    # timed matches first, then by HH:MM; untimed keep their relative order
    return (not m["time"], m["time"])


def sort_matches(matches: list[dict]) -> list[dict]:
    return sorted(matches, key=_match_sort_key)


def window_days(days: list[dict], today: str) -> list[dict]:
    """
    Days in [today, today+13]. If none, the first 14 upcoming days;
    if still none, the first 14 days overall (all in the past).
    """
    end = add_days(today, WINDOW_DAYS - 1)
    in_window = [d for d in days if today <= d["date"] <= end]
    if in_window:
        return in_window

    upcoming = [d for d in days if d["date"] >= today]
    if upcoming:
        return upcoming[:WINDOW_DAYS]
    return days[:WINDOW_DAYS]


def assemble_days(
    leagues: Sequence[League],
    results: Sequence[list[dict]],
    store: AnnotationStore,
    now: datetime,
) -> list[dict]:
    """Raw events per league -> sorted day buckets of upcoming/live matches."""
    by_date: dict[str, list[dict]] = {}

    for league, events in zip(leagues, results):
        for ev in events:
            raw_date = ev.get("dateEvent")
            if not raw_date:
                continue

            adj_date, adj_time = apply_time_offset(raw_date, event_time(ev))
            try:
                end = match_end(adj_date, adj_time, tz=now.tzinfo or TZ)
            except ValueError:
                logger.debug("Skipping event %s with bad date %r", ev.get("idEvent"), raw_date)
                continue
            if end < now:
                continue

            by_date.setdefault(adj_date, []).append(build_match(ev, league, adj_time, store))

    return [
        {"date": d, "matches": sort_matches(by_date[d])}
        for d in sorted(by_date)
    ]


def build_schedule(
    store: AnnotationStore,
    leagues: Sequence[League] = LEAGUES,
    now: datetime | None = None,
    fetch: Callable[[int, str], list[dict]] = fetch_season_events,
) -> dict:
    now = now or now_local()
    results = fetch_all_leagues(leagues, today=now.date(), fetch=fetch)

    days = assemble_days(leagues, results, store, now)
    windowed = window_days(days, now.date().isoformat())

    logger.info(
        "Schedule: %d events from %d leagues -> %d days (%d in window)",
        sum(len(r) for r in results), len(leagues), len(days), len(windowed),
    )
    return {"generatedAt": datetime.now(TZ).isoformat(timespec="seconds"), "days": windowed}
