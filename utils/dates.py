# utils/dates.py
import os
import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from leagues import League, SINGLE

TZ = ZoneInfo(os.getenv("SCHEDULE_TZ", "Europe/Stockholm"))

# Upstream reports summer time all year; shift back to Swedish winter time.
TIME_OFFSET_MINUTES = -60
MINUTES_PER_DAY = 24 * 60

_RANGE_SEASON = re.compile(r"(\d{4})-(\d{4})")


def now_local() -> datetime:
    return datetime.now(TZ)


def today_local() -> date:
    return now_local().date()


def add_days(date_str: str, days: int) -> str:
    """YYYY-MM-DD shifted by `days` calendar days."""
    return (date.fromisoformat(date_str) + timedelta(days=days)).isoformat()


def apply_time_offset(
    date_str: str, raw_time: str | None, offset_minutes: int = TIME_OFFSET_MINUTES
) -> tuple[str, str]:
    """
    Shift an upstream (date, "HH:MM") pair by `offset_minutes`, carrying the
    day over midnight in either direction.

    No time -> (date, ""). A time without hour/minute parts comes back
    untouched with the original date.
    """
    if not raw_time:
        return date_str, ""

    parts = raw_time.split(":")
    try:
        minutes = int(parts[0]) * 60 + int(parts[1])
        day = date.fromisoformat(date_str)
    except (IndexError, ValueError):
        return date_str, raw_time

    minutes += offset_minutes
    while minutes < 0:
        minutes += MINUTES_PER_DAY
        day -= timedelta(days=1)
    while minutes >= MINUTES_PER_DAY:
        minutes -= MINUTES_PER_DAY
        day += timedelta(days=1)

    return day.isoformat(), f"{minutes // 60:02d}:{minutes % 60:02d}"


# ---------- Seasons ----------

def current_season(league: League, today: date | None = None) -> str:
    """
    Single-year leagues: "2024".
    Range leagues switch to the new season in July: "2024-2025".
    """
    today = today or today_local()
    if league.season_type == SINGLE:
        return str(today.year)

    start = today.year if today.month >= 7 else today.year - 1
    return f"{start}-{start + 1}"


def previous_season(league: League, season: str) -> str:
    if league.season_type == SINGLE:
        try:
            return str(int(season) - 1)
        except (TypeError, ValueError):
            return season

    m = _RANGE_SEASON.fullmatch(season or "")
    if not m:
        return season
    return f"{int(m.group(1)) - 1}-{int(m.group(2)) - 1}"
