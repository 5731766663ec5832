# normalize.py
# ---------- Upstream field fallbacks + channel mapping ----------
from typing import Any, Callable, Iterable, Sequence

from leagues import CHANNEL_RULES

# Primary first. TheSportsDB fills strTimeLocal on some leagues only.
TIME_FIELDS = ("strTime", "strTimeLocal")


def first_field(record: dict[str, Any], fields: Sequence[str]) -> str:
    """
    Return the first non-empty value among `fields`, in order.
    Missing keys, None and blank strings are skipped.
    """
    for name in fields:
        value = record.get(name)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            return value
    return ""


def event_time(ev: dict[str, Any]) -> str:
    """Upstream kickoff truncated to HH:MM ("19:45:00+00:00" -> "19:45")."""
    return first_field(ev, TIME_FIELDS)[:5]


def map_channel(
    competition: str | None,
    text: str | None = "",
    rules: Iterable[tuple[Callable[[str], object], str]] = CHANNEL_RULES,
) -> str:
    combined = f"{competition or ''} {text or ''}".lower()
    for matches, channel in rules:
        if matches(combined):
            return channel
    return ""
