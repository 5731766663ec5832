# leagues.py
# ---------- Static league + channel configuration ----------
import re
from dataclasses import dataclass
from typing import Callable

SINGLE = "single"   # season "2024"
RANGE = "range"     # season "2024-2025"


@dataclass(frozen=True)
class League:
    id: int
    name: str
    season_type: str = SINGLE


LEAGUES: tuple[League, ...] = (
    League(4347, "Allsvenskan", SINGLE),
    League(4328, "Premier League", RANGE),
    League(4480, "Champions League", RANGE),
    League(4570, "EFL Cup", RANGE),
    League(4429, "Fotbolls-VM", RANGE),
    League(4419, "SHL", RANGE),
    League(5162, "Hockeyallsvenskan", RANGE),
    League(4370, "F1", SINGLE),
    League(4373, "IndyCar", SINGLE),
    League(4554, "Dart", SINGLE),
)


def _rx(pattern: str) -> Callable[[str], object]:
    return re.compile(pattern, re.IGNORECASE).search


# Evaluated top to bottom, first hit wins.
# hockeyallsvenskan must stay above allsvenskan.
CHANNEL_RULES: list[tuple[Callable[[str], object], str]] = [
    (_rx(r"hockeyallsvenskan"), "TV4"),
    (_rx(r"allsvenskan"), "Discovery+"),
    (_rx(r"premier league"), "Viaplay / Viasat"),
    (_rx(r"champions league"), "Viaplay / V Sport Fotboll"),
    (_rx(r"\bshl\b"), "TV4"),
    (_rx(r"\bf1\b|\bformula 1\b"), "Viaplay / Viasat"),
    (_rx(r"indycar"), "Viaplay / Viasat"),
    (_rx(r"dart"), "Viaplay / Viasat"),
    (_rx(r"fotbolls[- ]?vm|fifa world cup|vm"), "Viaplay"),
    (_rx(r"efl cup|league cup"), "Viaplay"),
]


def league_by_id(league_id: int) -> League | None:
    for league in LEAGUES:
        if league.id == league_id:
            return league
    return None
