import os
from datetime import datetime

import pytest

os.environ.setdefault("SCHEDULE_TZ", "Europe/Stockholm")

from services.annotations import AnnotationStore
from utils.dates import TZ


@pytest.fixture
def store(tmp_path):
    return AnnotationStore(tmp_path / "priorities.json").load()


@pytest.fixture
def now():
    """Fixed wall clock: 2024-10-20 10:00 local."""
    return datetime(2024, 10, 20, 10, 0, tzinfo=TZ)


def make_event(event_id, date, time=None, home="Home", away="Away", local_time=None):
    return {
        "idEvent": event_id,
        "dateEvent": date,
        "strTime": time,
        "strTimeLocal": local_time,
        "strHomeTeam": home,
        "strAwayTeam": away,
    }
