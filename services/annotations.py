# services/annotations.py
"""
Priority + tag markers per event id, kept in one JSON file:

  {"eventIds": ["100", ...], "tags": {"100": ["BB1", "BB3"], ...}}

Loaded once at startup, rewritten in full after every successful toggle.
"""
import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _clean(value: Any) -> str:
    """Ids and labels are strings or plain ints; anything else reads as missing."""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return ""
    return str(value).strip()


class AnnotationStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._event_ids: list[str] = []
        self._tags: dict[str, list[str]] = {}
        # toggles are called from the thread pool
        self._lock = threading.Lock()

    # ----------------------------
    # Persistence
    # ----------------------------
    def load(self) -> "AnnotationStore":
        """Read the file; a missing or unreadable file means an empty store."""
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            data = {}
        except (OSError, ValueError) as e:
            logger.warning("Could not read annotations from %s: %s", self.path, e)
            data = {}

        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", self.path)
            data = {}

        raw_ids = data.get("eventIds")
        if raw_ids is None:
            raw_ids = []
        elif not isinstance(raw_ids, list):
            logger.warning("Ignoring eventIds in %s: expected a list, got %s", self.path, type(raw_ids).__name__)
            raw_ids = []

        event_ids: list[str] = []
        for raw in raw_ids:
            eid = _clean(raw)
            if eid and eid not in event_ids:
                event_ids.append(eid)

        tags: dict[str, list[str]] = {}
        raw_tags = data.get("tags") or {}
        if not isinstance(raw_tags, dict):
            logger.warning("Ignoring tags in %s: expected an object, got %s", self.path, type(raw_tags).__name__)
            raw_tags = {}
        for raw_id, labels in raw_tags.items():
            eid = _clean(raw_id)
            if not eid or not isinstance(labels, list):
                continue
            unique = []
            for label in labels:
                label = _clean(label)
                if label and label not in unique:
                    unique.append(label)
            if unique:
                tags[eid] = unique

        with self._lock:
            self._event_ids = event_ids
            self._tags = tags
        logger.info("Loaded %d priorities, %d tagged events from %s", len(event_ids), len(tags), self.path)
        return self

    def _save(self, event_ids: list[str], tags: dict[str, list[str]]) -> bool:
        """Write the given state; True once it is on disk."""
        payload = json.dumps({"eventIds": event_ids, "tags": tags}, indent=2, ensure_ascii=False)
        try:
            self.path.write_text(payload + "\n", encoding="utf-8")
        except OSError as e:
            logger.error("Could not write annotations to %s: %s", self.path, e)
            return False
        return True

    # ----------------------------
    # Reads
    # ----------------------------
    def _snapshot_unlocked(self) -> dict:
        return {
            "eventIds": list(self._event_ids),
            "tags": {eid: list(labels) for eid, labels in self._tags.items()},
        }

    def snapshot(self) -> dict:
        with self._lock:
            return self._snapshot_unlocked()

    def is_priority(self, event_id: Any) -> bool:
        return _clean(event_id) in self._event_ids

    def tags_for(self, event_id: Any) -> list[str]:
        return list(self._tags.get(_clean(event_id), []))

    # ----------------------------
    # Toggles (None = rejected or not written, nothing changed)
    # The new state is written first and only then swapped in.
    # ----------------------------
    def toggle_priority(self, event_id: Any) -> Optional[list[str]]:
        eid = _clean(event_id)
        if not eid:
            return None

        with self._lock:
            if eid in self._event_ids:
                event_ids = [x for x in self._event_ids if x != eid]
            else:
                event_ids = self._event_ids + [eid]

            if not self._save(event_ids, self._snapshot_unlocked()["tags"]):
                return None
            self._event_ids = event_ids
            return list(event_ids)

    def toggle_tag(self, event_id: Any, tag: Any) -> Optional[list[str]]:
        eid = _clean(event_id)
        label = _clean(tag)
        if not eid or not label:
            return None

        with self._lock:
            tags = self._snapshot_unlocked()["tags"]
            labels = tags.setdefault(eid, [])
            if label in labels:
                labels.remove(label)
            else:
                labels.append(label)
            result = list(labels)
            if not labels:
                del tags[eid]

            if not self._save(list(self._event_ids), tags):
                return None
            self._tags = tags
            return result
