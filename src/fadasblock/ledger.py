"""Persistent top-N score table.

Scores are stored as a JSON array under a single key of a small key-value
store.  Anything unreadable in that slot is treated as an empty table so a
corrupted file can never stop the game from starting.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from .config import LEDGER_CAPACITY, STORAGE_KEY


LOGGER = logging.getLogger(__name__)

DEFAULT_NAME = "Anon"


def utc_timestamp() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    points: int
    date: str

    @classmethod
    def from_dict(cls, raw: Dict[str, object]) -> "ScoreEntry":
        if not isinstance(raw, dict):
            raise TypeError(f"Score entry must be an object, got {type(raw).__name__}")
        points = raw["points"]
        if isinstance(points, bool) or not isinstance(points, int):
            raise TypeError(f"Score points must be an integer, got {points!r}")
        return cls(name=str(raw["name"]), points=points, date=str(raw.get("date", "")))

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process store, mostly useful for tests."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """Key-value store kept as a single JSON object on disk."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except ValueError:
            LOGGER.warning("Overwriting unreadable store %s", self.path)
            data = {}
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        if not self.path.exists():
            return
        try:
            data = self._read()
        except ValueError:
            data = {}
        data.pop(key, None)
        self._write(data)


class ScoreLedger:
    """Ranked list of the best ``capacity`` scores."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = STORAGE_KEY,
        capacity: int = LEDGER_CAPACITY,
        clock: Optional[Callable[[], str]] = None,
    ) -> None:
        self.store = store
        self.key = key
        self.capacity = capacity
        self._clock = clock or utc_timestamp
        self.entries: List[ScoreEntry] = self.load()

    def load(self) -> List[ScoreEntry]:
        """Return the stored entries, or an empty list if they can't be read."""

        try:
            raw = self.store.get(self.key)
            if not raw:
                return []
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("Score table is not a list")
            entries = [ScoreEntry.from_dict(item) for item in data]
        except (OSError, ValueError, TypeError, KeyError) as exc:
            LOGGER.warning("Discarding unreadable score table: %s", exc)
            return []
        return self._ranked(entries)

    def save(self, entries: Iterable[ScoreEntry]) -> None:
        """Persist ``entries`` after ranking and truncating them."""

        self.entries = self._ranked(entries)
        payload = json.dumps([entry.to_dict() for entry in self.entries])
        self.store.set(self.key, payload)

    def record(self, name: str, points: int) -> ScoreEntry:
        """Insert a new result and persist the updated table."""

        entry = ScoreEntry(name=name.strip() or DEFAULT_NAME, points=points, date=self._clock())
        self.save([*self.entries, entry])
        LOGGER.info("Recorded score %d for %s", points, entry.name)
        return entry

    def clear(self) -> None:
        self.entries = []
        self.store.remove(self.key)

    def _ranked(self, entries: Iterable[ScoreEntry]) -> List[ScoreEntry]:
        ranked = sorted(entries, key=lambda entry: entry.points, reverse=True)
        return ranked[: self.capacity]


__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "ScoreEntry",
    "ScoreLedger",
]
