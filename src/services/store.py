"""Local persistence for the period and symptom logs.

The engine never touches storage.  This module provides the storage port
(``CollectionStore``: load a collection, save a collection) plus the two
collection services the API layer uses to own the user's records:

- ``PeriodLog``: recorded periods, kept sorted by start date
- ``SymptomJournal``: daily symptom logs, listed most recent first

Collections are stored as JSON arrays, one file per collection, named after
the keys the browser app used (``recordedPeriods``, ``symptomLogs``).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from src.cycles.interval_validator import insert_interval
from src.cycles.models import PeriodInterval, SymptomLogEntry

logger = logging.getLogger("mitra.store")

PERIODS_KEY = "recordedPeriods"
SYMPTOM_LOGS_KEY = "symptomLogs"


class StoreError(RuntimeError):
    """Raised when a stored collection cannot be read or written."""


# ---------------------------------------------------------------------------
# Storage port
# ---------------------------------------------------------------------------


class CollectionStore(ABC):
    """Load/save a single collection of JSON-serializable records."""

    @abstractmethod
    def load(self) -> list[dict[str, Any]]:
        """Return the stored records (empty list if nothing stored yet)."""

    @abstractmethod
    def save(self, items: list[dict[str, Any]]) -> None:
        """Replace the stored records."""


class InMemoryStore(CollectionStore):
    """Process-local store, used in tests and when no data dir is wanted."""

    def __init__(self, items: list[dict[str, Any]] | None = None) -> None:
        self._items = [dict(i) for i in (items or [])]

    def load(self) -> list[dict[str, Any]]:
        return [dict(i) for i in self._items]

    def save(self, items: list[dict[str, Any]]) -> None:
        self._items = [dict(i) for i in items]


class JsonFileStore(CollectionStore):
    """Store a collection as a JSON array in ``<data_dir>/<key>.json``.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace``, so a crash never leaves a half-written file.
    """

    def __init__(self, data_dir: Path, key: str) -> None:
        self._path = Path(data_dir) / f"{key}.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StoreError(f"Corrupt collection file {self._path}: {exc}") from exc
        if not isinstance(raw, list):
            raise StoreError(f"Collection file {self._path} does not hold a JSON array")
        return raw

    def save(self, items: list[dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"Failed to write {self._path}: {exc}") from exc
        logger.debug("Saved %d record(s) to %s", len(items), self._path)


# ---------------------------------------------------------------------------
# Collection services
# ---------------------------------------------------------------------------


class PeriodLog:
    """The user's recorded periods, validated on insert and kept sorted."""

    def __init__(self, store: CollectionStore) -> None:
        self._store = store
        self._lock = threading.Lock()

    def list_periods(self) -> list[PeriodInterval]:
        """Return recorded periods sorted ascending by start date."""
        return sorted(PeriodInterval.from_dict(raw) for raw in self._store.load())

    def add(self, candidate: PeriodInterval) -> list[PeriodInterval]:
        """Validate and record a period.

        Raises:
            OverlapError: If the period intersects a recorded one.
        """
        with self._lock:
            updated = insert_interval(candidate, self.list_periods())
            self._store.save([p.to_dict() for p in updated])
        logger.info("Recorded period %s (%d total)", candidate.describe(), len(updated))
        return updated

    def remove(self, index: int) -> PeriodInterval:
        """Delete the period at ``index`` in start-date order.

        Raises:
            IndexError: If no period exists at ``index``.
        """
        with self._lock:
            periods = self.list_periods()
            if not 0 <= index < len(periods):
                raise IndexError(f"No recorded period at index {index}")
            removed = periods.pop(index)
            self._store.save([p.to_dict() for p in periods])
        logger.info("Removed period %s", removed.describe())
        return removed


class SymptomJournal:
    """The user's symptom logs; same-day entries are kept side by side."""

    def __init__(self, store: CollectionStore) -> None:
        self._store = store
        self._lock = threading.Lock()

    def list_logs(self) -> list[SymptomLogEntry]:
        """Return logs most recent first (stable for same-day entries)."""
        logs = [SymptomLogEntry.from_dict(raw) for raw in self._store.load()]
        return sorted(logs, key=lambda log: log.date, reverse=True)

    def add(self, entry: SymptomLogEntry) -> list[SymptomLogEntry]:
        with self._lock:
            logs = [entry, *self.list_logs()]
            logs.sort(key=lambda log: log.date, reverse=True)
            self._store.save([log.to_dict() for log in logs])
        logger.info("Logged symptoms for %s (%d total)", entry.date.isoformat(), len(logs))
        return logs

    def remove(self, index: int) -> SymptomLogEntry:
        """Delete the log at ``index`` in most-recent-first order.

        Raises:
            IndexError: If no log exists at ``index``.
        """
        with self._lock:
            logs = self.list_logs()
            if not 0 <= index < len(logs):
                raise IndexError(f"No symptom log at index {index}")
            removed = logs.pop(index)
            self._store.save([log.to_dict() for log in logs])
        logger.info("Removed symptom log for %s", removed.date.isoformat())
        return removed
