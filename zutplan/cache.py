"""
Result cache with per-category time-to-live.

Entries are written whole and never merged: a new save under the same key
simply replaces the old entry. Staleness is only checked when reading:

    load_fresh(key, category)  -> payload if younger than the category TTL
    load_force(key)            -> payload regardless of age

Both return None on a miss. A corrupted entry (bad JSON, wrong shape) is a
miss too, never an exception.

The storage medium is hidden behind KeyValueStore, so tests run against the
in-memory store and the CLI uses one JSON file per key on disk.
"""

from __future__ import annotations

import hashlib
import json
import logging
import math
import os
import tempfile
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

log = logging.getLogger(__name__)

MINUTE = 60
HOUR = 60 * MINUTE


class CacheCategory(str, Enum):
    PLAN = "plan"
    PLAN_ROWS = "plan_rows"
    PERIODS = "periods"
    STUDIES = "studies"
    SEMESTERS = "semesters"
    INFO = "info"
    GRADES = "grades"
    NEWS = "news"


# Timetables may shift near-term, so plans go stale quickly.
DEFAULT_TTL: Dict[CacheCategory, int] = {
    CacheCategory.PLAN: 30 * MINUTE,
    CacheCategory.PLAN_ROWS: 30 * MINUTE,
    CacheCategory.PERIODS: 6 * HOUR,
    CacheCategory.STUDIES: 24 * HOUR,
    CacheCategory.SEMESTERS: 24 * HOUR,
    CacheCategory.INFO: 24 * HOUR,
    CacheCategory.GRADES: 1 * HOUR,
    CacheCategory.NEWS: 6 * HOUR,
}


class KeyValueStore(Protocol):
    def get_text(self, key: str) -> Optional[str]: ...

    def set_text(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store, mainly for tests."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_text(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_text(self, key: str, value: str) -> None:
        self._items[key] = value

    def delete(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class JsonFileStore:
    """
    One JSON file per key inside `directory`.

    Keys are opaque, so file names are a hash of the key.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.json"

    def get_text(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    def set_text(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        # unique temp name per write; concurrent saves of one key end as last-writer-wins
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self.directory, suffix=".tmp", delete=False
        ) as tmp:
            tmp.write(value)
        try:
            os.replace(tmp.name, path)
        except OSError:
            Path(tmp.name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass

    def clear(self) -> int:
        if not self.directory.exists():
            return 0
        removed = 0
        for path in self.directory.glob("*.json"):
            path.unlink()
            removed += 1
        return removed


@dataclass(frozen=True)
class CacheEntry:
    payload: Any
    captured_at: float


class ResultCache:
    """
    Keyed cache of JSON-serializable payloads with per-category TTL.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl: Optional[Mapping[CacheCategory, int]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.ttl: Dict[CacheCategory, int] = dict(DEFAULT_TTL)
        if ttl:
            self.ttl.update(ttl)
        self.clock = clock

    def save(self, key: str, payload: Any) -> CacheEntry:
        entry = CacheEntry(payload=payload, captured_at=self.clock())
        text = json.dumps({"captured_at": entry.captured_at, "payload": payload}, ensure_ascii=False)
        self.store.set_text(key, text)
        return entry

    def _read(self, key: str) -> Optional[CacheEntry]:
        text = self.store.get_text(key)
        if text is None:
            return None
        try:
            data = json.loads(text)
            if not isinstance(data, dict) or "payload" not in data:
                raise ValueError("missing payload")
            captured_at = float(data["captured_at"])
            if not math.isfinite(captured_at):
                raise ValueError("bad timestamp")
        except (ValueError, TypeError, KeyError) as e:
            log.warning("Ignoring corrupted cache entry %r: %s", key, e)
            return None
        return CacheEntry(payload=data["payload"], captured_at=captured_at)

    def load_fresh(self, key: str, category: CacheCategory) -> Optional[Any]:
        entry = self._read(key)
        if entry is None:
            return None
        age = self.clock() - entry.captured_at
        if age > self.ttl[category]:
            log.debug("Cache entry %r is stale (%.0fs old)", key, age)
            return None
        return entry.payload

    def load_force(self, key: str) -> Optional[Any]:
        entry = self._read(key)
        return None if entry is None else entry.payload

    def invalidate(self, key: str) -> None:
        self.store.delete(key)


def plan_cache_key(view_mode: str, day: str, identity: str) -> str:
    return f"plan_{view_mode}_{day}_{identity or 'nostudy'}"


def week_rows_cache_key(week_start: str, identity: str) -> str:
    return f"rows_{week_start}_{identity or 'nostudy'}"
