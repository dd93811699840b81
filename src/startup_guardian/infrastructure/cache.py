"""ReportCache -- content-addressed report cache with time-based expiry.

Records live in a string-keyed key-value store, one record per normalized
query, under a key prefix that carries the schema version.  Each record is
JSON text ``{"timestamp": <epoch ms>, "payload": <report envelope>}``.

Expiry is lazy: a record older than :data:`CACHE_TTL_MS` is removed when a
lookup finds it, never on write.  Storage problems are logged and absorbed;
the cache behaves as empty (reads) or as write-through-to-nowhere (writes).
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from startup_guardian.domain.exceptions import CacheReadError, CacheWriteError
from startup_guardian.domain.values import ReportResult
from startup_guardian.infrastructure.serialization import report_from_dict, report_to_dict
from startup_guardian.services.normalizer import normalize_query
from startup_guardian.services.prompts import CACHE_KEY_PREFIX

logger = logging.getLogger(__name__)

CACHE_TTL_MS = 7 * 24 * 60 * 60 * 1000  # 7 days

_STORAGE_ERRORS = (OSError, ValueError, TypeError)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


# =========================================================================== #
#  Stores                                                                      #
# =========================================================================== #

class KeyValueStore(Protocol):
    """Minimal string -> string store the cache persists into."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryStore:
    """Thread-safe in-process store."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._items.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class FileStore:
    """One JSON file per key inside *directory*.

    File names are the SHA-256 of the key; each file holds
    ``{"key": ..., "value": ...}``.  Writes go to a temporary file that is
    then renamed over the target, so concurrent writers resolve to
    last-writer-wins and readers never see a half-written record.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._dir = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._dir / f"{digest}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        record = json.loads(text)
        value = record.get("value") if isinstance(record, dict) else None
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump({"key": key, "value": value}, fh)
            os.replace(tmp, self._path(key))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self._dir.is_dir():
            return []
        result: list[str] = []
        for path in sorted(self._dir.glob("*.json")):
            try:
                record = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                logger.warning("FileStore: skipping unreadable file %s", path)
                continue
            if isinstance(record, dict) and isinstance(record.get("key"), str):
                result.append(record["key"])
        return result


# =========================================================================== #
#  Cache                                                                       #
# =========================================================================== #

class ReportCache:
    """Query-keyed cache of report results with a fixed 7-day TTL.

    Parameters
    ----------
    store:
        Backing key-value store.  Defaults to a fresh :class:`MemoryStore`.
    clock:
        Returns the current time in epoch milliseconds.  Injectable so
        expiry can be tested deterministically.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._store: KeyValueStore = store if store is not None else MemoryStore()
        self._clock = clock

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @staticmethod
    def key_for(query: str) -> str:
        """Namespaced store key for *query*."""
        return f"{CACHE_KEY_PREFIX}{normalize_query(query)}"

    # -- read ------------------------------------------------------------------

    def _read(self, key: str) -> dict[str, Any] | None:
        try:
            text = self._store.get_item(key)
            if text is None:
                return None
            record = json.loads(text)
        except _STORAGE_ERRORS as exc:
            raise CacheReadError(f"Cannot read cache record: {exc}", key=key) from exc
        if not isinstance(record, dict) or not isinstance(record.get("timestamp"), (int, float)):
            raise CacheReadError("Cache record has no timestamp", key=key)
        return record

    def _is_fresh(self, record: dict[str, Any], now: int) -> bool:
        return now - record["timestamp"] < CACHE_TTL_MS

    def get(self, query: str) -> ReportResult | None:
        """Return the cached result for *query* if it is younger than the TTL.

        An expired or unreadable record found here is removed.
        """
        key = self.key_for(query)
        try:
            record = self._read(key)
            if record is None:
                logger.debug("ReportCache: miss for %r", key)
                return None
            if not self._is_fresh(record, self._clock()):
                logger.info("ReportCache: expired entry for %r removed", key)
                self._remove_quietly(key)
                return None
            try:
                result = report_from_dict(record.get("payload"))
            except ValueError as exc:
                raise CacheReadError(f"Bad cached payload: {exc}", key=key) from exc
        except CacheReadError as exc:
            logger.warning("Error reading from cache: %s", exc)
            self._remove_quietly(key)
            return None

        logger.info("ReportCache: hit for %r", key)
        return result

    # -- write -----------------------------------------------------------------

    def put(self, query: str, payload: ReportResult) -> None:
        """Store *payload* for *query*, replacing any previous record."""
        key = self.key_for(query)
        try:
            try:
                text = json.dumps({"timestamp": self._clock(), "payload": report_to_dict(payload)})
                self._store.set_item(key, text)
            except _STORAGE_ERRORS as exc:
                raise CacheWriteError(f"Cannot write cache record: {exc}", key=key) from exc
        except CacheWriteError as exc:
            logger.warning("Failed to save report to cache: %s", exc)
            return
        logger.debug("ReportCache: stored %r", key)

    # -- maintenance -----------------------------------------------------------

    def _own_keys(self) -> list[str]:
        try:
            return [k for k in self._store.keys() if k.startswith(CACHE_KEY_PREFIX)]
        except _STORAGE_ERRORS as exc:
            logger.warning("ReportCache: cannot list store keys: %s", exc)
            return []

    def _remove_quietly(self, key: str) -> None:
        try:
            self._store.remove_item(key)
        except _STORAGE_ERRORS as exc:
            logger.warning("ReportCache: cannot remove %r: %s", key, exc)

    def purge_expired(self) -> int:
        """Remove every expired or unreadable record; return how many went."""
        now = self._clock()
        removed = 0
        for key in self._own_keys():
            try:
                record = self._read(key)
            except CacheReadError:
                self._remove_quietly(key)
                removed += 1
                continue
            if record is not None and not self._is_fresh(record, now):
                self._remove_quietly(key)
                removed += 1
        logger.info("ReportCache: purged %d expired entries", removed)
        return removed

    def clear(self) -> int:
        """Remove every record of the current schema version."""
        keys = self._own_keys()
        for key in keys:
            self._remove_quietly(key)
        return len(keys)
