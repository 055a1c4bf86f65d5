"""In-memory cache of extracted model properties.

Entries are keyed by fully qualified type name and stamped with the source
file's modification time.  An entry is served only while the file has not
been touched since and the entry is younger than the expiration window.
The cache is bounded; when full, the oldest inserted entry is evicted (not
strict LRU).

Clock, file stat and sweep scheduling are injected so tests can drive time
explicitly.  A module-level instance shared by the whole process is
available through :func:`get_default_cache`.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from viewscaffold.config import CacheConfig

from .models import ModelProperty

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
StatFunc = Callable[[str], float]


@dataclass(frozen=True)
class ExtractionCacheEntry:
    """Memoized extraction result for one type name."""

    type_name: str
    source_file_path: str
    properties: tuple[ModelProperty, ...]
    last_modified_at: float
    cached_at: float


# ---------------------------------------------------------------------------
# Sweep scheduling
# ---------------------------------------------------------------------------


class SweepHandle:
    """Handle returned by a scheduler; ``cancel()`` stops future sweeps."""

    def cancel(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class _ThreadSweepHandle(SweepHandle):
    def __init__(self, interval: float, callback: Callable[[], object]) -> None:
        self._stop = threading.Event()
        self._interval = interval
        self._callback = callback
        self._thread = threading.Thread(
            target=self._run, name="viewscaffold-cache-sweep", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self._callback()
            except Exception:  # noqa: BLE001
                logger.exception("Cache sweep failed")

    def cancel(self) -> None:
        self._stop.set()


class SweepScheduler:
    """Starts a periodic callback; subclasses decide how it is driven."""

    def schedule(
        self, interval: float, callback: Callable[[], object]
    ) -> SweepHandle:  # pragma: no cover - interface
        raise NotImplementedError


class ThreadSweepScheduler(SweepScheduler):
    """Runs the sweep on a daemon thread every *interval* seconds."""

    def schedule(self, interval: float, callback: Callable[[], object]) -> SweepHandle:
        return _ThreadSweepHandle(interval, callback)


# ---------------------------------------------------------------------------
# ExtractionCache
# ---------------------------------------------------------------------------


class ExtractionCache:
    """Bounded, modification-time aware cache of property lists.

    Concurrent calls for different type names are independent.  File stat
    calls happen outside the lock; a racing ``get``/``set`` on the same type
    may briefly serve a stale entry, which the next call re-validates.
    """

    def __init__(
        self,
        max_entries: int = 100,
        expiration_seconds: float = 300.0,
        clock: Clock = time.time,
        stat: StatFunc = os.path.getmtime,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if expiration_seconds <= 0:
            raise ValueError("expiration_seconds must be positive")
        self.max_entries = max_entries
        self.expiration_seconds = expiration_seconds
        self._clock = clock
        self._stat = stat
        self._entries: dict[str, ExtractionCacheEntry] = {}
        self._lock = threading.Lock()
        self._sweep_handle: Optional[SweepHandle] = None

    # -- Lookup -------------------------------------------------------------

    def get(self, type_name: str, file_path: str) -> Optional[list[ModelProperty]]:
        """Return a fresh copy of the cached properties, or ``None`` on a miss.

        A missing file, a newer modification time or an expired entry all
        evict the entry and report a miss.
        """
        with self._lock:
            entry = self._entries.get(type_name)
        if entry is None:
            return None

        try:
            modified = self._stat(file_path)
        except OSError as exc:
            logger.debug("Dropping cached %s: cannot stat %s (%s)", type_name, file_path, exc)
            self._discard(type_name, entry)
            return None

        if modified > entry.last_modified_at:
            logger.debug("Dropping cached %s: %s changed on disk", type_name, file_path)
            self._discard(type_name, entry)
            return None

        if self._is_expired(entry, self._clock()):
            logger.debug("Dropping cached %s: entry expired", type_name)
            self._discard(type_name, entry)
            return None

        return list(entry.properties)

    def set(self, type_name: str, file_path: str, properties: Sequence[ModelProperty]) -> None:
        """Cache *properties* stamped with the file's current modification time.

        If the file cannot be stat-ed nothing is cached and any existing
        entry for *type_name* is dropped.
        """
        try:
            modified = self._stat(file_path)
        except OSError as exc:
            logger.debug("Not caching %s: cannot stat %s (%s)", type_name, file_path, exc)
            self.delete(type_name)
            return

        entry = ExtractionCacheEntry(
            type_name=type_name,
            source_file_path=file_path,
            properties=tuple(properties),
            last_modified_at=modified,
            cached_at=self._clock(),
        )
        with self._lock:
            if type_name not in self._entries and len(self._entries) >= self.max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                logger.debug("Cache full, evicted %s", oldest)
            self._entries[type_name] = entry

    # -- Management ---------------------------------------------------------

    def delete(self, type_name: str) -> bool:
        """Remove one entry.  Returns ``True`` if it existed."""
        with self._lock:
            return self._entries.pop(type_name, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, type_name: object) -> bool:
        with self._lock:
            return type_name in self._entries

    def entry(self, type_name: str) -> Optional[ExtractionCacheEntry]:
        """Raw entry for diagnostics, without validation."""
        with self._lock:
            return self._entries.get(type_name)

    # -- Expiration sweep ---------------------------------------------------

    def sweep(self) -> int:
        """Remove every expired entry.  Returns how many were removed.

        The lock is taken once per stale entry so concurrent lookups are
        never held up for longer than a single removal.
        """
        now = self._clock()
        with self._lock:
            stale = [
                name for name, entry in self._entries.items()
                if self._is_expired(entry, now)
            ]

        removed = 0
        for name in stale:
            with self._lock:
                entry = self._entries.get(name)
                if entry is not None and self._is_expired(entry, now):
                    del self._entries[name]
                    removed += 1
        if removed:
            logger.debug("Cache sweep removed %d expired entries", removed)
        return removed

    def start_sweeper(
        self,
        interval_seconds: float = 60.0,
        scheduler: Optional[SweepScheduler] = None,
    ) -> SweepHandle:
        """Schedule :meth:`sweep` every *interval_seconds*.  Idempotent."""
        if self._sweep_handle is None:
            scheduler = scheduler or ThreadSweepScheduler()
            self._sweep_handle = scheduler.schedule(interval_seconds, self.sweep)
        return self._sweep_handle

    def stop_sweeper(self) -> None:
        if self._sweep_handle is not None:
            self._sweep_handle.cancel()
            self._sweep_handle = None

    # -- Internal helpers ---------------------------------------------------

    def _is_expired(self, entry: ExtractionCacheEntry, now: float) -> bool:
        return now - entry.cached_at > self.expiration_seconds

    def _discard(self, type_name: str, entry: ExtractionCacheEntry) -> None:
        """Remove *entry* unless a concurrent ``set`` already replaced it."""
        with self._lock:
            if self._entries.get(type_name) is entry:
                del self._entries[type_name]


# ---------------------------------------------------------------------------
# Process-wide instance
# ---------------------------------------------------------------------------

_default_cache: Optional[ExtractionCache] = None
_default_lock = threading.Lock()


def _build_cache(settings: CacheConfig) -> ExtractionCache:
    cache = ExtractionCache(
        max_entries=settings.max_entries,
        expiration_seconds=settings.expiration_seconds,
    )
    cache.start_sweeper(settings.sweep_interval_seconds)
    return cache


def get_default_cache() -> ExtractionCache:
    """Return the shared cache, creating it and its sweeper on first use."""
    global _default_cache
    with _default_lock:
        if _default_cache is None:
            _default_cache = _build_cache(CacheConfig())
        return _default_cache


def configure_default_cache(settings: CacheConfig) -> ExtractionCache:
    """Replace the shared cache with one built from *settings*."""
    global _default_cache
    with _default_lock:
        if _default_cache is not None:
            _default_cache.stop_sweeper()
        _default_cache = _build_cache(settings)
        return _default_cache
