"""Exercise listing cache."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from fitdata.domain.exercises import CanonicalExercise

DEFAULT_CACHE_KEY = "exercisedb_cache"
DEFAULT_MAX_AGE = timedelta(hours=24)

_logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class CacheEntry:
    """A cached exercise listing and when it was stored."""

    payload: tuple[CanonicalExercise, ...]
    timestamp: datetime


class CacheStore(Protocol):
    """Storage backend holding one entry per cache key."""

    def load(self, key: str) -> CacheEntry | None:
        """Return the stored entry for a key, if any."""

    def save(self, key: str, entry: CacheEntry) -> None:
        """Replace the stored entry for a key."""

    def delete(self, key: str) -> None:
        """Drop the stored entry for a key."""


@dataclass
class InMemoryCacheStore(CacheStore):
    """Process-local cache store."""

    _entries: dict[str, CacheEntry] = field(default_factory=dict)

    def load(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def save(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)


@dataclass
class ExerciseCache:
    """Time-expiring cache of exercise listings.

    The cache is best-effort: a failing store is logged and behaves like an
    empty cache, so callers always fall back to a network fetch.
    """

    store: CacheStore
    clock: Callable[[], datetime] = _utc_now

    def get(
        self, max_age: timedelta = DEFAULT_MAX_AGE, key: str = DEFAULT_CACHE_KEY
    ) -> tuple[CanonicalExercise, ...] | None:
        """Return the cached listing unless it is older than ``max_age``."""
        try:
            entry = self.store.load(key)
        except Exception:
            _logger.warning("Exercise cache read failed for %s", key, exc_info=True)
            return None
        if entry is None:
            return None
        if self.clock() - entry.timestamp > max_age:
            self._evict(key)
            return None
        return entry.payload

    def put(
        self, payload: Sequence[CanonicalExercise], key: str = DEFAULT_CACHE_KEY
    ) -> None:
        """Overwrite the slot for ``key`` with ``payload`` stamped now."""
        entry = CacheEntry(payload=tuple(payload), timestamp=self.clock())
        try:
            self.store.save(key, entry)
        except Exception:
            _logger.warning("Exercise cache write failed for %s", key, exc_info=True)

    def _evict(self, key: str) -> None:
        try:
            self.store.delete(key)
        except Exception:
            _logger.warning("Exercise cache evict failed for %s", key, exc_info=True)
