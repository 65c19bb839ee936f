"""Tests for the exercise listing cache."""

from datetime import timedelta

from fitdata.domain.exercises import CanonicalExercise
from fitdata.services.cache import (
    DEFAULT_CACHE_KEY,
    CacheEntry,
    ExerciseCache,
    InMemoryCacheStore,
)
from fitdata.services.transforms import transform_exercise


class BrokenCacheStore:
    """Store whose backend is unreachable."""

    def load(self, key: str) -> CacheEntry | None:
        raise ConnectionError("storage offline")

    def save(self, key: str, entry: CacheEntry) -> None:
        raise ConnectionError("storage offline")

    def delete(self, key: str) -> None:
        raise ConnectionError("storage offline")


def _exercises() -> list[CanonicalExercise]:
    return [
        transform_exercise({"exerciseId": "a1", "name": "Push Up"}),
        transform_exercise({"exerciseId": "b2", "name": "Squat"}),
    ]


def test_put_then_get_returns_payload(clock) -> None:
    cache = ExerciseCache(store=InMemoryCacheStore(), clock=clock)
    exercises = _exercises()

    cache.put(exercises)
    clock.advance(hours=1)

    assert cache.get(timedelta(hours=24)) == tuple(exercises)


def test_missing_key_is_a_miss(clock) -> None:
    cache = ExerciseCache(store=InMemoryCacheStore(), clock=clock)

    assert cache.get(timedelta(hours=24)) is None


def test_expired_entry_is_evicted(clock) -> None:
    store = InMemoryCacheStore()
    cache = ExerciseCache(store=store, clock=clock)
    cache.put(_exercises())

    clock.advance(hours=24, seconds=1)

    assert cache.get(timedelta(hours=24)) is None
    assert store.load(DEFAULT_CACHE_KEY) is None
    # A longer window later does not bring the evicted entry back.
    assert cache.get(timedelta(days=7)) is None


def test_entry_at_exact_max_age_is_still_fresh(clock) -> None:
    cache = ExerciseCache(store=InMemoryCacheStore(), clock=clock)
    cache.put(_exercises())

    clock.advance(hours=24)

    assert cache.get(timedelta(hours=24)) is not None


def test_keys_are_independent(clock) -> None:
    cache = ExerciseCache(store=InMemoryCacheStore(), clock=clock)
    first, second = _exercises()

    cache.put([first])
    cache.put([second], key="exercisedb_cache:10:0")

    assert cache.get(timedelta(hours=1)) == (first,)
    assert cache.get(timedelta(hours=1), key="exercisedb_cache:10:0") == (second,)


def test_put_overwrites_previous_payload(clock) -> None:
    cache = ExerciseCache(store=InMemoryCacheStore(), clock=clock)
    first, second = _exercises()

    cache.put([first])
    clock.advance(hours=23)
    cache.put([second])
    clock.advance(hours=2)

    assert cache.get(timedelta(hours=24)) == (second,)


def test_failing_store_behaves_like_empty_cache(clock) -> None:
    cache = ExerciseCache(store=BrokenCacheStore(), clock=clock)

    cache.put(_exercises())

    assert cache.get(timedelta(hours=24)) is None
