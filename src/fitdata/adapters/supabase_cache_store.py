"""Supabase-backed store for the exercise cache."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from fitdata.domain.exercises import CanonicalExercise
from fitdata.services.cache import CacheEntry, CacheStore

_TABLE = "exercise_cache"


@dataclass
class SupabaseCacheStore(CacheStore):
    """Persist cache slots as ``{exercises, timestamp}`` JSON rows."""

    client: Client

    def load(self, key: str) -> CacheEntry | None:
        """Return the stored entry for a key, if any."""
        response = (
            self.client.table(_TABLE)
            .select("payload")
            .eq("cache_key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        payload = response.data[0].get("payload") or {}
        exercises = tuple(
            CanonicalExercise.model_validate(item)
            for item in payload.get("exercises", [])
        )
        timestamp_ms = int(payload.get("timestamp", 0))
        return CacheEntry(
            payload=exercises,
            timestamp=datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC),
        )

    def save(self, key: str, entry: CacheEntry) -> None:
        """Upsert the slot for a key."""
        self.client.table(_TABLE).upsert(
            {
                "cache_key": key,
                "payload": {
                    "exercises": [
                        exercise.model_dump(mode="json", by_alias=True)
                        for exercise in entry.payload
                    ],
                    "timestamp": int(entry.timestamp.timestamp() * 1000),
                },
            },
            on_conflict="cache_key",
        ).execute()

    def delete(self, key: str) -> None:
        """Drop the slot for a key."""
        self.client.table(_TABLE).delete().eq("cache_key", key).execute()
