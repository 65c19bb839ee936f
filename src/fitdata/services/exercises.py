"""ExerciseDB lookups returning canonical exercises."""

import logging
from dataclasses import dataclass
from datetime import timedelta

from fitdata.adapters.exercisedb_client import ExerciseDbClient
from fitdata.domain.exercises import CanonicalExercise
from fitdata.domain.results import Err, Ok, Result
from fitdata.services.cache import DEFAULT_CACHE_KEY, DEFAULT_MAX_AGE, ExerciseCache
from fitdata.services.cancellation import CancelToken
from fitdata.services.transforms import transform_exercise
from fitdata.services.upstream import call_upstream, invalid_input

PROVIDER = "ExerciseDB"
DEFAULT_LIST_LIMIT = 1500
DEFAULT_SEARCH_LIMIT = 50
DEFAULT_FILTER_LIMIT = 100

BODY_PARTS = "bodyparts"
EQUIPMENTS = "equipments"
MUSCLES = "muscles"

_logger = logging.getLogger(__name__)


def cache_key_for(limit: int, offset: int) -> str:
    """Cache slot for one listing page; the full default listing uses the base key."""
    if limit == DEFAULT_LIST_LIMIT and offset == 0:
        return DEFAULT_CACHE_KEY
    return f"{DEFAULT_CACHE_KEY}:{limit}:{offset}"


def _exercises_from(payload: dict[str, object]) -> list[CanonicalExercise]:
    data = payload.get("data") or []
    if not isinstance(data, list):
        return []
    return [transform_exercise(item) for item in data if isinstance(item, dict)]


@dataclass
class ExerciseService:
    """List, search and filter exercises, caching full listings."""

    client: ExerciseDbClient
    cache: ExerciseCache
    cache_max_age: timedelta = DEFAULT_MAX_AGE

    async def get_all_exercises(
        self,
        limit: int = DEFAULT_LIST_LIMIT,
        offset: int = 0,
        *,
        use_cache: bool = True,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalExercise]]:
        """Return a listing page, from the cache while it is fresh."""
        key = cache_key_for(limit, offset)
        if use_cache:
            cached = self.cache.get(self.cache_max_age, key=key)
            if cached is not None:
                return Ok(list(cached))

        result = await call_upstream(
            PROVIDER, "list", self.client.list_exercises(limit, offset), cancel
        )
        if isinstance(result, Err):
            return result
        exercises = _exercises_from(result.value)
        self.cache.put(exercises, key=key)
        _logger.info("Cached %s exercises under %s", len(exercises), key)
        return Ok(exercises)

    async def search_exercises(
        self,
        query: str,
        limit: int = DEFAULT_SEARCH_LIMIT,
        *,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalExercise]]:
        """Fuzzy-search exercises by name."""
        if not query or not query.strip():
            return invalid_input(PROVIDER, "Query parameter is required")
        result = await call_upstream(
            PROVIDER,
            "search",
            self.client.search_exercises(query.strip(), limit),
            cancel,
        )
        if isinstance(result, Err):
            return result
        return Ok(_exercises_from(result.value))

    async def filter_exercises(  # noqa: PLR0913
        self,
        *,
        equipment: str | None = None,
        body_part: str | None = None,
        target_muscle: str | None = None,
        limit: int = DEFAULT_FILTER_LIMIT,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalExercise]]:
        """Filter exercises; empty filters are left out of the request."""
        filters = {
            name: value
            for name, value in (
                ("equipment", equipment),
                ("bodyPart", body_part),
                ("targetMuscle", target_muscle),
            )
            if value
        }
        result = await call_upstream(
            PROVIDER, "filter", self.client.filter_exercises(filters, limit), cancel
        )
        if isinstance(result, Err):
            return result
        return Ok(_exercises_from(result.value))

    async def get_exercise_by_id(
        self, exercise_id: str, *, cancel: CancelToken | None = None
    ) -> Result[CanonicalExercise | None]:
        """Fetch one exercise; ``Ok(None)`` when ExerciseDB has no data for it."""
        if not exercise_id:
            return invalid_input(PROVIDER, "Exercise id is required")
        result = await call_upstream(
            PROVIDER,
            f"get:{exercise_id}",
            self.client.get_exercise(exercise_id),
            cancel,
        )
        if isinstance(result, Err):
            return result
        data = result.value.get("data")
        if not isinstance(data, dict):
            return Ok(None)
        return Ok(transform_exercise(data))

    async def get_exercises_by_body_part(
        self,
        body_part: str,
        limit: int = DEFAULT_FILTER_LIMIT,
        *,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalExercise]]:
        """List exercises for a body part such as ``chest``."""
        return await self._by_dimension(BODY_PARTS, body_part, limit, cancel)

    async def get_exercises_by_equipment(
        self,
        equipment: str,
        limit: int = DEFAULT_FILTER_LIMIT,
        *,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalExercise]]:
        """List exercises for an equipment such as ``barbell``."""
        return await self._by_dimension(EQUIPMENTS, equipment, limit, cancel)

    async def get_exercises_by_muscle(
        self,
        muscle: str,
        limit: int = DEFAULT_FILTER_LIMIT,
        *,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalExercise]]:
        """List exercises for a target muscle such as ``biceps``."""
        return await self._by_dimension(MUSCLES, muscle, limit, cancel)

    async def list_body_parts(
        self, *, cancel: CancelToken | None = None
    ) -> Result[list[str]]:
        return await self._dimension_values(BODY_PARTS, cancel)

    async def list_equipments(
        self, *, cancel: CancelToken | None = None
    ) -> Result[list[str]]:
        return await self._dimension_values(EQUIPMENTS, cancel)

    async def list_muscles(
        self, *, cancel: CancelToken | None = None
    ) -> Result[list[str]]:
        return await self._dimension_values(MUSCLES, cancel)

    async def _by_dimension(
        self,
        dimension: str,
        name: str,
        limit: int,
        cancel: CancelToken | None,
    ) -> Result[list[CanonicalExercise]]:
        if not name or not name.strip():
            return invalid_input(PROVIDER, f"A {dimension} value is required")
        result = await call_upstream(
            PROVIDER,
            f"{dimension}:{name}",
            self.client.list_by_dimension(dimension, name.strip(), limit),
            cancel,
        )
        if isinstance(result, Err):
            return result
        return Ok(_exercises_from(result.value))

    async def _dimension_values(
        self, dimension: str, cancel: CancelToken | None
    ) -> Result[list[str]]:
        result = await call_upstream(
            PROVIDER, dimension, self.client.list_dimension_values(dimension), cancel
        )
        if isinstance(result, Err):
            return result
        data = result.value.get("data") or []
        if not isinstance(data, list):
            return Ok([])
        names: list[str] = []
        for item in data:
            if isinstance(item, str):
                names.append(item)
            elif isinstance(item, dict) and isinstance(item.get("name"), str):
                names.append(item["name"])
        return Ok(names)
