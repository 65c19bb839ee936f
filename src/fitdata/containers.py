"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from fitdata.adapters.exercisedb_client import ExerciseDbClient, HttpxExerciseDbClient
from fitdata.adapters.openfoodfacts_client import (
    HttpxOpenFoodFactsClient,
    OpenFoodFactsClient,
)
from fitdata.adapters.supabase_cache_store import SupabaseCacheStore
from fitdata.adapters.usda_client import HttpxUsdaClient, UsdaClient
from fitdata.config import Settings
from fitdata.services.cache import CacheStore, ExerciseCache, InMemoryCacheStore
from fitdata.services.exercises import ExerciseService
from fitdata.services.foods import FoodSearchService
from fitdata.services.usda import UsdaService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    usda_client: UsdaClient
    off_client: OpenFoodFactsClient
    exercisedb_client: ExerciseDbClient
    exercise_cache: ExerciseCache
    usda_service: UsdaService
    exercise_service: ExerciseService
    food_search_service: FoodSearchService
    close_resources: Callable[[], Awaitable[None]]


def build_cache_store(settings: Settings) -> CacheStore:
    """Use Supabase for the exercise cache when it is configured."""
    if settings.supabase_enabled:
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseCacheStore(client)
    return InMemoryCacheStore()


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timeout = resolved_settings.http_timeout_seconds
    user_agent = resolved_settings.upstream_user_agent

    usda_client = HttpxUsdaClient.create(
        api_key=resolved_settings.usda_api_key,
        base_url=resolved_settings.usda_base_url,
        user_agent=user_agent,
        timeout=timeout,
    )
    off_client = HttpxOpenFoodFactsClient.create(
        product_url=resolved_settings.openfoodfacts_product_url,
        search_url=resolved_settings.openfoodfacts_search_url,
        user_agent=user_agent,
        timeout=timeout,
    )
    exercisedb_client = HttpxExerciseDbClient.create(
        base_url=resolved_settings.exercisedb_base_url,
        user_agent=user_agent,
        timeout=timeout,
    )
    exercise_cache = ExerciseCache(store=build_cache_store(resolved_settings))
    usda_service = UsdaService(usda_client)
    exercise_service = ExerciseService(
        client=exercisedb_client,
        cache=exercise_cache,
        cache_max_age=timedelta(
            seconds=resolved_settings.exercise_cache_max_age_seconds
        ),
    )
    food_search_service = FoodSearchService(
        off_client=off_client,
        usda_service=usda_service,
    )

    async def close_resources() -> None:
        await usda_client.close()
        await off_client.close()
        await exercisedb_client.close()

    return AppContainer(
        settings=resolved_settings,
        usda_client=usda_client,
        off_client=off_client,
        exercisedb_client=exercisedb_client,
        exercise_cache=exercise_cache,
        usda_service=usda_service,
        exercise_service=exercise_service,
        food_search_service=food_search_service,
        close_resources=close_resources,
    )
