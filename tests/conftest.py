"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from fitdata.adapters.exercisedb_client import HttpxExerciseDbClient
from fitdata.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from fitdata.adapters.usda_client import HttpxUsdaClient
from fitdata.config import Settings
from fitdata.containers import AppContainer
from fitdata.services.cache import CacheStore, ExerciseCache, InMemoryCacheStore
from fitdata.services.exercises import ExerciseService
from fitdata.services.foods import FoodSearchService
from fitdata.services.usda import UsdaService

USDA_SEARCH_PATH = "/fdc/v1/foods/search"
OFF_SEARCH_PATH = "/api/v2/search"
EXERCISES_PATH = "/api/v1/exercises"

RouteHandler = Callable[[httpx.Request], httpx.Response]


def usda_search_payload() -> dict[str, object]:
    return {
        "totalHits": 2,
        "foods": [
            {
                "fdcId": 171077,
                "description": "Chicken, broiler or fryers, breast, meat only, raw",
                "dataType": "SR Legacy",
                "foodCategory": "Poultry Products",
                "publicationDate": "4/1/2019",
                "foodNutrients": [
                    {"nutrientName": "Protein", "unitName": "G", "value": 22.5},
                    {
                        "nutrientName": "Total lipid (fat)",
                        "unitName": "G",
                        "value": 2.62,
                    },
                    {
                        "nutrientName": "Carbohydrate, by difference",
                        "unitName": "G",
                        "value": 0,
                    },
                    {"nutrientName": "Energy", "unitName": "KCAL", "value": 120},
                    {"nutrientName": "Sodium, Na", "unitName": "MG", "value": 45},
                    {"nutrientName": "Cholesterol", "unitName": "MG", "value": 73},
                ],
            },
            {
                "fdcId": 2646170,
                "description": "Chicken breast, roasted",
                "dataType": "Foundation",
                "foodNutrients": [],
            },
        ],
    }


def exercise_record(
    exercise_id: str = "trmte8s",
    name: str = "Barbell Bench Press",
    body_parts: list[str] | None = None,
) -> dict[str, object]:
    return {
        "exerciseId": exercise_id,
        "name": name,
        "gifUrl": f"https://static.exercisedb.dev/media/{exercise_id}.gif",
        "targetMuscles": ["pectorals"],
        "bodyParts": body_parts if body_parts is not None else ["chest"],
        "equipments": ["barbell"],
        "secondaryMuscles": ["triceps", "shoulders"],
    }


@dataclass
class FakeUpstream:
    """Routes upstream requests by URL path and records them."""

    routes: dict[str, RouteHandler] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def json(self, path: str, payload: object, status_code: int = 200) -> None:
        self.routes[path] = lambda _request: httpx.Response(status_code, json=payload)

    def route(self, path: str, handler: RouteHandler) -> None:
        self.routes[path] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        return route(request)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@dataclass
class FakeClock:
    """Controllable clock for cache expiry tests."""

    now: datetime = field(
        default_factory=lambda: datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        usda_api_key="test-key",
        usda_base_url="https://usda.test/fdc/v1",
        openfoodfacts_product_url="https://off.test/api/v0/product",
        openfoodfacts_search_url="https://off-us.test/api/v2/search",
        exercisedb_base_url="https://exercisedb.test/api/v1",
        supabase_url=None,
        supabase_service_key=None,
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_store() -> CacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def container(
    settings: Settings,
    upstream: FakeUpstream,
    clock: FakeClock,
    cache_store: CacheStore,
) -> AppContainer:
    def http_client() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))

    usda_client = HttpxUsdaClient(
        api_key=settings.usda_api_key,
        base_url=settings.usda_base_url,
        http_client=http_client(),
    )
    off_client = HttpxOpenFoodFactsClient(
        product_url=settings.openfoodfacts_product_url,
        search_url=settings.openfoodfacts_search_url,
        http_client=http_client(),
    )
    exercisedb_client = HttpxExerciseDbClient(
        base_url=settings.exercisedb_base_url,
        http_client=http_client(),
    )
    exercise_cache = ExerciseCache(store=cache_store, clock=clock)
    usda_service = UsdaService(usda_client)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        usda_client=usda_client,
        off_client=off_client,
        exercisedb_client=exercisedb_client,
        exercise_cache=exercise_cache,
        usda_service=usda_service,
        exercise_service=ExerciseService(
            client=exercisedb_client, cache=exercise_cache
        ),
        food_search_service=FoodSearchService(
            off_client=off_client, usda_service=usda_service
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def usda_payload() -> dict[str, object]:
    return usda_search_payload()


@pytest.fixture
def make_exercise() -> Callable[..., dict[str, object]]:
    return exercise_record
