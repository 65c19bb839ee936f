"""Endpoints serving canonical food and exercise records."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from fastapi import APIRouter, Body, HTTPException, Query, Request, status
from pydantic import BaseModel

from fitdata.domain.results import Err, Result

if TYPE_CHECKING:
    from fitdata.containers import AppContainer

router = APIRouter(prefix="/api", tags=["catalog"])

T = TypeVar("T")


def _unwrap(result: Result[T]) -> T:
    """Return the value of a result or raise the matching HTTP error."""
    if isinstance(result, Err):
        error = result.error
        raise HTTPException(
            status_code=error.http_status,
            detail={
                "error": error.message,
                "provider": error.provider,
                "kind": str(error.kind),
                "status": error.status_code,
            },
        )
    return result.value


def _dump(records: list[BaseModel]) -> list[dict[str, object]]:
    return [record.model_dump(mode="json", by_alias=True) for record in records]


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/foods/search")
async def search_foods(
    request: Request, query: str = "", limit: int = Query(default=20, ge=1, le=100)
) -> dict[str, object]:
    """Search branded and whole foods."""
    result = await _container(request).food_search_service.search_foods(
        query, limit=limit
    )
    return {"foods": _dump(_unwrap(result))}


@router.get("/foods/barcode/{barcode}")
async def food_by_barcode(barcode: str, request: Request) -> dict[str, object]:
    """Return the canonical food for a barcode."""
    result = await _container(request).food_search_service.get_food_by_barcode(
        barcode
    )
    food = _unwrap(result)
    if food is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Product not found"},
        )
    return {"food": food.model_dump(mode="json", by_alias=True)}


@router.get("/foods/usda-status")
async def usda_status(request: Request) -> dict[str, object]:
    """Report whether FoodData Central answers with the configured key."""
    container = _container(request)
    connected = await container.usda_service.check_connection()
    return {"connected": connected, "demoKey": container.settings.uses_demo_key}


@router.get("/foods/usda-categories")
async def usda_categories(request: Request) -> dict[str, object]:
    """List FoodData Central food categories."""
    result = await _container(request).usda_service.get_food_categories()
    return {"categories": _unwrap(result)}


@router.post("/foods/usda/nutrient-search")
async def usda_nutrient_search(
    request: Request, criteria: dict[str, object] | None = Body(default=None)
) -> dict[str, object]:
    """Find whole foods by nutrient criteria sent as the JSON body."""
    result = await _container(request).usda_service.search_by_nutrients(
        criteria or {}
    )
    return {"foods": _dump(_unwrap(result))}


@router.get("/foods/usda/{fdc_id}")
async def usda_food(fdc_id: int, request: Request) -> dict[str, object]:
    """Return full details for a USDA food."""
    result = await _container(request).usda_service.get_food_details(fdc_id)
    return {"food": _unwrap(result).model_dump(mode="json", by_alias=True)}


@router.get("/exercises")
async def list_exercises(
    request: Request,
    limit: int = Query(default=1500, ge=1),
    offset: int = Query(default=0, ge=0),
) -> dict[str, object]:
    """List exercises, served from the cache while fresh."""
    result = await _container(request).exercise_service.get_all_exercises(
        limit, offset
    )
    return {"exercises": _dump(_unwrap(result))}


@router.get("/exercises/search")
async def search_exercises(
    request: Request, q: str = "", limit: int = Query(default=50, ge=1)
) -> dict[str, object]:
    """Fuzzy-search exercises by name."""
    result = await _container(request).exercise_service.search_exercises(q, limit)
    return {"exercises": _dump(_unwrap(result))}


@router.get("/exercises/filter")
async def filter_exercises(  # noqa: PLR0913
    request: Request,
    equipment: str | None = None,
    body_part: str | None = Query(default=None, alias="bodyPart"),
    target_muscle: str | None = Query(default=None, alias="targetMuscle"),
    limit: int = Query(default=100, ge=1),
) -> dict[str, object]:
    """Filter exercises by equipment, body part and target muscle."""
    result = await _container(request).exercise_service.filter_exercises(
        equipment=equipment,
        body_part=body_part,
        target_muscle=target_muscle,
        limit=limit,
    )
    return {"exercises": _dump(_unwrap(result))}


@router.get("/exercises/bodyparts")
async def list_body_parts(request: Request) -> dict[str, object]:
    result = await _container(request).exercise_service.list_body_parts()
    return {"bodyParts": _unwrap(result)}


@router.get("/exercises/equipments")
async def list_equipments(request: Request) -> dict[str, object]:
    result = await _container(request).exercise_service.list_equipments()
    return {"equipments": _unwrap(result)}


@router.get("/exercises/muscles")
async def list_muscles(request: Request) -> dict[str, object]:
    result = await _container(request).exercise_service.list_muscles()
    return {"muscles": _unwrap(result)}


@router.get("/exercises/bodyparts/{body_part}")
async def exercises_by_body_part(
    body_part: str, request: Request, limit: int = Query(default=100, ge=1)
) -> dict[str, object]:
    result = await _container(request).exercise_service.get_exercises_by_body_part(
        body_part, limit
    )
    return {"exercises": _dump(_unwrap(result))}


@router.get("/exercises/equipments/{equipment}")
async def exercises_by_equipment(
    equipment: str, request: Request, limit: int = Query(default=100, ge=1)
) -> dict[str, object]:
    result = await _container(request).exercise_service.get_exercises_by_equipment(
        equipment, limit
    )
    return {"exercises": _dump(_unwrap(result))}


@router.get("/exercises/muscles/{muscle}")
async def exercises_by_muscle(
    muscle: str, request: Request, limit: int = Query(default=100, ge=1)
) -> dict[str, object]:
    result = await _container(request).exercise_service.get_exercises_by_muscle(
        muscle, limit
    )
    return {"exercises": _dump(_unwrap(result))}


@router.get("/exercises/{exercise_id}")
async def exercise_detail(exercise_id: str, request: Request) -> dict[str, object]:
    """Return a single exercise."""
    result = await _container(request).exercise_service.get_exercise_by_id(
        exercise_id
    )
    exercise = _unwrap(result)
    if exercise is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Exercise not found"},
        )
    return {"exercise": exercise.model_dump(mode="json", by_alias=True)}
