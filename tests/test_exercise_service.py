"""Tests for the ExerciseDB service."""

import asyncio

from fitdata.domain.exercises import ExerciseCategory
from fitdata.domain.results import Err, ErrorKind, Ok
from fitdata.services.exercises import cache_key_for

EXERCISES_PATH = "/api/v1/exercises"


def test_cache_key_for() -> None:
    assert cache_key_for(1500, 0) == "exercisedb_cache"
    assert cache_key_for(10, 20) == "exercisedb_cache:10:20"


def test_get_all_exercises_uses_cache(container, upstream, make_exercise) -> None:
    upstream.json(
        EXERCISES_PATH,
        {"success": True, "data": [make_exercise(), make_exercise("abc", "Squat")]},
    )
    service = container.exercise_service

    first = asyncio.run(service.get_all_exercises())
    second = asyncio.run(service.get_all_exercises())

    assert isinstance(first, Ok)
    assert [exercise.id for exercise in first.value] == ["trmte8s", "abc"]
    assert second == first
    assert upstream.paths() == [EXERCISES_PATH]
    assert upstream.requests[0].url.params["limit"] == "1500"


def test_get_all_exercises_refetches_after_expiry(
    container, upstream, clock, make_exercise
) -> None:
    upstream.json(EXERCISES_PATH, {"success": True, "data": [make_exercise()]})
    service = container.exercise_service

    asyncio.run(service.get_all_exercises())
    clock.advance(hours=25)
    asyncio.run(service.get_all_exercises())

    assert upstream.paths() == [EXERCISES_PATH, EXERCISES_PATH]


def test_get_all_exercises_bypasses_cache(container, upstream, make_exercise) -> None:
    upstream.json(EXERCISES_PATH, {"success": True, "data": [make_exercise()]})
    service = container.exercise_service

    asyncio.run(service.get_all_exercises())
    asyncio.run(service.get_all_exercises(use_cache=False))

    assert len(upstream.requests) == 2


def test_pages_are_cached_separately(container, upstream, make_exercise) -> None:
    upstream.json(EXERCISES_PATH, {"success": True, "data": [make_exercise()]})
    service = container.exercise_service

    asyncio.run(service.get_all_exercises())
    asyncio.run(service.get_all_exercises(10, 20))
    asyncio.run(service.get_all_exercises(10, 20))

    assert len(upstream.requests) == 2
    assert upstream.requests[1].url.params["offset"] == "20"


def test_failed_listing_is_not_cached(container, upstream, make_exercise) -> None:
    upstream.json(EXERCISES_PATH, {"error": "down"}, status_code=503)
    service = container.exercise_service

    failed = asyncio.run(service.get_all_exercises())
    upstream.json(EXERCISES_PATH, {"success": True, "data": [make_exercise()]})
    recovered = asyncio.run(service.get_all_exercises())

    assert isinstance(failed, Err)
    assert failed.error.status_code == 503
    assert isinstance(recovered, Ok)
    assert len(recovered.value) == 1


def test_search_exercises(container, upstream, make_exercise) -> None:
    upstream.json(
        f"{EXERCISES_PATH}/search",
        {"success": True, "data": [make_exercise("c1", "Cable Curl", ["upper arms"])]},
    )

    result = asyncio.run(container.exercise_service.search_exercises("curl"))

    assert isinstance(result, Ok)
    assert result.value[0].category == ExerciseCategory.PULL
    assert upstream.requests[0].url.params["q"] == "curl"
    assert upstream.requests[0].url.params["limit"] == "50"


def test_search_exercises_requires_query(container, upstream) -> None:
    result = asyncio.run(container.exercise_service.search_exercises(""))

    assert isinstance(result, Err)
    assert result.error.kind == ErrorKind.INVALID_INPUT
    assert upstream.requests == []


def test_filter_sends_only_given_filters(container, upstream) -> None:
    upstream.json(f"{EXERCISES_PATH}/filter", {"success": True, "data": []})

    result = asyncio.run(
        container.exercise_service.filter_exercises(
            equipment="dumbbell", body_part="", target_muscle="biceps"
        )
    )

    assert result == Ok([])
    params = upstream.requests[0].url.params
    assert params["equipment"] == "dumbbell"
    assert params["targetMuscle"] == "biceps"
    assert "bodyPart" not in params
    assert params["limit"] == "100"


def test_get_exercise_by_id(container, upstream, make_exercise) -> None:
    upstream.json(
        f"{EXERCISES_PATH}/trmte8s", {"success": True, "data": make_exercise()}
    )
    upstream.json(f"{EXERCISES_PATH}/missing", {"success": False, "data": None})

    found = asyncio.run(container.exercise_service.get_exercise_by_id("trmte8s"))
    missing = asyncio.run(container.exercise_service.get_exercise_by_id("missing"))

    assert isinstance(found, Ok)
    assert found.value is not None
    assert found.value.form_analysis_url == (
        "/fitness/form-analysis/barbell-bench-press?id=trmte8s"
    )
    assert missing == Ok(None)


def test_exercises_by_dimension(container, upstream, make_exercise) -> None:
    upstream.json(
        "/api/v1/bodyparts/waist/exercises",
        {"success": True, "data": [make_exercise("w1", "Crunch", ["waist"])]},
    )
    upstream.json("/api/v1/equipments/barbell/exercises", {"data": []})
    upstream.json("/api/v1/muscles/biceps/exercises", {"data": []})
    service = container.exercise_service

    by_body_part = asyncio.run(service.get_exercises_by_body_part("waist"))
    by_equipment = asyncio.run(service.get_exercises_by_equipment("barbell"))
    by_muscle = asyncio.run(service.get_exercises_by_muscle("biceps"))

    assert isinstance(by_body_part, Ok)
    assert by_body_part.value[0].category == ExerciseCategory.CORE
    assert by_equipment == Ok([])
    assert by_muscle == Ok([])


def test_dimension_values_accept_strings_and_objects(container, upstream) -> None:
    upstream.json("/api/v1/bodyparts", {"data": ["chest", {"name": "waist"}, 3]})
    upstream.json("/api/v1/equipments", {"data": [{"name": "barbell"}]})
    upstream.json("/api/v1/muscles", {"data": "not a list"})
    service = container.exercise_service

    assert asyncio.run(service.list_body_parts()) == Ok(["chest", "waist"])
    assert asyncio.run(service.list_equipments()) == Ok(["barbell"])
    assert asyncio.run(service.list_muscles()) == Ok([])
