"""Tests for the FoodData Central service."""

import asyncio
import json

import httpx

from fitdata.domain.results import Err, ErrorKind, Ok

USDA_SEARCH_PATH = "/fdc/v1/foods/search"
USDA_LIST_PATH = "/fdc/v1/foods/list"


def test_search_foods_returns_canonical_foods(
    container, upstream, usda_payload
) -> None:
    upstream.json(USDA_SEARCH_PATH, usda_payload)

    result = asyncio.run(container.usda_service.search_foods("chicken breast"))

    assert isinstance(result, Ok)
    first, second = result.value
    assert first.id == "usda_171077"
    assert first.protein == 22.5
    assert first.calories == 120
    assert first.fat == 2.6
    assert second.calories == 0
    assert second.protein == 0.0

    body = json.loads(upstream.requests[0].content.decode())
    assert body["query"] == "chicken breast"
    assert body["pageSize"] == 25
    assert body["sortBy"] == "score"
    assert upstream.requests[0].url.params["api_key"] == "test-key"


def test_search_foods_applies_limit(container, upstream, usda_payload) -> None:
    upstream.json(USDA_SEARCH_PATH, usda_payload)

    result = asyncio.run(container.usda_service.search_foods("chicken", limit=1))

    assert len(result.unwrap_or([])) == 1


def test_search_foods_empty_result_is_ok(container, upstream) -> None:
    upstream.json(USDA_SEARCH_PATH, {"totalHits": 0, "foods": []})

    result = asyncio.run(container.usda_service.search_foods("zzzz"))

    assert result == Ok([])


def test_blank_query_is_rejected_without_a_request(container, upstream) -> None:
    result = asyncio.run(container.usda_service.search_foods("   "))

    assert isinstance(result, Err)
    assert result.error.kind == ErrorKind.INVALID_INPUT
    assert result.error.http_status == 400
    assert upstream.requests == []


def test_rate_limit_status_is_preserved(container, upstream) -> None:
    upstream.json(USDA_SEARCH_PATH, {"error": "OVER_RATE_LIMIT"}, status_code=429)

    result = asyncio.run(container.usda_service.search_foods("rice"))

    assert isinstance(result, Err)
    assert result.error.kind == ErrorKind.UPSTREAM_STATUS
    assert result.error.status_code == 429
    assert result.error.http_status == 429
    assert result.error.message == "USDA API error: 429"


def test_transport_error_is_reported(container, upstream) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    upstream.route(USDA_SEARCH_PATH, handler)

    result = asyncio.run(container.usda_service.search_foods("rice"))

    assert isinstance(result, Err)
    assert result.error.kind == ErrorKind.TRANSPORT
    assert result.error.http_status == 502


def test_get_food_details(container, upstream) -> None:
    upstream.json(
        "/fdc/v1/food/171077",
        {
            "fdcId": 171077,
            "description": "Chicken breast",
            "foodNutrients": [
                {"nutrient": {"name": "Protein", "unitName": "g"}, "amount": 22.5}
            ],
        },
    )

    result = asyncio.run(container.usda_service.get_food_details(171077))

    assert isinstance(result, Ok)
    assert result.value.fdc_id == 171077
    assert result.value.protein == 22.5


def test_get_food_details_without_fdc_id_is_malformed(container, upstream) -> None:
    upstream.json("/fdc/v1/food/5", {"description": "orphan"})

    result = asyncio.run(container.usda_service.get_food_details(5))

    assert isinstance(result, Err)
    assert result.error.kind == ErrorKind.MALFORMED


def test_check_connection(container, upstream) -> None:
    upstream.json(USDA_SEARCH_PATH, {"foods": []})
    assert asyncio.run(container.usda_service.check_connection()) is True

    body = json.loads(upstream.requests[0].content.decode())
    assert body["pageSize"] == 1
    assert "dataType" not in body

    upstream.json(USDA_SEARCH_PATH, {"error": "forbidden"}, status_code=403)
    assert asyncio.run(container.usda_service.check_connection()) is False


def test_search_by_nutrients(container, upstream, usda_payload) -> None:
    upstream.json(USDA_SEARCH_PATH, usda_payload)
    criteria = {"protein": {"min": 20}}

    result = asyncio.run(container.usda_service.search_by_nutrients(criteria))

    assert isinstance(result, Ok)
    assert [food.id for food in result.value] == ["usda_171077", "usda_2646170"]
    body = json.loads(upstream.requests[0].content.decode())
    assert body["nutrients"] == criteria
    assert body["pageSize"] == 50
    assert body["dataType"] == ["Foundation", "SR Legacy"]


def test_search_by_nutrients_requires_criteria(container, upstream) -> None:
    result = asyncio.run(container.usda_service.search_by_nutrients({}))

    assert isinstance(result, Err)
    assert result.error.kind == ErrorKind.INVALID_INPUT
    assert upstream.requests == []


def test_get_food_categories(container, upstream) -> None:
    upstream.json(
        USDA_LIST_PATH,
        [
            {"fdcId": 1, "foodCategory": "Beverages"},
            {"fdcId": 2, "foodCategory": {"description": "Dairy and Egg Products"}},
            {"fdcId": 3, "foodCategory": "Beverages"},
            {"fdcId": 4},
        ],
    )

    result = asyncio.run(container.usda_service.get_food_categories())

    assert result == Ok(["Beverages", "Dairy and Egg Products"])
    assert upstream.requests[0].url.params["pageSize"] == "1"


def test_get_food_categories_reads_object_body(container, upstream) -> None:
    upstream.json(USDA_LIST_PATH, {"foodCategory": ["Legumes"]})

    result = asyncio.run(container.usda_service.get_food_categories())

    assert result == Ok(["Legumes"])


def test_get_food_categories_upstream_error(container, upstream) -> None:
    upstream.json(USDA_LIST_PATH, {"error": "bad key"}, status_code=401)

    result = asyncio.run(container.usda_service.get_food_categories())

    assert isinstance(result, Err)
    assert result.error.status_code == 401
