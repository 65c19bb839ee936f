"""CORS proxy endpoints in front of Open Food Facts and USDA."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from fitdata.adapters.openfoodfacts_client import DEFAULT_SEARCH_PAGE_SIZE
from fitdata.adapters.usda_client import DEFAULT_PAGE_SIZE, build_search_payload
from fitdata.services.foods import is_valid_barcode

if TYPE_CHECKING:
    from fitdata.containers import AppContainer

router = APIRouter(prefix="/api/food", tags=["proxy"])

_logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200
_HANDLED_METHODS = [
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "OPTIONS",
    "TRACE",
    "CONNECT",
]

SEARCH_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Content-Type": "application/json",
}

# Extra permissive for mobile WebView clients.
BARCODE_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": (
        "X-Requested-With, Content-Type, Accept, Authorization"
    ),
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Max-Age": "86400",
    "Content-Type": "application/json",
    "Cache-Control": "no-cache, no-store, must-revalidate",
}


def _json(status_code: int, content: object, headers: dict[str, str]) -> Response:
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _preflight_or_reject(request: Request, headers: dict[str, str]) -> Response | None:
    """Answer CORS preflight and non-GET methods; None means carry on."""
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=headers)
    if request.method != "GET":
        return _json(
            status.HTTP_405_METHOD_NOT_ALLOWED,
            {"error": "Method not allowed"},
            headers,
        )
    return None


def parse_page_size(raw: str | None, default: int) -> int:
    """Parse a pageSize query value, falling back to ``default``."""
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    return min(value, MAX_PAGE_SIZE)


def _upstream_failure(
    provider: str, exc: httpx.HTTPStatusError, headers: dict[str, str]
) -> Response:
    status_code = exc.response.status_code
    return _json(
        status_code,
        {"error": f"Failed to fetch from {provider}", "status": status_code},
        headers,
    )


def _internal_error(exc: Exception, headers: dict[str, str]) -> Response:
    return _json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"error": "Internal server error", "message": str(exc)},
        headers,
    )


@router.api_route("/barcode/{barcode:path}", methods=_HANDLED_METHODS)
async def barcode_lookup(barcode: str, request: Request) -> Response:
    """Relay a barcode lookup to Open Food Facts and return its JSON as is."""
    early = _preflight_or_reject(request, BARCODE_HEADERS)
    if early is not None:
        return early
    if not barcode:
        return _json(
            status.HTTP_400_BAD_REQUEST,
            {"error": "Barcode parameter is required"},
            BARCODE_HEADERS,
        )
    if not is_valid_barcode(barcode):
        return _json(
            status.HTTP_400_BAD_REQUEST,
            {"error": "Invalid barcode format"},
            BARCODE_HEADERS,
        )

    container: AppContainer = request.app.state.container
    try:
        _logger.info("Fetching barcode %s", barcode)
        data = await container.off_client.get_product(barcode)
        _logger.info("Barcode %s found, status %s", barcode, data.get("status"))
    except httpx.HTTPStatusError as exc:
        _logger.error("Open Food Facts API error: %s", exc.response.status_code)
        return _upstream_failure("Open Food Facts", exc, BARCODE_HEADERS)
    except Exception as exc:
        _logger.exception("Barcode lookup failed")
        return _internal_error(exc, BARCODE_HEADERS)

    return _json(status.HTTP_200_OK, data, BARCODE_HEADERS)


@router.api_route("/search-openfoodfacts", methods=_HANDLED_METHODS)
async def search_open_food_facts(request: Request) -> Response:
    """Relay a text search to Open Food Facts, English-tagged products only."""
    early = _preflight_or_reject(request, SEARCH_HEADERS)
    if early is not None:
        return early
    query = request.query_params.get("query")
    if not query:
        return _json(
            status.HTTP_400_BAD_REQUEST,
            {"error": "Query parameter is required"},
            SEARCH_HEADERS,
        )
    page_size = parse_page_size(
        request.query_params.get("pageSize"), DEFAULT_SEARCH_PAGE_SIZE
    )

    container: AppContainer = request.app.state.container
    try:
        _logger.info("Searching Open Food Facts for %r", query)
        data = await container.off_client.search_products(query, page_size=page_size)
        products = data.get("products") or []
        _logger.info("Open Food Facts search found %s results", len(products))
    except httpx.HTTPStatusError as exc:
        _logger.error("Open Food Facts API error: %s", exc.response.status_code)
        return _upstream_failure("Open Food Facts", exc, SEARCH_HEADERS)
    except Exception as exc:
        _logger.exception("Open Food Facts search failed")
        return _internal_error(exc, SEARCH_HEADERS)

    return _json(status.HTTP_200_OK, data, SEARCH_HEADERS)


@router.api_route("/search", methods=_HANDLED_METHODS)
async def search_usda(request: Request) -> Response:
    """Relay a search to USDA FoodData Central with the server-held API key."""
    early = _preflight_or_reject(request, SEARCH_HEADERS)
    if early is not None:
        return early
    query = request.query_params.get("query")
    if not query:
        return _json(
            status.HTTP_400_BAD_REQUEST,
            {"error": "Query parameter is required"},
            SEARCH_HEADERS,
        )
    page_size = parse_page_size(request.query_params.get("pageSize"), DEFAULT_PAGE_SIZE)

    container: AppContainer = request.app.state.container
    try:
        _logger.info("Searching USDA for %r", query)
        data = await container.usda_client.search_foods(
            build_search_payload(query, page_size=page_size)
        )
        foods = data.get("foods") or []
        _logger.info("USDA search found %s results", len(foods))
    except httpx.HTTPStatusError as exc:
        _logger.error(
            "USDA API error %s: %s", exc.response.status_code, exc.response.text
        )
        return _upstream_failure("USDA FoodData Central", exc, SEARCH_HEADERS)
    except Exception as exc:
        _logger.exception("USDA search failed")
        return _internal_error(exc, SEARCH_HEADERS)

    return _json(status.HTTP_200_OK, data, SEARCH_HEADERS)
