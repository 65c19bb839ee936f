"""USDA FoodData Central lookups returning canonical foods."""

import logging
from dataclasses import dataclass

from fitdata.adapters.usda_client import (
    DEFAULT_PAGE_SIZE,
    NON_BRANDED_DATA_TYPES,
    UsdaClient,
    build_nutrient_search_payload,
    build_search_payload,
)
from fitdata.domain.foods import CanonicalFood
from fitdata.domain.results import Err, ErrorKind, Ok, ProviderError, Result
from fitdata.services.cancellation import CancelToken
from fitdata.services.transforms import transform_usda_food
from fitdata.services.upstream import call_upstream, invalid_input

PROVIDER = "USDA"
DEFAULT_LIMIT = 20

_UNAUTHORIZED = 401
_RATE_LIMITED = 429

_logger = logging.getLogger(__name__)


def _transform_hits(payload: dict[str, object]) -> list[CanonicalFood]:
    foods = payload.get("foods") or []
    if not isinstance(foods, list):
        return []
    return [transform_usda_food(food) for food in foods if isinstance(food, dict)]


def _log_failure_category(result: Err) -> None:
    status_code = result.error.status_code
    if status_code == _UNAUTHORIZED:
        _logger.warning("USDA API: invalid or missing API key")
    elif status_code == _RATE_LIMITED:
        _logger.warning("USDA API: rate limit exceeded, wait before retrying")


@dataclass
class UsdaService:
    """Search and fetch foods from FoodData Central."""

    client: UsdaClient

    async def search_foods(  # noqa: PLR0913
        self,
        query: str,
        *,
        limit: int = DEFAULT_LIMIT,
        data_types: tuple[str, ...] | list[str] | None = NON_BRANDED_DATA_TYPES,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_number: int = 1,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalFood]]:
        """Search whole foods; ``Ok([])`` means the search found nothing."""
        if not query or not query.strip():
            return invalid_input(PROVIDER, "Query parameter is required")
        payload = build_search_payload(
            query.strip(),
            page_size=page_size,
            page_number=page_number,
            data_types=data_types,
        )
        result = await call_upstream(
            PROVIDER, "search", self.client.search_foods(payload), cancel
        )
        if isinstance(result, Err):
            _log_failure_category(result)
            return result
        return Ok(_transform_hits(result.value)[:limit])

    async def get_food_details(
        self, fdc_id: int, *, cancel: CancelToken | None = None
    ) -> Result[CanonicalFood]:
        """Fetch one food with its full nutrient list."""
        result = await call_upstream(
            PROVIDER, f"get_food:{fdc_id}", self.client.get_food(fdc_id), cancel
        )
        if isinstance(result, Err):
            _log_failure_category(result)
            return result
        if "fdcId" not in result.value:
            return Err(
                ProviderError(
                    PROVIDER, ErrorKind.MALFORMED, f"Food {fdc_id} has no fdcId"
                )
            )
        return Ok(transform_usda_food(result.value))

    async def search_by_nutrients(
        self,
        criteria: dict[str, object],
        *,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalFood]]:
        """Find Foundation and SR Legacy foods matching nutrient criteria."""
        if not criteria:
            return invalid_input(PROVIDER, "Nutrient criteria are required")
        payload = build_nutrient_search_payload(criteria)
        result = await call_upstream(
            PROVIDER, "nutrient search", self.client.search_foods(payload), cancel
        )
        if isinstance(result, Err):
            _log_failure_category(result)
            return result
        return Ok(_transform_hits(result.value))

    async def get_food_categories(
        self, *, cancel: CancelToken | None = None
    ) -> Result[list[str]]:
        """Return the distinct food category names FDC reports."""
        result = await call_upstream(
            PROVIDER, "food categories", self.client.list_foods(page_size=1), cancel
        )
        if isinstance(result, Err):
            _log_failure_category(result)
            return result
        raw = result.value.get("foodCategory")
        entries = list(raw) if isinstance(raw, list) else [raw]
        foods = result.value.get("foods")
        if isinstance(foods, list):
            entries.extend(
                food.get("foodCategory") for food in foods if isinstance(food, dict)
            )
        categories: list[str] = []
        for entry in entries:
            if isinstance(entry, dict):
                entry = entry.get("description")
            if isinstance(entry, str) and entry and entry not in categories:
                categories.append(entry)
        return Ok(categories)

    async def check_connection(self) -> bool:
        """Return True when a minimal search succeeds."""
        payload = build_search_payload("apple", page_size=1, data_types=None)
        result = await call_upstream(
            PROVIDER, "connection check", self.client.search_foods(payload)
        )
        return result.is_ok
