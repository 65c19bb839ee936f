"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

# Whole-food categories; branded products come from Open Food Facts instead.
NON_BRANDED_DATA_TYPES: tuple[str, ...] = ("Foundation", "SR Legacy", "Survey (FNDDS)")
DEFAULT_PAGE_SIZE = 25
NUTRIENT_SEARCH_DATA_TYPES: tuple[str, ...] = ("Foundation", "SR Legacy")
NUTRIENT_SEARCH_PAGE_SIZE = 50


def build_search_payload(
    query: str,
    page_size: int = DEFAULT_PAGE_SIZE,
    page_number: int = 1,
    data_types: tuple[str, ...] | list[str] | None = NON_BRANDED_DATA_TYPES,
) -> dict[str, object]:
    """Build the JSON body for ``POST /foods/search``."""
    payload: dict[str, object] = {
        "query": query,
        "pageSize": page_size,
        "pageNumber": page_number,
        "sortBy": "score",
        "sortOrder": "desc",
    }
    if data_types:
        payload["dataType"] = list(data_types)
    return payload


def build_nutrient_search_payload(
    criteria: dict[str, object], page_size: int = NUTRIENT_SEARCH_PAGE_SIZE
) -> dict[str, object]:
    """Build a search body that filters whole foods by nutrient criteria."""
    payload = build_search_payload(
        "", page_size=page_size, data_types=NUTRIENT_SEARCH_DATA_TYPES
    )
    payload["nutrients"] = criteria
    return payload


class UsdaClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(self, payload: dict[str, object]) -> dict[str, object]:
        """Run a food search with a prepared request body and return raw data."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id and return raw API data."""

    async def list_foods(self, page_size: int = 1) -> dict[str, object]:
        """List abridged foods as ``{"foods": [...]}``."""


@dataclass
class HttpxUsdaClient(UsdaClient):
    """HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, api_key: str, base_url: str, user_agent: str, timeout: float = 15
    ) -> "HttpxUsdaClient":
        """Create an FDC client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(
                headers={"User-Agent": user_agent}, follow_redirects=True
            ),
            timeout=timeout,
        )

    async def search_foods(self, payload: dict[str, object]) -> dict[str, object]:
        """Search foods with a request body from ``build_search_payload``."""
        url = f"{self.base_url}/foods/search"
        response = await self.http_client.post(
            url,
            params={"api_key": self.api_key},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id."""
        url = f"{self.base_url}/food/{fdc_id}"
        response = await self.http_client.get(
            url,
            params={"api_key": self.api_key},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def list_foods(self, page_size: int = 1) -> dict[str, object]:
        """List abridged foods; the bare JSON array is wrapped as ``foods``."""
        url = f"{self.base_url}/foods/list"
        response = await self.http_client.get(
            url,
            params={"api_key": self.api_key, "pageSize": page_size},
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if isinstance(data, list):
            return {"foods": data}
        return data

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
