"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

SEARCH_FIELDS = "product_name,brands,nutriments,serving_size,code,languages_codes"
DEFAULT_SEARCH_PAGE_SIZE = 50


def build_search_params(
    query: str, page_size: int = DEFAULT_SEARCH_PAGE_SIZE
) -> dict[str, str | int]:
    """Build query params for a product search limited to English-tagged products."""
    return {
        "search_terms": query,
        "page_size": page_size,
        "fields": SEARCH_FIELDS,
        "tagtype_0": "languages",
        "tag_contains_0": "contains",
        "tag_0": "en",
        "json": 1,
    }


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts lookups."""

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode and return raw API data."""

    async def search_products(
        self, query: str, page_size: int = DEFAULT_SEARCH_PAGE_SIZE
    ) -> dict[str, object]:
        """Search products by text and return raw API data."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    product_url: str
    search_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, product_url: str, search_url: str, user_agent: str, timeout: float = 15
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session.

        Open Food Facts asks every caller to identify itself with a User-Agent.
        """
        return cls(
            product_url=product_url,
            search_url=search_url,
            http_client=httpx.AsyncClient(
                headers={"User-Agent": user_agent}, follow_redirects=True
            ),
            timeout=timeout,
        )

    async def get_product(self, barcode: str) -> dict[str, object]:
        """Fetch a product by barcode."""
        url = f"{self.product_url}/{barcode}.json"
        response = await self.http_client.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    async def search_products(
        self, query: str, page_size: int = DEFAULT_SEARCH_PAGE_SIZE
    ) -> dict[str, object]:
        """Search products by text."""
        response = await self.http_client.get(
            self.search_url,
            params=build_search_params(query, page_size),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
