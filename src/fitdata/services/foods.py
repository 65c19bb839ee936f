"""Food search across Open Food Facts and USDA, plus barcode lookup."""

import asyncio
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from itertools import zip_longest

from fitdata.adapters.openfoodfacts_client import OpenFoodFactsClient
from fitdata.domain.foods import CanonicalFood, FoodSource
from fitdata.domain.results import Err, Ok, Result
from fitdata.services.cancellation import CancelToken
from fitdata.services.transforms import transform_open_food_facts_product
from fitdata.services.upstream import call_upstream, invalid_input
from fitdata.services.usda import UsdaService

PROVIDER = "Open Food Facts"
DEFAULT_LIMIT = 20
MIN_RELEVANCE = 5
OFF_LONG_NAME_WORDS = 8
USDA_LONG_NAME_WORDS = 6
SIMPLE_NAME_WORDS = 3
BARCODE_PATTERN = re.compile(r"[0-9]+")

_NON_LATIN = re.compile(
    "[\u4e00-\u9fff\u3040-\u309f\u30a0-\u30ff\uac00-\ud7af\u0600-\u06ff\u0400-\u04ff]"
)
_NUTRITION_KEYS = (
    "proteins_100g",
    "carbohydrates_100g",
    "fat_100g",
    "energy-kcal_100g",
    "energy_100g",
)
_PROCESSED_KEYWORDS = (
    "spread",
    "dip",
    "sauce",
    "dressing",
    "mix",
    "prepared",
    "frozen meal",
    "tv dinner",
    "baby food",
    "infant formula",
    "dietary supplement",
    "protein powder",
    "shake mix",
)
_EXCLUDED_BRANDS = ("sidi ali", "sidi-ali")

_logger = logging.getLogger(__name__)


def is_valid_barcode(barcode: str | None) -> bool:
    """Return True for a digits-only barcode."""
    return bool(barcode) and BARCODE_PATTERN.fullmatch(barcode) is not None


def usda_relevance_score(query: str, name: str) -> float:
    """Score a USDA description; favours simple whole foods over prepared ones."""
    query_lower = query.strip().lower()
    name_lower = name.lower()
    words = query_lower.split(" ")

    score = 0.0
    if name_lower == query_lower:
        score += 100
    if name_lower.startswith(query_lower):
        score += 50
    matched = sum(1 for word in words if word in name_lower)
    score += matched / len(words) * 30
    if any(
        keyword in name_lower and keyword not in query_lower
        for keyword in _PROCESSED_KEYWORDS
    ):
        score -= 60
    word_count = len(name_lower.split(" "))
    if "," not in name_lower and word_count <= SIMPLE_NAME_WORDS:
        score += 10
    if word_count > USDA_LONG_NAME_WORDS:
        score -= 15
    return score


def off_relevance_score(query: str, name: str, brand: str = "") -> float:
    """Score a branded product name and brand against a free-text query."""
    query_lower = query.strip().lower()
    name_lower = name.lower()
    words = [word for word in query_lower.split() if len(word) > 2]

    score = 0.0
    if name_lower == query_lower:
        score += 100
    if name_lower.startswith(query_lower):
        score += 50
    if words:
        matched = sum(1 for word in words if word in name_lower)
        score += matched / len(words) * 40
    if query_lower in name_lower:
        score += 30
    brand_lower = brand.lower()
    if brand_lower and any(word in brand_lower for word in words):
        score += 20
    if len(name_lower.split()) > OFF_LONG_NAME_WORDS:
        score -= 10
    return score


def _usda_score(query: str, food: CanonicalFood) -> float:
    return usda_relevance_score(query, food.name)


def _off_score(query: str, food: CanonicalFood) -> float:
    return off_relevance_score(query, food.name, food.brand)


def rank_foods(
    query: str,
    foods: list[CanonicalFood],
    limit: int,
    score: Callable[[str, CanonicalFood], float],
) -> list[CanonicalFood]:
    """Drop weak matches and order the rest by relevance."""
    scored = [(score(query, food), food) for food in foods]
    kept = [item for item in scored if item[0] > MIN_RELEVANCE]
    kept.sort(key=lambda item: item[0], reverse=True)
    return [food for _, food in kept[:limit]]


def deduplicate_foods(foods: list[CanonicalFood]) -> list[CanonicalFood]:
    """Keep the first food for each (name, brand) pair."""
    seen: set[tuple[str, str]] = set()
    unique: list[CanonicalFood] = []
    for food in foods:
        key = (food.name.lower(), food.brand.lower())
        if key in seen:
            continue
        seen.add(key)
        unique.append(food)
    return unique


def interleave(*groups: list[CanonicalFood]) -> list[CanonicalFood]:
    """Alternate between result groups so every source shows up early."""
    return [
        food for row in zip_longest(*groups) for food in row if food is not None
    ]


def merge_by_source(
    branded: list[CanonicalFood], usda: list[CanonicalFood]
) -> list[CanonicalFood]:
    """Drop duplicates across both lists, then alternate branded and USDA foods."""
    unique = deduplicate_foods([*branded, *usda])
    return interleave(
        [food for food in unique if food.source == FoodSource.OPEN_FOOD_FACTS],
        [food for food in unique if food.source == FoodSource.USDA],
    )


def _usable_product(product: object) -> bool:
    if not isinstance(product, dict):
        return False
    code = product.get("code")
    if code is None or not str(code).strip():
        return False
    name = product.get("product_name")
    nutriments = product.get("nutriments")
    if not isinstance(name, str) or not name.strip():
        return False
    if not isinstance(nutriments, dict):
        return False
    if _NON_LATIN.search(name):
        return False
    brands = product.get("brands")
    if isinstance(brands, str) and any(
        excluded in brands.lower() for excluded in _EXCLUDED_BRANDS
    ):
        return False
    return any(nutriments.get(key) is not None for key in _NUTRITION_KEYS)


@dataclass
class FoodSearchService:
    """Combines branded (Open Food Facts) and whole-food (USDA) results."""

    off_client: OpenFoodFactsClient
    usda_service: UsdaService

    async def get_food_by_barcode(
        self, barcode: str, *, cancel: CancelToken | None = None
    ) -> Result[CanonicalFood | None]:
        """Look up a packaged product; ``Ok(None)`` when it is unknown."""
        if not is_valid_barcode(barcode):
            return invalid_input(PROVIDER, "Invalid barcode format")
        result = await call_upstream(
            PROVIDER, f"barcode:{barcode}", self.off_client.get_product(barcode), cancel
        )
        if isinstance(result, Err):
            return result
        product = result.value.get("product")
        if result.value.get("status") != 1 or not isinstance(product, dict):
            _logger.info("No Open Food Facts product for barcode %s", barcode)
            return Ok(None)
        if not product.get("code"):
            product = {**product, "code": barcode}
        return Ok(transform_open_food_facts_product(product))

    async def search_open_food_facts(
        self,
        query: str,
        *,
        limit: int = DEFAULT_LIMIT,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalFood]]:
        """Search branded products, keeping relevant ones with nutrition data."""
        if not query or not query.strip():
            return invalid_input(PROVIDER, "Query parameter is required")
        result = await call_upstream(
            PROVIDER,
            "search",
            self.off_client.search_products(query.strip(), page_size=limit * 5),
            cancel,
        )
        if isinstance(result, Err):
            return result
        products = result.value.get("products") or []
        if not isinstance(products, list):
            return Ok([])
        foods = [
            transform_open_food_facts_product(product)
            for product in products
            if _usable_product(product)
        ]
        return Ok(rank_foods(query, foods, limit, _off_score))

    async def search_foods(
        self,
        query: str,
        *,
        limit: int = DEFAULT_LIMIT,
        cancel: CancelToken | None = None,
    ) -> Result[list[CanonicalFood]]:
        """Search both providers; fails only when every provider failed."""
        if not query or not query.strip():
            return invalid_input(PROVIDER, "Query parameter is required")
        off_result, usda_result = await asyncio.gather(
            self.search_open_food_facts(query, limit=limit, cancel=cancel),
            self.usda_service.search_foods(
                query, limit=limit * 2, page_size=limit * 2, cancel=cancel
            ),
        )
        if isinstance(off_result, Err) and isinstance(usda_result, Err):
            return off_result
        groups: list[list[CanonicalFood]] = []
        for result in (off_result, usda_result):
            if isinstance(result, Err):
                _logger.warning(
                    "%s search skipped: %s", result.error.provider, result.error.message
                )
                groups.append([])
            else:
                groups.append(result.value)
        branded, usda = groups
        usda = rank_foods(query, usda, limit, _usda_score)
        unique = merge_by_source(branded, usda)
        _logger.info(
            "Food search %r: %s branded, %s USDA", query, len(branded), len(usda)
        )
        return Ok(unique[:limit])
