"""Canonical food records shared by every nutrition provider."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNKNOWN_FOOD_NAME = "Unknown Food"
DEFAULT_SERVING_GRAMS = 100.0


class FoodSource(StrEnum):
    """Upstream provider a food record came from."""

    USDA = "usda"
    OPEN_FOOD_FACTS = "openfoodfacts"


class FoodType(StrEnum):
    """Physical form, used by clients to pick g or ml."""

    LIQUID = "liquid"
    SOLID = "solid"


class CanonicalFood(BaseModel):
    """Normalized nutrition record, per serving label, independent of provider.

    Nutrient fields are always present. A nutrient the provider did not report
    is stored as zero, so zero does not necessarily mean a measured zero.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    name: str = UNKNOWN_FOOD_NAME
    brand: str
    source: FoodSource
    fdc_id: int | None = None
    data_type: str | None = None
    serving_size: str = "100g"
    serving_grams: float = DEFAULT_SERVING_GRAMS
    serving_unit: str | None = None
    food_type: FoodType | None = None
    calories: int = Field(default=0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)
    saturated_fat: float = Field(default=0.0, ge=0)
    sodium: int = Field(default=0, ge=0)
    cholesterol: int = Field(default=0, ge=0)
    ingredients: str = ""
    category: str = ""
    publication_date: str | None = None
