"""Pure mappings from provider payloads to canonical records."""

import math
import re
from urllib.parse import quote

from fitdata.domain.exercises import CanonicalExercise, ExerciseCategory
from fitdata.domain.foods import (
    DEFAULT_SERVING_GRAMS,
    UNKNOWN_FOOD_NAME,
    CanonicalFood,
    FoodSource,
    FoodType,
)

USDA_BRAND = "USDA"
OPEN_FOOD_FACTS_BRAND = "Open Food Facts"
FALLBACK_SLUG = "exercise"
KJ_PER_KCAL = 4.184
# Macros above this per 100 g point at a decimal-place entry error upstream.
MAX_PLAUSIBLE_MACROS_G = 110
CORRUPTED_DATA_FACTOR = 10

_BODY_PART_CATEGORIES: dict[str, ExerciseCategory] = {
    "chest": ExerciseCategory.PUSH,
    "shoulders": ExerciseCategory.PUSH,
    "back": ExerciseCategory.PULL,
    "arms": ExerciseCategory.PULL,
    "upper arms": ExerciseCategory.PULL,
    "lower arms": ExerciseCategory.PULL,
    "legs": ExerciseCategory.LEGS,
    "upper legs": ExerciseCategory.LEGS,
    "lower legs": ExerciseCategory.LEGS,
    "waist": ExerciseCategory.CORE,
    "cardio": ExerciseCategory.CARDIO,
}

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")
_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:[.,]\d+)?)")
_UNIT_WORD = re.compile(r"[a-z]+", re.IGNORECASE)

_LIQUID_CATEGORY_TAGS = (
    "en:beverages",
    "en:drinks",
    "en:juices",
    "en:milks",
    "en:waters",
    "en:sodas",
    "en:honeys",
)
_LIQUID_NAME_KEYWORDS = (
    "juice",
    "drink",
    "beverage",
    "water",
    "soda",
    "soup",
    "broth",
    "canneberge",
    "cranberry",
    "honey",
    "miel",
    "cream",
    "cr\u00e8me",
    "ketchup",
    " 2l",
    " 1l",
    " ml",
)

# Ordered: a nutrient entry fills the first field it matches.
_USDA_NUTRIENT_FIELDS: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("calories", (("energy", "kcal"),)),
    ("protein", (("protein",),)),
    ("carbs", (("carbohydrate",),)),
    ("fat", (("total lipid",), ("fat, total",))),
    ("fiber", (("fiber",),)),
    ("sugar", (("sugars, total",), ("total sugars",))),
    ("sodium", (("sodium",),)),
    ("cholesterol", (("cholesterol",),)),
    ("saturated_fat", (("fatty acids, total saturated",),)),
)

_INTEGER_FIELDS = {"calories", "sodium", "cholesterol"}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def round_one_decimal(value: float) -> float:
    """Round to one decimal place, halves up."""
    return math.floor(value * 10 + 0.5) / 10


def _as_amount(raw: object) -> float:
    """Coerce an upstream nutrient amount to a non-negative float."""
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, int | float):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return value


def _as_text(raw: object) -> str:
    return raw if isinstance(raw, str) else ""


def _as_str_list(raw: object) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str)]


def _format_amount(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _finish_nutrients(values: dict[str, float]) -> dict[str, float | int]:
    """Apply the canonical rounding to every nutrient field, zero-filled."""
    finished: dict[str, float | int] = {}
    for field, _ in _USDA_NUTRIENT_FIELDS:
        amount = values.get(field, 0.0)
        if field in _INTEGER_FIELDS:
            finished[field] = round_half_up(amount)
        else:
            finished[field] = round_one_decimal(amount)
    return finished


def _usda_nutrient_parts(entry: dict[str, object]) -> tuple[str, str, object]:
    """Return (name, unit, amount) for search- and detail-shaped entries."""
    nested = entry.get("nutrient")
    nested = nested if isinstance(nested, dict) else {}
    name = _as_text(entry.get("nutrientName")) or _as_text(nested.get("name"))
    unit = _as_text(entry.get("unitName")) or _as_text(nested.get("unitName"))
    amount = entry.get("value")
    if amount is None:
        amount = entry.get("amount")
    return name.lower(), unit.lower(), amount


def extract_usda_nutrients(food_nutrients: object) -> dict[str, float]:
    """Scan a USDA nutrient list into raw per-field amounts."""
    values: dict[str, float] = {}
    if not isinstance(food_nutrients, list):
        return values
    for entry in food_nutrients:
        if not isinstance(entry, dict):
            continue
        name, unit, amount = _usda_nutrient_parts(entry)
        if not name:
            continue
        haystack = f"{name} {unit}"
        for field, patterns in _USDA_NUTRIENT_FIELDS:
            target = haystack if field == "calories" else name
            if any(all(part in target for part in parts) for parts in patterns):
                if field not in values:
                    values[field] = _as_amount(amount)
                break
    return values


def transform_usda_food(record: dict[str, object]) -> CanonicalFood:
    """Map a FoodData Central food (search hit or detail) to a canonical food."""
    nutrients = _finish_nutrients(extract_usda_nutrients(record.get("foodNutrients")))

    serving_size = "100g"
    serving_grams = DEFAULT_SERVING_GRAMS
    size = _as_amount(record.get("servingSize"))
    unit = _as_text(record.get("servingSizeUnit"))
    if size and unit:
        serving_size = f"{_format_amount(size)}{unit}"
        if unit.lower() == "g":
            serving_grams = size

    fdc_id = record.get("fdcId")
    category = record.get("foodCategory")
    if isinstance(category, dict):
        category = category.get("description")
    publication_date = record.get("publicationDate")

    return CanonicalFood(
        id=f"usda_{fdc_id if fdc_id is not None else 'unknown'}",
        fdc_id=fdc_id if isinstance(fdc_id, int) else None,
        name=_as_text(record.get("description")) or UNKNOWN_FOOD_NAME,
        brand=_as_text(record.get("brandOwner")) or USDA_BRAND,
        source=FoodSource.USDA,
        data_type=_as_text(record.get("dataType")) or None,
        serving_size=serving_size,
        serving_grams=serving_grams,
        ingredients=_as_text(record.get("ingredients")),
        category=_as_text(category),
        publication_date=_as_text(publication_date) or None,
        **nutrients,
    )


def open_food_facts_food_type(
    name: str, categories: list[str], serving_label: str
) -> FoodType:
    """Classify a product as liquid from its categories, name or serving text."""
    tags = " ".join(categories).lower()
    if any(tag in tags for tag in _LIQUID_CATEGORY_TAGS):
        return FoodType.LIQUID
    name_lower = name.lower()
    if any(keyword in name_lower for keyword in _LIQUID_NAME_KEYWORDS):
        return FoodType.LIQUID
    if "milk" in name_lower and "cheese" not in name_lower:
        return FoodType.LIQUID
    serving_lower = serving_label.lower()
    if "ml" in serving_lower or "fl oz" in serving_lower:
        return FoodType.LIQUID
    return FoodType.SOLID


def transform_open_food_facts_product(product: dict[str, object]) -> CanonicalFood:
    """Map an Open Food Facts product to a canonical food (per 100 g)."""
    nutriments = product.get("nutriments")
    nutriments = nutriments if isinstance(nutriments, dict) else {}

    protein = _as_amount(nutriments.get("proteins_100g"))
    carbs = _as_amount(nutriments.get("carbohydrates_100g"))
    fat = _as_amount(nutriments.get("fat_100g"))
    factor = (
        CORRUPTED_DATA_FACTOR
        if protein + carbs + fat > MAX_PLAUSIBLE_MACROS_G
        else 1
    )

    calories = _as_amount(nutriments.get("energy-kcal_100g"))
    if not calories:
        calories = _as_amount(nutriments.get("energy_100g")) / KJ_PER_KCAL

    values = {
        "calories": calories / factor,
        "protein": protein / factor,
        "carbs": carbs / factor,
        "fat": fat / factor,
        "fiber": _as_amount(nutriments.get("fiber_100g")) / factor,
        "sugar": _as_amount(nutriments.get("sugars_100g")) / factor,
        "saturated_fat": _as_amount(nutriments.get("saturated-fat_100g")) / factor,
        "sodium": _as_amount(nutriments.get("sodium_100g")) * 1000 / factor,
        "cholesterol": _as_amount(nutriments.get("cholesterol_100g")) * 1000 / factor,
    }

    serving_label = _as_text(product.get("serving_size")).strip()
    serving_grams = DEFAULT_SERVING_GRAMS
    match = _LEADING_NUMBER.match(serving_label)
    if match:
        parsed = float(match.group(1).replace(",", "."))
        if parsed > 0:
            serving_grams = parsed

    categories = _as_str_list(product.get("categories_tags"))
    unit = _UNIT_WORD.search(serving_label)
    name = _as_text(product.get("product_name")).strip() or UNKNOWN_FOOD_NAME
    code = product.get("code")
    return CanonicalFood(
        id=str(code) if code not in (None, "") else "",
        name=name,
        brand=_as_text(product.get("brands")).strip() or OPEN_FOOD_FACTS_BRAND,
        source=FoodSource.OPEN_FOOD_FACTS,
        serving_size=serving_label or "100g",
        serving_grams=serving_grams,
        serving_unit=unit.group(0) if unit else "g",
        food_type=open_food_facts_food_type(name, categories, serving_label),
        ingredients=_as_text(product.get("ingredients_text")),
        category=categories[0] if categories else "",
        **_finish_nutrients(values),
    )


def map_body_part_to_category(body_part: str | None) -> ExerciseCategory:
    """Map an ExerciseDB body part to a training category."""
    if not body_part:
        return ExerciseCategory.FULL_BODY
    return _BODY_PART_CATEGORIES.get(
        body_part.strip().lower(), ExerciseCategory.FULL_BODY
    )


def slugify(name: str) -> str:
    """Build a URL-safe slug; never empty."""
    slug = _SLUG_SEPARATORS.sub("-", name.lower()).strip("-")
    return slug or FALLBACK_SLUG


def form_analysis_url(name: str, exercise_id: str) -> str:
    """Return the in-app form analysis path for an exercise."""
    return f"/fitness/form-analysis/{slugify(name)}?id={quote(exercise_id, safe='')}"


def transform_exercise(record: dict[str, object]) -> CanonicalExercise:
    """Map an ExerciseDB exercise to a canonical exercise."""
    exercise_id = record.get("exerciseId") or record.get("id") or ""
    exercise_id = str(exercise_id)
    name = _as_text(record.get("name"))
    target_muscles = _as_str_list(record.get("targetMuscles"))
    body_parts = _as_str_list(record.get("bodyParts"))
    equipments = _as_str_list(record.get("equipments"))
    gif_url = _as_text(record.get("gifUrl")) or None
    description = ", ".join(target_muscles) or "N/A"

    return CanonicalExercise(
        id=exercise_id,
        name=name,
        description=f"Target: {description}",
        gif_url=gif_url,
        image_url=gif_url,
        target_muscles=target_muscles,
        secondary_muscles=_as_str_list(record.get("secondaryMuscles")),
        body_parts=body_parts,
        equipment=equipments[0] if equipments else "bodyweight",
        category=map_body_part_to_category(body_parts[0] if body_parts else None),
        form_analysis_url=form_analysis_url(name, exercise_id),
    )
