"""Persisted schema generations for profile and daily record documents."""

from dataclasses import dataclass
from enum import Enum

from portion_tracker.domain.portions import FoodCategory


class AmountModel(Enum):
    """How logged amounts are represented in a daily record document."""

    COUNTS = "counts"
    SERVINGS = "servings"


@dataclass(frozen=True)
class SchemaGeneration:
    """Category set and amount model of one schema generation."""

    version: int
    categories: tuple[str, ...]
    amount_model: AmountModel
    daily_key: str


SCHEMA_V1 = SchemaGeneration(
    version=1,
    categories=(
        "protein",
        "veggies",
        "fruit",
        "wholeGrains",
        "legumes",
        "nutsSeeds",
        "fats",
        "dairy",
        "water",
        "alcohol",
    ),
    amount_model=AmountModel.COUNTS,
    daily_key="daily_",
)

SCHEMA_V2 = SchemaGeneration(
    version=2,
    categories=(
        "protein",
        "veggies",
        "fruit",
        "healthyCarbs",
        "nutsSeeds",
        "fats",
        "dairy",
        "water",
        "alcohol",
    ),
    amount_model=AmountModel.COUNTS,
    daily_key="daily_",
)

SCHEMA_V3 = SchemaGeneration(
    version=3,
    categories=tuple(category.value for category in FoodCategory),
    amount_model=AmountModel.SERVINGS,
    daily_key="servings_",
)

CURRENT_SCHEMA = SCHEMA_V3

SCHEMA_GENERATIONS: dict[int, SchemaGeneration] = {
    generation.version: generation
    for generation in (SCHEMA_V1, SCHEMA_V2, SCHEMA_V3)
}

LEGACY_DAILY_KEY = SCHEMA_V1.daily_key

# Old field name -> current category name. Values are carried over verbatim.
LEGACY_CATEGORY_NAMES: dict[str, str] = {
    "wholeGrains": FoodCategory.HEALTHY_CARBS.value,
    "healthyCarbs": FoodCategory.HEALTHY_CARBS.value,
    "nutsSeeds": FoodCategory.NUTS_SEEDS.value,
}


def current_category_name(name: str) -> str | None:
    """Return the current category name for a stored field, if it still exists."""
    renamed = LEGACY_CATEGORY_NAMES.get(name, name)
    if renamed in CURRENT_SCHEMA.categories:
        return renamed
    return None


def generation_for_portions(portions: dict[str, object]) -> SchemaGeneration:
    """Infer the counts-model generation from a legacy portions mapping."""
    if "wholeGrains" in portions:
        return SCHEMA_V1
    return SCHEMA_V2
