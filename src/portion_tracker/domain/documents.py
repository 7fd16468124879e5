"""Pydantic models for documents persisted in the key-value store."""

from pydantic import BaseModel, Field, field_validator

from portion_tracker.domain.portions import (
    SERVING_CATEGORIES,
    Bracket,
    FoodCategory,
    Goal,
    ServingSize,
    Sex,
)
from portion_tracker.domain.schema import CURRENT_SCHEMA

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

_CATEGORY_NAMES = {category.value for category in FoodCategory}
_SERVING_CATEGORY_NAMES = [category.value for category in SERVING_CATEGORIES]


class ServingEntryDocument(BaseModel):
    """Stored serving entry."""

    size: ServingSize
    units: float = Field(ge=0.0)


class DailyRecordDocument(BaseModel):
    """Current-schema daily record document."""

    schema_version: int = CURRENT_SCHEMA.version
    date: str = Field(pattern=DATE_PATTERN)
    servings: dict[str, list[ServingEntryDocument]]
    water: int = Field(default=0, ge=0)
    exercise: bool = False

    @field_validator("servings")
    @classmethod
    def _servings_use_serving_categories(
        cls, value: dict[str, list[ServingEntryDocument]]
    ) -> dict[str, list[ServingEntryDocument]]:
        unknown = set(value) - set(_SERVING_CATEGORY_NAMES)
        if unknown:
            raise ValueError(f"unknown serving categories: {sorted(unknown)}")
        return {name: value.get(name, []) for name in _SERVING_CATEGORY_NAMES}


class ProfileDocument(BaseModel):
    """Current-schema profile document."""

    schema_version: int = CURRENT_SCHEMA.version
    sex: Sex
    current_weight: float = Field(gt=0)
    goal_weight: float | None = Field(default=None, gt=0)
    goal: Goal
    alcohol_opt_in: bool = False
    alcohol_servings: int = Field(default=0, ge=0)
    size_category: Bracket
    targets: dict[str, int]

    @field_validator("targets")
    @classmethod
    def _targets_cover_categories(cls, value: dict[str, int]) -> dict[str, int]:
        if set(value) != _CATEGORY_NAMES:
            raise ValueError("targets must cover every food category")
        if any(amount < 0 for amount in value.values()):
            raise ValueError("targets cannot be negative")
        return value


class WeightEntryDocument(BaseModel):
    """Stored weight entry."""

    date: str = Field(pattern=DATE_PATTERN)
    weight: float = Field(gt=0)
    timestamp: int
