"""Domain models for portion targets and daily tracking."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class Sex(Enum):
    """Biological sex used to select baseline targets."""

    MALE = "male"
    FEMALE = "female"


class Goal(Enum):
    """Weight-management goal."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    BUILD = "build"


class Bracket(Enum):
    """Coarse body-size classification."""

    SMALL = "S"
    MEDIUM = "M"
    LARGE = "L"


class ServingSize(Enum):
    """Size class picked when logging a serving."""

    SMALL = "S"
    MEDIUM = "M"
    LARGE = "L"


class FoodCategory(Enum):
    """Food categories of the current schema generation."""

    PROTEIN = "protein"
    VEGGIES = "veggies"
    FRUIT = "fruit"
    HEALTHY_CARBS = "healthy_carbs"
    LEGUMES = "legumes"
    NUTS_SEEDS = "nuts_seeds"
    FATS = "fats"
    DAIRY = "dairy"
    WATER = "water"
    ALCOHOL = "alcohol"


SERVING_CATEGORIES: tuple[FoodCategory, ...] = tuple(
    category for category in FoodCategory if category is not FoodCategory.WATER
)


@dataclass(frozen=True)
class TargetSet:
    """Daily portion targets covering every food category."""

    values: Mapping[FoodCategory, int]

    def __post_init__(self) -> None:
        missing = sorted(c.value for c in set(FoodCategory) - set(self.values))
        extra = sorted(str(c) for c in set(self.values) - set(FoodCategory))
        if missing or extra:
            raise ValueError(
                f"Target set must cover every category "
                f"(missing={missing}, extra={extra})"
            )
        for category, value in self.values.items():
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(
                    f"Target for {category.value} must be a non-negative integer"
                )
        object.__setattr__(self, "values", dict(self.values))

    def __getitem__(self, category: FoodCategory) -> int:
        return self.values[category]

    @classmethod
    def zeros(cls) -> "TargetSet":
        """Return a target set with every category at zero."""
        return cls({category: 0 for category in FoodCategory})

    @classmethod
    def from_dict(cls, raw: Mapping[str, int]) -> "TargetSet":
        """Build a target set from category names."""
        return cls({FoodCategory(name): value for name, value in raw.items()})

    def replace(self, updates: Mapping[FoodCategory, int]) -> "TargetSet":
        """Return a copy with some categories replaced."""
        merged = dict(self.values)
        merged.update(updates)
        return TargetSet(merged)

    def total(self) -> int:
        """Return the sum of all targets."""
        return sum(self.values.values())

    def as_dict(self) -> dict[str, int]:
        """Return targets keyed by category name, in enumeration order."""
        return {category.value: self.values[category] for category in FoodCategory}


@dataclass(frozen=True)
class ServingEntry:
    """Single logged serving with its precomputed portion-unit weight."""

    size: ServingSize
    units: float


@dataclass(frozen=True)
class DailyRecord:
    """Everything logged for one calendar date."""

    date: str
    servings: Mapping[FoodCategory, tuple[ServingEntry, ...]] = field(
        default_factory=dict
    )
    water: int = 0
    exercise: bool = False

    def __post_init__(self) -> None:
        if self.water < 0:
            raise ValueError("Water count cannot be negative")
        extra = sorted(str(c) for c in set(self.servings) - set(SERVING_CATEGORIES))
        if extra:
            raise ValueError(f"Servings are not tracked for {extra}")
        normalized = {
            category: tuple(self.servings.get(category, ()))
            for category in SERVING_CATEGORIES
        }
        object.__setattr__(self, "servings", normalized)

    @classmethod
    def empty(cls, date: str) -> "DailyRecord":
        """Return the zero-filled record for a date."""
        return cls(date=date)

    def amounts(self) -> dict[FoodCategory, float]:
        """Return the logged amount per category in portion units."""
        amounts: dict[FoodCategory, float] = {
            category: sum(entry.units for entry in self.servings[category])
            for category in SERVING_CATEGORIES
        }
        amounts[FoodCategory.WATER] = float(self.water)
        return amounts

    def with_servings(
        self, category: FoodCategory, entries: tuple[ServingEntry, ...]
    ) -> "DailyRecord":
        """Return a copy with one category's servings replaced."""
        servings = dict(self.servings)
        servings[category] = entries
        return DailyRecord(
            date=self.date, servings=servings, water=self.water, exercise=self.exercise
        )

    def with_water(self, water: int) -> "DailyRecord":
        """Return a copy with the water count replaced."""
        return DailyRecord(
            date=self.date,
            servings=self.servings,
            water=max(0, water),
            exercise=self.exercise,
        )

    def with_exercise(self, exercise: bool) -> "DailyRecord":
        """Return a copy with the exercise flag replaced."""
        return DailyRecord(
            date=self.date, servings=self.servings, water=self.water, exercise=exercise
        )


@dataclass(frozen=True)
class WeightEntry:
    """Body weight logged for a date."""

    date: str
    weight: float
    timestamp: int


@dataclass(frozen=True)
class Profile:
    """The single device-local user profile."""

    sex: Sex
    current_weight: float
    goal: Goal
    alcohol_opt_in: bool
    alcohol_servings: int
    size_category: Bracket
    targets: TargetSet
    goal_weight: float | None = None
