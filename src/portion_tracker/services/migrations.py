"""Read-time migration of stored documents to the current schema.

Every function here is pure and idempotent: feeding a current-schema document
back in returns an equivalent document. Migration only renames fields, fills
in new fields and drops obsolete ones. Numeric values are carried over as-is,
so a legacy ``wholeGrains`` count of 3 becomes a ``healthy_carbs`` amount of 3.

Shape errors raise ``ValueError`` and are handled at the store boundary.
"""

import logging
from datetime import UTC, datetime

from portion_tracker.domain.portions import (
    SERVING_CATEGORIES,
    FoodCategory,
    ServingSize,
    Sex,
)
from portion_tracker.domain.schema import (
    CURRENT_SCHEMA,
    SCHEMA_GENERATIONS,
    current_category_name,
    generation_for_portions,
)
from portion_tracker.services.brackets import classify_bracket

_logger = logging.getLogger(__name__)

_LEGACY_SEX_NAMES = {"prefer-not-to-say": Sex.FEMALE.value}


def daily_record_version(document: dict[str, object]) -> int:
    """Return the schema version a daily record document was written with."""
    version = document.get("schema_version")
    if version is not None:
        return _known_version(version)
    if "servings" in document:
        return CURRENT_SCHEMA.version
    portions = document.get("portions")
    if isinstance(portions, dict):
        return generation_for_portions(portions).version
    raise ValueError("Daily record document has neither servings nor portions")


def profile_version(document: dict[str, object]) -> int:
    """Return the schema version a profile document was written with."""
    version = document.get("schema_version")
    if version is not None:
        return _known_version(version)
    targets = document.get("targets")
    if isinstance(targets, dict) and "wholeGrains" in targets:
        return 1
    return 2


def migrate_daily_record(document: object) -> dict[str, object]:
    """Return the daily record document in the current serving-model shape."""
    if not isinstance(document, dict):
        raise ValueError("Daily record document must be a JSON object")
    version = daily_record_version(document)
    if version == CURRENT_SCHEMA.version:
        return dict(document, schema_version=CURRENT_SCHEMA.version)

    date = document.get("date")
    if not isinstance(date, str):
        raise ValueError("Legacy daily record is missing its date")
    portions = document.get("portions")
    if not isinstance(portions, dict):
        raise ValueError(f"Legacy daily record {date} has no portions object")
    servings: dict[str, list[dict[str, object]]] = {
        category.value: [] for category in SERVING_CATEGORIES
    }
    water = 0
    for name, value in portions.items():
        category_name = current_category_name(name)
        if category_name is None:
            _logger.info("Dropping obsolete category %s from %s", name, date)
            continue
        amount = _non_negative_amount(value)
        if category_name == FoodCategory.WATER.value:
            water = int(amount)
        else:
            servings[category_name] = _entries_for_count(amount)
    return {
        "schema_version": CURRENT_SCHEMA.version,
        "date": date,
        "servings": servings,
        "water": water,
        "exercise": bool(document.get("exercise", False)),
    }


def migrate_profile(document: object) -> dict[str, object]:
    """Return the profile document in the current shape."""
    if not isinstance(document, dict):
        raise ValueError("Profile document must be a JSON object")
    if profile_version(document) == CURRENT_SCHEMA.version:
        return dict(document)

    raw_targets = document.get("targets")
    if not isinstance(raw_targets, dict):
        raise ValueError("Legacy profile is missing its targets")
    targets = {category.value: 0 for category in FoodCategory}
    for name, value in raw_targets.items():
        category_name = current_category_name(name)
        if category_name is not None:
            targets[category_name] = int(_non_negative_amount(value))

    raw_sex = str(document.get("sex", ""))
    sex = Sex(_LEGACY_SEX_NAMES.get(raw_sex, raw_sex))
    current_weight = _positive_number(document.get("currentWeight"), "currentWeight")
    goal_weight = document.get("goalWeight")
    if not isinstance(goal_weight, int | float) or goal_weight <= 0:
        goal_weight = None
    alcohol_servings = document.get("alcoholGoal")
    if not isinstance(alcohol_servings, int | float):
        alcohol_servings = targets[FoodCategory.ALCOHOL.value]
    alcohol_servings = int(_non_negative_amount(alcohol_servings))

    return {
        "schema_version": CURRENT_SCHEMA.version,
        "sex": sex.value,
        "current_weight": current_weight,
        "goal_weight": goal_weight,
        "goal": document.get("goal"),
        "alcohol_opt_in": alcohol_servings > 0,
        "alcohol_servings": alcohol_servings,
        "size_category": classify_bracket(sex, current_weight).value,
        "targets": targets,
    }


def migrate_weight_entries(document: object) -> list[dict[str, object]]:
    """Return weight entries unique per date, newest timestamp first."""
    if not isinstance(document, list):
        raise ValueError("Weight entries document must be a JSON array")
    by_date: dict[str, dict[str, object]] = {}
    for raw in document:
        if not isinstance(raw, dict) or not isinstance(raw.get("date"), str):
            _logger.warning("Skipping malformed weight entry: %r", raw)
            continue
        entry = dict(raw)
        if not isinstance(entry.get("timestamp"), int | float):
            try:
                entry["timestamp"] = _midnight_timestamp(entry["date"])
            except ValueError:
                _logger.warning("Skipping weight entry with bad date: %r", raw)
                continue
        entry["timestamp"] = int(entry["timestamp"])
        existing = by_date.get(entry["date"])
        if existing is None or entry["timestamp"] >= existing["timestamp"]:
            by_date[entry["date"]] = entry
    return sorted(by_date.values(), key=lambda item: item["timestamp"], reverse=True)


def _known_version(version: object) -> int:
    if (
        isinstance(version, bool)
        or not isinstance(version, int)
        or version not in SCHEMA_GENERATIONS
    ):
        raise ValueError(f"Unknown schema version: {version!r}")
    return version


def _entries_for_count(amount: float) -> list[dict[str, object]]:
    whole = int(amount)
    entries: list[dict[str, object]] = [
        {"size": ServingSize.MEDIUM.value, "units": 1.0} for _ in range(whole)
    ]
    remainder = amount - whole
    if remainder > 0:
        entries.append({"size": ServingSize.MEDIUM.value, "units": remainder})
    return entries


def _non_negative_amount(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError(f"Expected a number, got {value!r}")
    return max(0.0, float(value))


def _positive_number(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
        raise ValueError(f"{field_name} must be a positive number")
    return float(value)


def _midnight_timestamp(date: str) -> int:
    day = datetime.strptime(date, "%Y-%m-%d").replace(tzinfo=UTC)
    return int(day.timestamp() * 1000)
