"""Baseline daily portion targets by sex, size bracket and goal."""

from portion_tracker.domain.portions import Bracket, FoodCategory, Goal, Sex, TargetSet

# The current table stores pre-goal rows; goal modifiers run in the pipeline.
GOAL_MODIFIERS_BAKED_IN = False

_COLUMNS = (
    FoodCategory.PROTEIN,
    FoodCategory.VEGGIES,
    FoodCategory.FRUIT,
    FoodCategory.HEALTHY_CARBS,
    FoodCategory.LEGUMES,
    FoodCategory.NUTS_SEEDS,
    FoodCategory.FATS,
    FoodCategory.DAIRY,
    FoodCategory.WATER,
    FoodCategory.ALCOHOL,
)

_F, _M = Sex.FEMALE, Sex.MALE
_S, _MD, _L = Bracket.SMALL, Bracket.MEDIUM, Bracket.LARGE
_LOSE, _KEEP, _BUILD = Goal.LOSE, Goal.MAINTAIN, Goal.BUILD

# fmt: off
# protein, veggies, fruit, healthy_carbs, legumes, nuts_seeds, fats, dairy, water, alcohol
BASELINE_ROWS: dict[tuple[Sex, Bracket, Goal], tuple[int, ...]] = {
    (_F, _S, _LOSE):   (3, 4, 2, 2, 1, 1, 2, 1, 8, 0),
    (_F, _S, _KEEP):   (3, 4, 2, 2, 1, 1, 2, 1, 8, 0),
    (_F, _S, _BUILD):  (3, 4, 2, 2, 1, 1, 2, 1, 8, 0),
    (_F, _MD, _LOSE):  (4, 5, 2, 3, 1, 1, 2, 1, 8, 0),
    (_F, _MD, _KEEP):  (4, 5, 2, 3, 1, 1, 2, 1, 8, 0),
    (_F, _MD, _BUILD): (4, 5, 2, 3, 1, 1, 2, 1, 8, 0),
    (_F, _L, _LOSE):   (5, 6, 3, 3, 2, 1, 3, 1, 10, 0),
    (_F, _L, _KEEP):   (5, 6, 3, 3, 2, 1, 3, 1, 10, 0),
    (_F, _L, _BUILD):  (5, 6, 3, 3, 2, 1, 3, 1, 10, 0),
    (_M, _S, _LOSE):   (4, 4, 2, 3, 1, 1, 2, 1, 8, 0),
    (_M, _S, _KEEP):   (4, 4, 2, 3, 1, 1, 2, 1, 8, 0),
    (_M, _S, _BUILD):  (4, 4, 2, 3, 1, 1, 2, 1, 8, 0),
    (_M, _MD, _LOSE):  (5, 5, 3, 3, 2, 1, 3, 1, 10, 0),
    (_M, _MD, _KEEP):  (5, 5, 3, 3, 2, 1, 3, 1, 10, 0),
    (_M, _MD, _BUILD): (5, 5, 3, 3, 2, 1, 3, 1, 10, 0),
    (_M, _L, _LOSE):   (6, 6, 3, 4, 2, 1, 3, 2, 10, 0),
    (_M, _L, _KEEP):   (6, 6, 3, 4, 2, 1, 3, 2, 10, 0),
    (_M, _L, _BUILD):  (6, 6, 3, 4, 2, 1, 3, 2, 10, 0),
}
# fmt: on


class BaselineConfigurationError(RuntimeError):
    """Raised when the baseline table lacks or mis-shapes a cell."""


def baseline_targets(sex: Sex, bracket: Bracket, goal: Goal) -> TargetSet:
    """Return the literal baseline targets for a table cell."""
    row = BASELINE_ROWS.get((sex, bracket, goal))
    if row is None:
        raise BaselineConfigurationError(
            f"No baseline targets for sex={sex.value} bracket={bracket.value} "
            f"goal={goal.value}"
        )
    if len(row) != len(_COLUMNS):
        raise BaselineConfigurationError(
            f"Baseline row for {sex.value}/{bracket.value}/{goal.value} has "
            f"{len(row)} values, expected {len(_COLUMNS)}"
        )
    return TargetSet(dict(zip(_COLUMNS, row, strict=True)))


def validate_baseline_table() -> None:
    """Check that every (sex, bracket, goal) cell resolves to a target set."""
    for sex in Sex:
        for bracket in Bracket:
            for goal in Goal:
                try:
                    baseline_targets(sex, bracket, goal)
                except ValueError as exc:
                    raise BaselineConfigurationError(
                        f"Invalid baseline row for {sex.value}/{bracket.value}/"
                        f"{goal.value}: {exc}"
                    ) from exc
