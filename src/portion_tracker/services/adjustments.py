"""Goal and alcohol adjustments applied to baseline targets."""

from portion_tracker.domain.portions import FoodCategory, Goal, TargetSet
from portion_tracker.services.baselines import GOAL_MODIFIERS_BAKED_IN

MAX_COMPENSATED_SERVINGS = 3
OFF_PLAN_ALCOHOL_SERVINGS = 2
DAIRY_CEILING = 2

# Categories that absorb alcohol servings, in order, with their floors.
ALCOHOL_COMPENSATION_ORDER: tuple[tuple[FoodCategory, int], ...] = (
    (FoodCategory.HEALTHY_CARBS, 1),
    (FoodCategory.FATS, 1),
    (FoodCategory.NUTS_SEEDS, 0),
)


def adjust_targets(
    baseline: TargetSet,
    goal: Goal,
    alcohol_opt_in: bool,
    alcohol_servings: int,
    *,
    apply_goal_modifiers: bool = not GOAL_MODIFIERS_BAKED_IN,
) -> TargetSet:
    """Apply goal modifiers, then the alcohol budget, to baseline targets."""
    targets = baseline
    if apply_goal_modifiers:
        targets = apply_goal(targets, goal)
    return apply_alcohol(targets, alcohol_opt_in, alcohol_servings)


def apply_goal(targets: TargetSet, goal: Goal) -> TargetSet:
    """Return targets shifted for a weight-management goal."""
    values = dict(targets.values)
    if goal is Goal.LOSE:
        values[FoodCategory.VEGGIES] += 1
        values[FoodCategory.FRUIT] = max(1, values[FoodCategory.FRUIT] - 1)
        values[FoodCategory.HEALTHY_CARBS] = max(
            0, values[FoodCategory.HEALTHY_CARBS] - 1
        )
        values[FoodCategory.FATS] = max(1, values[FoodCategory.FATS] - 1)
        values[FoodCategory.DAIRY] = min(values[FoodCategory.DAIRY], 1)
    elif goal is Goal.BUILD:
        values[FoodCategory.PROTEIN] += 1
        values[FoodCategory.HEALTHY_CARBS] += 1
        values[FoodCategory.DAIRY] = min(
            DAIRY_CEILING, values[FoodCategory.DAIRY] + 1
        )
    return TargetSet(values)


def apply_alcohol(
    targets: TargetSet, alcohol_opt_in: bool, alcohol_servings: int
) -> TargetSet:
    """Set the alcohol target and take compensating portions elsewhere."""
    values = dict(targets.values)
    if not alcohol_opt_in:
        values[FoodCategory.ALCOHOL] = 0
        return TargetSet(values)

    servings = max(0, alcohol_servings)
    values[FoodCategory.ALCOHOL] = servings
    reduce_in_priority_order(
        values, min(servings, MAX_COMPENSATED_SERVINGS), ALCOHOL_COMPENSATION_ORDER
    )
    return TargetSet(values)


def reduce_in_priority_order(
    values: dict[FoodCategory, int],
    amount: int,
    order: tuple[tuple[FoodCategory, int], ...],
) -> int:
    """Take ``amount`` portions from categories in order, respecting floors.

    Each category is only reduced once every category before it has reached
    its floor. Returns the part of ``amount`` that could not be applied.
    """
    remaining = amount
    for category, floor in order:
        if remaining <= 0:
            break
        available = max(0, values[category] - floor)
        taken = min(remaining, available)
        values[category] -= taken
        remaining -= taken
    return remaining


def is_alcohol_off_plan(alcohol_servings: int) -> bool:
    """Return True when a daily alcohol budget is beyond the recommended range."""
    return alcohol_servings > OFF_PLAN_ALCOHOL_SERVINGS
