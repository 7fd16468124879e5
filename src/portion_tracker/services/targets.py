"""Recommended target derivation."""

import logging

from portion_tracker.domain.portions import Bracket, Goal, Sex, TargetSet
from portion_tracker.services.adjustments import adjust_targets
from portion_tracker.services.baselines import baseline_targets
from portion_tracker.services.brackets import classify_bracket

_logger = logging.getLogger(__name__)


def recommend_targets(
    sex: Sex,
    weight: float,
    goal: Goal,
    alcohol_opt_in: bool = False,
    alcohol_servings: int = 0,
) -> tuple[Bracket, TargetSet]:
    """Classify the user and derive adjusted daily targets."""
    bracket = classify_bracket(sex, weight)
    baseline = baseline_targets(sex, bracket, goal)
    targets = adjust_targets(baseline, goal, alcohol_opt_in, alcohol_servings)
    _logger.debug(
        "Derived targets: sex=%s weight=%s bracket=%s goal=%s alcohol=%s/%s "
        "baseline=%s targets=%s",
        sex.value,
        weight,
        bracket.value,
        goal.value,
        alcohol_opt_in,
        alcohol_servings,
        baseline.as_dict(),
        targets.as_dict(),
    )
    return bracket, targets
