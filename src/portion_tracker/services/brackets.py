"""Weight bracket classification and serving-size portion units."""

from portion_tracker.domain.portions import Bracket, ServingSize, Sex

# Upper bounds per sex: below the first is small, up to the second is medium.
BRACKET_THRESHOLDS: dict[Sex, tuple[float, float]] = {
    Sex.FEMALE: (150.0, 200.0),
    Sex.MALE: (150.0, 200.0),
}

PORTION_UNITS: dict[Bracket, dict[ServingSize, float]] = {
    Bracket.SMALL: {
        ServingSize.SMALL: 1.0,
        ServingSize.MEDIUM: 1.5,
        ServingSize.LARGE: 2.0,
    },
    Bracket.MEDIUM: {
        ServingSize.SMALL: 0.5,
        ServingSize.MEDIUM: 1.0,
        ServingSize.LARGE: 1.5,
    },
    Bracket.LARGE: {
        ServingSize.SMALL: 0.5,
        ServingSize.MEDIUM: 0.75,
        ServingSize.LARGE: 1.0,
    },
}


def classify_bracket(sex: Sex, weight: float) -> Bracket:
    """Map a positive body weight in pounds to a size bracket."""
    small_below, medium_up_to = BRACKET_THRESHOLDS[sex]
    if weight < small_below:
        return Bracket.SMALL
    if weight <= medium_up_to:
        return Bracket.MEDIUM
    return Bracket.LARGE


def portion_units(bracket: Bracket, size: ServingSize) -> float:
    """Return how many portion units a serving size counts for."""
    return PORTION_UNITS[bracket][size]
