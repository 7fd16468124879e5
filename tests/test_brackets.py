"""Tests for weight bracket classification."""

import pytest

from portion_tracker.domain.portions import Bracket, ServingSize, Sex
from portion_tracker.services.brackets import classify_bracket, portion_units


@pytest.mark.parametrize(
    ("weight", "expected"),
    [
        (90, Bracket.SMALL),
        (149.9, Bracket.SMALL),
        (150, Bracket.MEDIUM),
        (200, Bracket.MEDIUM),
        (200.1, Bracket.LARGE),
        (320, Bracket.LARGE),
    ],
)
def test_classify_bracket_thresholds(weight: float, expected: Bracket) -> None:
    for sex in Sex:
        assert classify_bracket(sex, weight) is expected


def test_portion_units_medium_bracket_is_one_unit_per_medium_serving() -> None:
    assert portion_units(Bracket.MEDIUM, ServingSize.MEDIUM) == 1.0
    assert portion_units(Bracket.MEDIUM, ServingSize.SMALL) == 0.5
    assert portion_units(Bracket.MEDIUM, ServingSize.LARGE) == 1.5


def test_portion_units_increase_with_serving_size() -> None:
    for bracket in Bracket:
        small = portion_units(bracket, ServingSize.SMALL)
        medium = portion_units(bracket, ServingSize.MEDIUM)
        large = portion_units(bracket, ServingSize.LARGE)
        assert small <= medium <= large
