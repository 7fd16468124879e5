"""Adherence scoring against daily portion targets."""

import math
from collections.abc import Iterable, Mapping
from datetime import date

from portion_tracker.domain.portions import DailyRecord, FoodCategory, TargetSet
from portion_tracker.services.calendar import Calendar


def daily_adherence(
    amounts: Mapping[FoodCategory, float], targets: TargetSet
) -> int:
    """Return a 0-100 score where each category counts at most its target."""
    achieved = 0.0
    possible = 0
    for category, target in targets.values.items():
        amount = max(0.0, float(amounts.get(category, 0)))
        achieved += min(amount, target)
        possible += target
    if possible == 0:
        return 0
    return _round_half_up(100 * achieved / possible)


def period_adherence(
    records: Iterable[DailyRecord], targets: TargetSet, start: str
) -> int:
    """Average the daily scores of records dated on or after ``start``."""
    scores = [
        daily_adherence(record.amounts(), targets)
        for record in records
        if record.date >= start
    ]
    if not scores:
        return 0
    return _round_half_up(sum(scores) / len(scores))


def weekly_adherence(
    records: Iterable[DailyRecord], targets: TargetSet, calendar: Calendar
) -> int:
    """Return adherence since the start of the current week."""
    start = calendar.week_start(_today(calendar))
    return period_adherence(records, targets, calendar.format_date(start))


def monthly_adherence(
    records: Iterable[DailyRecord], targets: TargetSet, calendar: Calendar
) -> int:
    """Return adherence since the first of the current month."""
    start = calendar.month_start(_today(calendar))
    return period_adherence(records, targets, calendar.format_date(start))


def _today(calendar: Calendar) -> date:
    return calendar.parse_date(calendar.today())


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
