"""Domain models for adherence and weight statistics."""

from dataclasses import dataclass

from portion_tracker.domain.portions import DailyRecord


@dataclass(frozen=True)
class DayAdherence:
    """Adherence score of a single logged day."""

    date: str
    adherence: int
    record: DailyRecord


@dataclass(frozen=True)
class AdherenceSummary:
    """Adherence for today, the current week and the current month."""

    today: int
    week: int
    month: int


@dataclass(frozen=True)
class WeightChange:
    """Weight change between the first and last entry of a range."""

    change: float
    percentage: float


@dataclass(frozen=True)
class WeightTrend:
    """Least-squares trend line over entries ordered by time."""

    slope: float
    intercept: float
    start: float
    end: float
