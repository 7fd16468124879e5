"""Body-weight tracking service."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from portion_tracker.domain.portions import WeightEntry
from portion_tracker.domain.stats import WeightChange, WeightTrend
from portion_tracker.services.calendar import Calendar
from portion_tracker.services.records import RecordStore

_logger = logging.getLogger(__name__)


class WeightRange(Enum):
    """Look-back windows for weight statistics, in days."""

    WEEK = 7
    DAYS_30 = 30
    DAYS_60 = 60
    DAYS_90 = 90
    ALL = None


@dataclass
class WeightService:
    """Logs weight entries and summarises progress."""

    store: RecordStore
    calendar: Calendar

    async def log_weight(
        self, weight: float, date: str | None = None
    ) -> list[WeightEntry]:
        """Save the weight for a date, replacing an earlier entry for that date."""
        if weight <= 0:
            raise ValueError("Weight must be positive")
        entry = WeightEntry(
            date=date or self.calendar.today(),
            weight=weight,
            timestamp=self._now_ms(),
        )
        return await self.store.save_weight_entry(entry)

    async def delete_entry(self, date: str) -> list[WeightEntry]:
        """Delete the entry logged for a date."""
        return await self.store.delete_weight_entry(date)

    async def list_entries(self) -> list[WeightEntry]:
        """Return entries newest first, seeding one from the profile if empty."""
        entries = await self.store.load_weight_entries()
        if entries:
            return entries
        profile = await self.store.load_profile()
        if profile is None:
            return []
        _logger.info("Seeding weight history from profile weight")
        seed = WeightEntry(
            date=self.calendar.today(),
            weight=profile.current_weight,
            timestamp=self._now_ms(),
        )
        return await self.store.save_weight_entry(seed)

    async def current_weight(self) -> float | None:
        """Return the newest logged weight, falling back to the profile."""
        entries = await self.store.load_weight_entries()
        if entries:
            return entries[0].weight
        profile = await self.store.load_profile()
        return profile.current_weight if profile else None

    async def distance_to_goal(self) -> float | None:
        """Return how far the current weight is from the goal weight."""
        profile = await self.store.load_profile()
        if profile is None or profile.goal_weight is None:
            return None
        current = await self.current_weight()
        if current is None:
            return None
        return abs(current - profile.goal_weight)

    async def entries_in_range(self, window: WeightRange) -> list[WeightEntry]:
        """Return entries whose timestamp falls inside the window."""
        entries = await self.list_entries()
        if window.value is None:
            return entries
        cutoff = self.calendar.now() - timedelta(days=window.value)
        cutoff_ms = int(cutoff.timestamp() * 1000)
        return [entry for entry in entries if entry.timestamp >= cutoff_ms]

    async def weight_change(self, window: WeightRange) -> WeightChange | None:
        """Return the change from the oldest to the newest entry in the window."""
        entries = _chronological(await self.entries_in_range(window))
        if len(entries) < 2:
            return None
        first = entries[0].weight
        change = entries[-1].weight - first
        return WeightChange(change=change, percentage=round(change / first * 100, 1))

    async def weight_trend(self, window: WeightRange) -> WeightTrend | None:
        """Return the least-squares trend over entries in the window."""
        entries = _chronological(await self.entries_in_range(window))
        return linear_trend([entry.weight for entry in entries])

    def _now_ms(self) -> int:
        return int(self.calendar.now().timestamp() * 1000)


def linear_trend(weights: list[float]) -> WeightTrend | None:
    """Fit weight against entry index with ordinary least squares."""
    n = len(weights)
    if n < 2:
        return None
    sum_x = sum(range(n))
    sum_y = sum(weights)
    sum_xy = sum(index * weight for index, weight in enumerate(weights))
    sum_x2 = sum(index * index for index in range(n))
    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    return WeightTrend(
        slope=slope,
        intercept=intercept,
        start=intercept,
        end=slope * (n - 1) + intercept,
    )


def _chronological(entries: list[WeightEntry]) -> list[WeightEntry]:
    return sorted(entries, key=lambda entry: entry.timestamp)
