"""Profile setup, daily logging and adherence reporting."""

from collections.abc import Mapping
from dataclasses import dataclass

from portion_tracker.domain.portions import (
    DailyRecord,
    FoodCategory,
    Goal,
    Profile,
    ServingEntry,
    ServingSize,
    Sex,
)
from portion_tracker.domain.stats import AdherenceSummary, DayAdherence
from portion_tracker.services.adherence import (
    daily_adherence,
    monthly_adherence,
    weekly_adherence,
)
from portion_tracker.services.brackets import portion_units
from portion_tracker.services.calendar import Calendar
from portion_tracker.services.records import RecordStore
from portion_tracker.services.targets import recommend_targets


@dataclass
class TrackingService:
    """Application service the UI layer calls for portion tracking."""

    store: RecordStore
    calendar: Calendar

    def recommend(  # noqa: PLR0913
        self,
        sex: Sex,
        current_weight: float,
        goal: Goal,
        alcohol_opt_in: bool = False,
        alcohol_servings: int = 0,
        goal_weight: float | None = None,
    ) -> Profile:
        """Return an unsaved profile with recommended targets."""
        if current_weight <= 0:
            raise ValueError("Current weight must be positive")
        if goal_weight is not None and goal_weight <= 0:
            raise ValueError("Goal weight must be positive")
        if alcohol_servings < 0:
            raise ValueError("Alcohol servings cannot be negative")
        bracket, targets = recommend_targets(
            sex, current_weight, goal, alcohol_opt_in, alcohol_servings
        )
        return Profile(
            sex=sex,
            current_weight=current_weight,
            goal=goal,
            alcohol_opt_in=alcohol_opt_in,
            alcohol_servings=alcohol_servings if alcohol_opt_in else 0,
            size_category=bracket,
            targets=targets,
            goal_weight=goal_weight,
        )

    async def setup_profile(  # noqa: PLR0913
        self,
        sex: Sex,
        current_weight: float,
        goal: Goal,
        alcohol_opt_in: bool = False,
        alcohol_servings: int = 0,
        goal_weight: float | None = None,
    ) -> Profile:
        """Derive targets for the inputs and replace the stored profile."""
        profile = self.recommend(
            sex, current_weight, goal, alcohol_opt_in, alcohol_servings, goal_weight
        )
        await self.store.save_profile(profile)
        return profile

    async def override_targets(self, updates: Mapping[FoodCategory, int]) -> Profile:
        """Manually replace some targets on the stored profile."""
        profile = await self._require_profile()
        for category, value in updates.items():
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"Target for {category.value} must be >= 0")
        targets = profile.targets.replace(updates)
        if targets.total() == 0:
            raise ValueError("At least one target must be greater than zero")
        updated = Profile(
            sex=profile.sex,
            current_weight=profile.current_weight,
            goal=profile.goal,
            alcohol_opt_in=profile.alcohol_opt_in,
            alcohol_servings=profile.alcohol_servings,
            size_category=profile.size_category,
            targets=targets,
            goal_weight=profile.goal_weight,
        )
        await self.store.save_profile(updated)
        return updated

    async def get_day(self, date: str | None = None) -> DailyRecord:
        """Return the record for a date, zero-filled when nothing is stored."""
        day = date or self.calendar.today()
        record = await self.store.load_daily_record(day)
        return record or DailyRecord.empty(day)

    async def add_serving(
        self,
        category: FoodCategory,
        size: ServingSize = ServingSize.MEDIUM,
        date: str | None = None,
    ) -> DailyRecord:
        """Log one serving of a category and persist the day."""
        record = await self.get_day(date)
        if category is FoodCategory.WATER:
            updated = record.with_water(record.water + 1)
        else:
            profile = await self._require_profile()
            entry = ServingEntry(
                size=size, units=portion_units(profile.size_category, size)
            )
            updated = record.with_servings(
                category, (*record.servings[category], entry)
            )
        await self.store.save_daily_record(updated)
        return updated

    async def remove_serving(
        self, category: FoodCategory, date: str | None = None
    ) -> DailyRecord:
        """Remove the most recent serving of a category, never going below zero."""
        record = await self.get_day(date)
        if category is FoodCategory.WATER:
            updated = record.with_water(record.water - 1)
        else:
            updated = record.with_servings(category, record.servings[category][:-1])
        await self.store.save_daily_record(updated)
        return updated

    async def set_exercise(
        self, completed: bool, date: str | None = None
    ) -> DailyRecord:
        """Mark whether exercise was done on a date."""
        record = await self.get_day(date)
        updated = record.with_exercise(completed)
        await self.store.save_daily_record(updated)
        return updated

    async def adherence_summary(self) -> AdherenceSummary:
        """Return today, week-to-date and month-to-date adherence."""
        profile = await self._require_profile()
        records = await self.store.list_all_daily_records()
        today = await self.get_day()
        return AdherenceSummary(
            today=daily_adherence(today.amounts(), profile.targets),
            week=weekly_adherence(records, profile.targets, self.calendar),
            month=monthly_adherence(records, profile.targets, self.calendar),
        )

    async def history(self) -> list[DayAdherence]:
        """Return every logged day with its adherence, newest first."""
        profile = await self._require_profile()
        records = await self.store.list_all_daily_records()
        return [
            DayAdherence(
                date=record.date,
                adherence=daily_adherence(record.amounts(), profile.targets),
                record=record,
            )
            for record in records
        ]

    async def set_reminder_enabled(self, enabled: bool) -> None:
        """Persist the daily reminder preference."""
        await self.store.save_reminder_enabled(enabled)

    async def is_reminder_enabled(self) -> bool:
        """Return the daily reminder preference."""
        return await self.store.load_reminder_enabled()

    async def reset(self) -> None:
        """Erase every stored document."""
        await self.store.wipe_all()

    async def _require_profile(self) -> Profile:
        profile = await self.store.load_profile()
        if profile is None:
            raise ValueError("No profile has been set up")
        return profile
