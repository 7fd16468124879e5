"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from portion_tracker.config import Settings
from portion_tracker.services.calendar import LocalCalendar
from portion_tracker.services.records import KeyValueStore, RecordStore
from portion_tracker.services.tracking import TrackingService
from portion_tracker.services.weights import WeightService

# Wednesday.
FIXED_NOW = datetime(2024, 5, 15, 9, 30, tzinfo=UTC)


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key-value backend for tests."""

    items: dict[str, str] = field(default_factory=dict)
    stubborn_keys: set[str] = field(default_factory=set)
    removed_individually: list[str] = field(default_factory=list)

    async def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    async def remove_item(self, key: str) -> None:
        self.removed_individually.append(key)
        self.items.pop(key, None)

    async def multi_get(self, keys: list[str]) -> list[tuple[str, str | None]]:
        return [(key, self.items.get(key)) for key in keys]

    async def multi_remove(self, keys: list[str]) -> None:
        for key in keys:
            if key in self.stubborn_keys:
                continue
            self.items.pop(key, None)

    async def get_all_keys(self) -> list[str]:
        return list(self.items)


@dataclass
class FailingKeyValueStore(InMemoryKeyValueStore):
    """Backend whose writes always fail."""

    async def set_item(self, key: str, value: str) -> None:
        raise OSError("disk full")


def fixed_clock(now: datetime = FIXED_NOW):
    """Return a clock callable pinned to ``now``."""
    return lambda: now


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_backend="file",
        storage_path=str(tmp_path / "store.json"),
        timezone="UTC",
    )


@pytest.fixture
def calendar() -> LocalCalendar:
    return LocalCalendar(timezone_name="UTC", clock=fixed_clock())


@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def record_store(backend: InMemoryKeyValueStore) -> RecordStore:
    return RecordStore(backend=backend)


@pytest.fixture
def tracking_service(
    record_store: RecordStore, calendar: LocalCalendar
) -> TrackingService:
    return TrackingService(store=record_store, calendar=calendar)


@pytest.fixture
def weight_service(record_store: RecordStore, calendar: LocalCalendar) -> WeightService:
    return WeightService(store=record_store, calendar=calendar)
