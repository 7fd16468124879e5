"""Tests for the versioned record store."""

import asyncio
import json

import pytest

from portion_tracker.domain.portions import (
    Bracket,
    DailyRecord,
    FoodCategory,
    Goal,
    Profile,
    ServingEntry,
    ServingSize,
    Sex,
    TargetSet,
    WeightEntry,
)
from portion_tracker.services.records import RecordStore
from tests.conftest import FailingKeyValueStore, InMemoryKeyValueStore

PREFIX = "@portion_tracker_"


def _profile() -> Profile:
    return Profile(
        sex=Sex.FEMALE,
        current_weight=160,
        goal=Goal.MAINTAIN,
        alcohol_opt_in=False,
        alcohol_servings=0,
        size_category=Bracket.MEDIUM,
        targets=TargetSet.zeros().replace({FoodCategory.PROTEIN: 4}),
        goal_weight=150,
    )


def _legacy_daily(date: str, protein: int) -> str:
    return json.dumps(
        {
            "date": date,
            "portions": {
                "protein": protein,
                "veggies": 0,
                "fruit": 0,
                "healthyCarbs": 1,
                "nutsSeeds": 0,
                "fats": 0,
                "dairy": 0,
                "water": 2,
                "alcohol": 0,
            },
        }
    )


def test_profile_roundtrip(
    record_store: RecordStore, backend: InMemoryKeyValueStore
) -> None:
    asyncio.run(record_store.save_profile(_profile()))
    loaded = asyncio.run(record_store.load_profile())

    assert loaded == _profile()
    stored = json.loads(backend.items[f"{PREFIX}profile"])
    assert stored["schema_version"] == 3
    assert stored["targets"]["protein"] == 4


def test_missing_profile_is_none(record_store: RecordStore) -> None:
    assert asyncio.run(record_store.load_profile()) is None


def test_malformed_profile_is_treated_as_absent(
    record_store: RecordStore, backend: InMemoryKeyValueStore
) -> None:
    backend.items[f"{PREFIX}profile"] = "{not json"
    assert asyncio.run(record_store.load_profile()) is None

    backend.items[f"{PREFIX}profile"] = json.dumps({"schema_version": 3, "sex": "x"})
    assert asyncio.run(record_store.load_profile()) is None


def test_legacy_profile_is_migrated_and_persisted(
    record_store: RecordStore, backend: InMemoryKeyValueStore
) -> None:
    backend.items[f"{PREFIX}profile"] = json.dumps(
        {
            "sex": "male",
            "currentWeight": 190,
            "goal": "build",
            "targets": {
                "protein": 6,
                "veggies": 5,
                "fruit": 3,
                "healthyCarbs": 4,
                "nutsSeeds": 1,
                "fats": 3,
                "dairy": 2,
                "water": 10,
                "alcohol": 0,
            },
        }
    )

    profile = asyncio.run(record_store.load_profile())

    assert profile is not None
    assert profile.size_category is Bracket.MEDIUM
    assert profile.targets[FoodCategory.LEGUMES] == 0
    assert profile.targets[FoodCategory.HEALTHY_CARBS] == 4
    stored = json.loads(backend.items[f"{PREFIX}profile"])
    assert stored["schema_version"] == 3


def test_daily_record_roundtrip(
    record_store: RecordStore, backend: InMemoryKeyValueStore
) -> None:
    record = DailyRecord(
        date="2024-05-15",
        servings={
            FoodCategory.PROTEIN: (
                ServingEntry(size=ServingSize.SMALL, units=0.5),
                ServingEntry(size=ServingSize.LARGE, units=1.5),
            )
        },
        water=3,
        exercise=True,
    )

    asyncio.run(record_store.save_daily_record(record))
    loaded = asyncio.run(record_store.load_daily_record("2024-05-15"))

    assert loaded == record
    assert f"{PREFIX}servings_2024-05-15" in backend.items


def test_missing_daily_record_is_none(record_store: RecordStore) -> None:
    assert asyncio.run(record_store.load_daily_record("2024-05-15")) is None


def test_legacy_daily_record_moves_to_current_key(
    record_store: RecordStore, backend: InMemoryKeyValueStore
) -> None:
    backend.items[f"{PREFIX}daily_2024-05-10"] = _legacy_daily("2024-05-10", 2)

    record = asyncio.run(record_store.load_daily_record("2024-05-10"))

    assert record is not None
    assert record.amounts()[FoodCategory.PROTEIN] == 2
    assert record.amounts()[FoodCategory.HEALTHY_CARBS] == 1
    assert record.water == 2
    assert f"{PREFIX}daily_2024-05-10" not in backend.items
    stored = json.loads(backend.items[f"{PREFIX}servings_2024-05-10"])
    assert stored["schema_version"] == 3

    again = asyncio.run(record_store.load_daily_record("2024-05-10"))
    assert again == record


def test_list_all_daily_records_merges_generations(
    record_store: RecordStore, backend: InMemoryKeyValueStore
) -> None:
    current = DailyRecord(date="2024-05-12", water=1)
    asyncio.run(record_store.save_daily_record(current))
    backend.items[f"{PREFIX}daily_2024-05-11"] = _legacy_daily("2024-05-11", 1)
    backend.items[f"{PREFIX}daily_2024-05-12"] = _legacy_daily("2024-05-12", 5)
    backend.items[f"{PREFIX}servings_2024-05-13"] = "garbage"
    backend.items["unrelated_key"] = "value"

    records = asyncio.run(record_store.list_all_daily_records())

    assert [record.date for record in records] == ["2024-05-12", "2024-05-11"]
    assert records[0] == current
    assert f"{PREFIX}daily_2024-05-11" not in backend.items
    assert f"{PREFIX}servings_2024-05-11" in backend.items


def test_list_all_daily_records_empty(record_store: RecordStore) -> None:
    assert asyncio.run(record_store.list_all_daily_records()) == []


def test_weight_entries_upsert_by_date(record_store: RecordStore) -> None:
    asyncio.run(
        record_store.save_weight_entry(
            WeightEntry(date="2024-05-01", weight=180, timestamp=1000)
        )
    )
    asyncio.run(
        record_store.save_weight_entry(
            WeightEntry(date="2024-05-02", weight=179, timestamp=2000)
        )
    )
    entries = asyncio.run(
        record_store.save_weight_entry(
            WeightEntry(date="2024-05-01", weight=181, timestamp=3000)
        )
    )

    assert [(entry.date, entry.weight) for entry in entries] == [
        ("2024-05-01", 181),
        ("2024-05-02", 179),
    ]
    assert asyncio.run(record_store.load_weight_entries()) == entries


def test_delete_weight_entry(record_store: RecordStore) -> None:
    asyncio.run(
        record_store.save_weight_entry(
            WeightEntry(date="2024-05-01", weight=180, timestamp=1000)
        )
    )

    remaining = asyncio.run(record_store.delete_weight_entry("2024-05-01"))

    assert remaining == []


def test_malformed_weight_entries_are_ignored(
    record_store: RecordStore, backend: InMemoryKeyValueStore
) -> None:
    backend.items[f"{PREFIX}weight_entries"] = json.dumps(
        [
            {"date": "2024-05-01", "weight": -5, "timestamp": 1000},
            {"date": "2024-05-02", "weight": 180, "timestamp": 2000},
        ]
    )

    entries = asyncio.run(record_store.load_weight_entries())

    assert [entry.date for entry in entries] == ["2024-05-02"]


def test_reminder_flag(record_store: RecordStore, backend: InMemoryKeyValueStore) -> None:
    assert asyncio.run(record_store.load_reminder_enabled()) is False

    asyncio.run(record_store.save_reminder_enabled(True))
    assert asyncio.run(record_store.load_reminder_enabled()) is True

    backend.items[f"{PREFIX}reminder_enabled"] = '"yes"'
    assert asyncio.run(record_store.load_reminder_enabled()) is False


def test_wipe_all_retries_stubborn_keys(backend: InMemoryKeyValueStore) -> None:
    store = RecordStore(backend=backend)
    backend.items = {
        f"{PREFIX}profile": "{}",
        f"{PREFIX}servings_2024-05-15": "{}",
        "other_app_key": "keep",
    }
    backend.stubborn_keys = {f"{PREFIX}profile"}

    asyncio.run(store.wipe_all())

    assert backend.items == {"other_app_key": "keep"}
    assert backend.removed_individually == [f"{PREFIX}profile"]


def test_wipe_all_fails_when_keys_survive() -> None:
    class UndeletableStore(InMemoryKeyValueStore):
        async def remove_item(self, key: str) -> None:
            self.removed_individually.append(key)

    backend = UndeletableStore(
        items={f"{PREFIX}profile": "{}"}, stubborn_keys={f"{PREFIX}profile"}
    )

    with pytest.raises(RuntimeError):
        asyncio.run(RecordStore(backend=backend).wipe_all())


def test_storage_errors_propagate() -> None:
    store = RecordStore(backend=FailingKeyValueStore())

    with pytest.raises(OSError):
        asyncio.run(store.save_daily_record(DailyRecord.empty("2024-05-15")))


def test_custom_key_prefix_isolates_stores(backend: InMemoryKeyValueStore) -> None:
    first = RecordStore(backend=backend, key_prefix="a_")
    second = RecordStore(backend=backend, key_prefix="b_")

    asyncio.run(first.save_reminder_enabled(True))

    assert asyncio.run(second.load_reminder_enabled()) is False
    asyncio.run(second.wipe_all())
    assert asyncio.run(first.load_reminder_enabled()) is True


def test_wipe_all_leaves_nothing_to_load(record_store: RecordStore) -> None:
    asyncio.run(record_store.save_profile(_profile()))
    asyncio.run(record_store.save_daily_record(DailyRecord.empty("2024-05-15")))

    asyncio.run(record_store.wipe_all())

    assert asyncio.run(record_store.list_all_daily_records()) == []
    assert asyncio.run(record_store.load_profile()) is None


def test_malformed_daily_record_is_skipped_in_listing(
    record_store: RecordStore, backend: InMemoryKeyValueStore
) -> None:
    valid = DailyRecord(date="2024-05-01", water=2)
    asyncio.run(record_store.save_daily_record(valid))
    backend.items[f"{PREFIX}servings_2024-05-02"] = "{not json"
    backend.items[f"{PREFIX}daily_2024-05-03"] = json.dumps(
        {"schema_version": 1, "date": "2024-05-03"}
    )
    backend.items[f"{PREFIX}daily_2024-05-04"] = json.dumps(
        {"schema_version": 2, "date": "2024-05-04", "portions": [1, 2]}
    )

    records = asyncio.run(record_store.list_all_daily_records())

    assert records == [valid]
    assert asyncio.run(record_store.load_daily_record("2024-05-01")) == valid
    for date in ("2024-05-02", "2024-05-03", "2024-05-04"):
        assert asyncio.run(record_store.load_daily_record(date)) is None
