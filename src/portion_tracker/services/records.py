"""Versioned persistence of profiles, daily records and weight entries."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from portion_tracker.domain.documents import (
    DailyRecordDocument,
    ProfileDocument,
    ServingEntryDocument,
    WeightEntryDocument,
)
from portion_tracker.domain.portions import (
    DailyRecord,
    FoodCategory,
    Profile,
    ServingEntry,
    TargetSet,
    WeightEntry,
)
from portion_tracker.domain.schema import CURRENT_SCHEMA, LEGACY_DAILY_KEY
from portion_tracker.services.migrations import (
    migrate_daily_record,
    migrate_profile,
    migrate_weight_entries,
)

DEFAULT_KEY_PREFIX = "@portion_tracker_"
PROFILE_KEY = "profile"
REMINDER_KEY = "reminder_enabled"
WEIGHT_ENTRIES_KEY = "weight_entries"

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Asynchronous flat string key-value backend."""

    async def get_item(self, key: str) -> str | None:
        """Return the value stored under a key."""

    async def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""

    async def remove_item(self, key: str) -> None:
        """Remove a key if present."""

    async def multi_get(self, keys: list[str]) -> list[tuple[str, str | None]]:
        """Return (key, value) pairs for the given keys."""

    async def multi_remove(self, keys: list[str]) -> None:
        """Remove several keys."""

    async def get_all_keys(self) -> list[str]:
        """Return every key in the store."""


@dataclass
class RecordStore:
    """Reads and writes tracker documents, migrating old shapes on read."""

    backend: KeyValueStore
    key_prefix: str = DEFAULT_KEY_PREFIX

    async def save_profile(self, profile: Profile) -> None:
        """Persist the profile, replacing any previous one."""
        document = _profile_document(profile)
        await self.backend.set_item(self._key(PROFILE_KEY), document.model_dump_json())
        _logger.info("Profile saved")

    async def load_profile(self) -> Profile | None:
        """Return the stored profile, migrating it if needed."""
        raw = await self.backend.get_item(self._key(PROFILE_KEY))
        if raw is None:
            return None
        try:
            document = json.loads(raw)
            migrated = migrate_profile(document)
            profile = _profile_from_document(ProfileDocument.model_validate(migrated))
        except ValueError as exc:
            _logger.warning("Ignoring malformed profile document: %s", exc)
            return None
        if document.get("schema_version") != CURRENT_SCHEMA.version:
            _logger.info("Migrated profile to schema %s", CURRENT_SCHEMA.version)
            await self.save_profile(profile)
        return profile

    async def save_daily_record(self, record: DailyRecord) -> None:
        """Persist one day's record under its date."""
        document = _record_document(record)
        await self.backend.set_item(
            self._daily_key(record.date), document.model_dump_json()
        )
        _logger.info("Daily record saved for %s", record.date)

    async def load_daily_record(self, date: str) -> DailyRecord | None:
        """Return the record for a date, migrating a legacy copy if needed."""
        raw = await self.backend.get_item(self._daily_key(date))
        legacy_key = None
        if raw is None:
            legacy_key = self._legacy_daily_key(date)
            raw = await self.backend.get_item(legacy_key)
            if raw is None:
                return None
        record, migrated = _decode_daily_record(raw, legacy_key or date)
        if record is not None and migrated:
            await self._persist_migrated(record, legacy_key)
        return record

    async def list_all_daily_records(self) -> list[DailyRecord]:
        """Return every stored daily record, newest date first."""
        current_prefix = self._key(CURRENT_SCHEMA.daily_key)
        legacy_prefix = self._key(LEGACY_DAILY_KEY)
        keys = [
            key
            for key in await self.backend.get_all_keys()
            if key.startswith((current_prefix, legacy_prefix))
        ]
        if not keys:
            return []

        current: list[tuple[DailyRecord, bool]] = []
        legacy: list[tuple[str, DailyRecord]] = []
        for key, raw in await self.backend.multi_get(keys):
            if raw is None:
                continue
            record, migrated = _decode_daily_record(raw, key)
            if record is None:
                continue
            if key.startswith(legacy_prefix):
                legacy.append((key, record))
            else:
                current.append((record, migrated))

        records: dict[str, DailyRecord] = {}
        for record, migrated in current:
            records[record.date] = record
            if migrated:
                await self._persist_migrated(record, None)
        for key, record in legacy:
            if record.date in records:
                continue
            records[record.date] = record
            await self._persist_migrated(record, key)
        return sorted(records.values(), key=lambda item: item.date, reverse=True)

    async def load_weight_entries(self) -> list[WeightEntry]:
        """Return weight entries sorted by timestamp, newest first."""
        raw = await self.backend.get_item(self._key(WEIGHT_ENTRIES_KEY))
        if raw is None:
            return []
        try:
            items = migrate_weight_entries(json.loads(raw))
        except ValueError as exc:
            _logger.warning("Ignoring malformed weight entries document: %s", exc)
            return []
        entries: list[WeightEntry] = []
        for item in items:
            try:
                document = WeightEntryDocument.model_validate(item)
            except ValueError as exc:
                _logger.warning("Skipping malformed weight entry: %s", exc)
                continue
            entries.append(
                WeightEntry(
                    date=document.date,
                    weight=document.weight,
                    timestamp=document.timestamp,
                )
            )
        return entries

    async def save_weight_entry(self, entry: WeightEntry) -> list[WeightEntry]:
        """Insert or replace the entry for its date and return all entries."""
        entries = await self.load_weight_entries()
        for index, existing in enumerate(entries):
            if existing.date == entry.date:
                entries[index] = entry
                break
        else:
            entries.append(entry)
        return await self._save_weight_entries(entries)

    async def delete_weight_entry(self, date: str) -> list[WeightEntry]:
        """Remove the entry for a date and return the remaining entries."""
        entries = await self.load_weight_entries()
        remaining = [entry for entry in entries if entry.date != date]
        return await self._save_weight_entries(remaining)

    async def save_reminder_enabled(self, enabled: bool) -> None:
        """Persist the daily reminder flag."""
        await self.backend.set_item(self._key(REMINDER_KEY), json.dumps(enabled))

    async def load_reminder_enabled(self) -> bool:
        """Return the daily reminder flag, defaulting to disabled."""
        raw = await self.backend.get_item(self._key(REMINDER_KEY))
        if raw is None:
            return False
        try:
            value = json.loads(raw)
        except ValueError as exc:
            _logger.warning("Ignoring malformed reminder flag: %s", exc)
            return False
        if not isinstance(value, bool):
            _logger.warning("Ignoring non-boolean reminder flag: %r", value)
            return False
        return value

    async def wipe_all(self) -> None:
        """Remove every key under the store prefix."""
        keys = await self._own_keys()
        if keys:
            await self.backend.multi_remove(keys)
        for key in await self._own_keys():
            _logger.warning("Key %s survived bulk removal, removing it again", key)
            await self.backend.remove_item(key)
        leftover = await self._own_keys()
        if leftover:
            raise RuntimeError(f"Failed to remove stored keys: {leftover}")
        _logger.info("Wiped %s stored keys", len(keys))

    async def _persist_migrated(
        self, record: DailyRecord, legacy_key: str | None
    ) -> None:
        await self.save_daily_record(record)
        if legacy_key is not None:
            await self.backend.remove_item(legacy_key)
        _logger.info(
            "Migrated daily record %s to schema %s", record.date, CURRENT_SCHEMA.version
        )

    async def _save_weight_entries(
        self, entries: list[WeightEntry]
    ) -> list[WeightEntry]:
        ordered = sorted(entries, key=lambda entry: entry.timestamp, reverse=True)
        payload = json.dumps(
            [
                WeightEntryDocument(
                    date=entry.date, weight=entry.weight, timestamp=entry.timestamp
                ).model_dump()
                for entry in ordered
            ]
        )
        await self.backend.set_item(self._key(WEIGHT_ENTRIES_KEY), payload)
        return ordered

    async def _own_keys(self) -> list[str]:
        return [
            key
            for key in await self.backend.get_all_keys()
            if key.startswith(self.key_prefix)
        ]

    def _key(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    def _daily_key(self, date: str) -> str:
        return self._key(f"{CURRENT_SCHEMA.daily_key}{date}")

    def _legacy_daily_key(self, date: str) -> str:
        return self._key(f"{LEGACY_DAILY_KEY}{date}")


def _decode_daily_record(raw: str, source: str) -> tuple[DailyRecord | None, bool]:
    """Parse and migrate a stored daily record; returns (record, was_migrated)."""
    try:
        document = json.loads(raw)
        migrated = migrate_daily_record(document)
        record = _record_from_document(DailyRecordDocument.model_validate(migrated))
    except ValueError as exc:
        _logger.warning("Ignoring malformed daily record %s: %s", source, exc)
        return None, False
    return record, document.get("schema_version") != CURRENT_SCHEMA.version


def _record_from_document(document: DailyRecordDocument) -> DailyRecord:
    return DailyRecord(
        date=document.date,
        servings={
            FoodCategory(name): tuple(
                ServingEntry(size=entry.size, units=entry.units) for entry in entries
            )
            for name, entries in document.servings.items()
        },
        water=document.water,
        exercise=document.exercise,
    )


def _record_document(record: DailyRecord) -> DailyRecordDocument:
    return DailyRecordDocument(
        date=record.date,
        servings={
            category.value: [
                ServingEntryDocument(size=entry.size, units=entry.units)
                for entry in entries
            ]
            for category, entries in record.servings.items()
        },
        water=record.water,
        exercise=record.exercise,
    )


def _profile_from_document(document: ProfileDocument) -> Profile:
    return Profile(
        sex=document.sex,
        current_weight=document.current_weight,
        goal=document.goal,
        alcohol_opt_in=document.alcohol_opt_in,
        alcohol_servings=document.alcohol_servings,
        size_category=document.size_category,
        targets=TargetSet.from_dict(document.targets),
        goal_weight=document.goal_weight,
    )


def _profile_document(profile: Profile) -> ProfileDocument:
    return ProfileDocument(
        sex=profile.sex,
        current_weight=profile.current_weight,
        goal_weight=profile.goal_weight,
        goal=profile.goal,
        alcohol_opt_in=profile.alcohol_opt_in,
        alcohol_servings=profile.alcohol_servings,
        size_category=profile.size_category,
        targets=profile.targets.as_dict(),
    )
