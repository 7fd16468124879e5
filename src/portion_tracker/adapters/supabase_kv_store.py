"""Supabase-backed key-value store."""

import asyncio
from dataclasses import dataclass

from supabase import Client

from portion_tracker.services.records import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Supabase implementation storing one row per key."""

    client: Client
    table: str = "kv_store"

    async def get_item(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return await asyncio.to_thread(self._get_item, key)

    async def set_item(self, key: str, value: str) -> None:
        """Insert or replace the value for a key."""
        await asyncio.to_thread(self._set_item, key, value)

    async def remove_item(self, key: str) -> None:
        """Delete the row for a key."""
        await asyncio.to_thread(self._remove_items, [key])

    async def multi_get(self, keys: list[str]) -> list[tuple[str, str | None]]:
        """Return (key, value) pairs for the given keys."""
        return await asyncio.to_thread(self._multi_get, keys)

    async def multi_remove(self, keys: list[str]) -> None:
        """Delete the rows for several keys."""
        if keys:
            await asyncio.to_thread(self._remove_items, keys)

    async def get_all_keys(self) -> list[str]:
        """Return every stored key."""
        return await asyncio.to_thread(self._get_all_keys)

    def _get_item(self, key: str) -> str | None:
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def _set_item(self, key: str, value: str) -> None:
        response = (
            self.client.table(self.table)
            .upsert({"key": key, "value": value}, on_conflict="key")
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to store key {key}")

    def _remove_items(self, keys: list[str]) -> None:
        self.client.table(self.table).delete().in_("key", keys).execute()

    def _multi_get(self, keys: list[str]) -> list[tuple[str, str | None]]:
        if not keys:
            return []
        response = (
            self.client.table(self.table)
            .select("key, value")
            .in_("key", keys)
            .execute()
        )
        found = {row["key"]: row.get("value") for row in response.data or []}
        return [(key, found.get(key)) for key in keys]

    def _get_all_keys(self) -> list[str]:
        response = self.client.table(self.table).select("key").execute()
        return [row["key"] for row in response.data or []]
