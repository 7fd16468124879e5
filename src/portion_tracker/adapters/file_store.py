"""Device-local key-value store kept in a single JSON file."""

import json
import os
from dataclasses import dataclass
from pathlib import Path

from portion_tracker.services.records import KeyValueStore


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Key-value store persisted as one JSON object on disk."""

    path: Path

    @classmethod
    def create(cls, path: str | Path) -> "JsonFileKeyValueStore":
        """Create a store, making the parent directory if needed."""
        resolved = Path(path).expanduser()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        return cls(path=resolved)

    async def get_item(self, key: str) -> str | None:
        """Return the value stored under a key."""
        return self._read().get(key)

    async def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""
        data = self._read()
        data[key] = value
        self._write(data)

    async def remove_item(self, key: str) -> None:
        """Remove a key if present."""
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    async def multi_get(self, keys: list[str]) -> list[tuple[str, str | None]]:
        """Return (key, value) pairs for the given keys."""
        data = self._read()
        return [(key, data.get(key)) for key in keys]

    async def multi_remove(self, keys: list[str]) -> None:
        """Remove several keys in one write."""
        data = self._read()
        for key in keys:
            data.pop(key, None)
        self._write(data)

    async def get_all_keys(self) -> list[str]:
        """Return every key in the file."""
        return list(self._read())

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, dict):
            raise RuntimeError(f"Store file {self.path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False)
        os.replace(tmp_path, self.path)
