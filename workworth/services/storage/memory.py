"""In-memory key-value store, used by tests and throwaway sessions."""

from typing import Mapping, Optional

from workworth.services.storage.interface import (
    KeyValueStoreInterface,
    StoredValue,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dictionary-backed store. Writes are trivially atomic."""

    def __init__(self, initial: Optional[Mapping[str, StoredValue]] = None):
        self._data: dict[str, StoredValue] = dict(initial or {})

    async def read(self, key: str) -> Optional[StoredValue]:
        return self._data.get(key)

    async def write(self, key: str, value: StoredValue) -> None:
        self._data[key] = value

    async def write_many(self, values: Mapping[str, StoredValue]) -> None:
        self._data.update(values)

    async def remove(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)

    async def clear(self) -> None:
        self._data.clear()

    def dump(self) -> dict[str, StoredValue]:
        """Copy of the raw contents."""
        return dict(self._data)
