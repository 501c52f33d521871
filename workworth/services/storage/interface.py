"""
Abstract Storage Interface

WorkWorth keeps everything in a flat key-value store: a few scalar
settings plus JSON-encoded collections. Defining the store as an
interface lets us:
1. Use in-memory storage for testing
2. Keep the on-disk format swappable
3. Keep business logic decoupled from storage implementation

The interface is intentionally small. Typed access to individual keys
lives in SettingsStore, one layer up.
"""

from abc import ABC, abstractmethod
from typing import Mapping, Optional, Union

StoredValue = Union[str, int, float, bool]


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the key-value store.

    A read after a completed write of the same key returns the written
    value. Reading a key that was never written returns None.
    """

    @abstractmethod
    async def read(self, key: str) -> Optional[StoredValue]:
        """
        Read a single key.

        Args:
            key: Store key

        Returns:
            The last written value, or None if the key is absent
        """
        pass

    @abstractmethod
    async def write(self, key: str, value: StoredValue) -> None:
        """
        Write a single key.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def write_many(self, values: Mapping[str, StoredValue]) -> None:
        """
        Write several keys as one unit.

        Either every key is written or none is.

        Raises:
            AtomicWriteError: If the keys could not be written together
        """
        pass

    @abstractmethod
    async def remove(self, *keys: str) -> None:
        """Remove keys; absent keys are ignored."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove every key."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class AtomicWriteError(StorageError):
    """A multi-key write did not complete; nothing was written."""
    pass


class StorageConnectionError(StorageError):
    """The backing file could not be read or written."""
    pass
