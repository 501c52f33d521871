"""Services package."""

from workworth.services.storage import (
    AtomicWriteError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    SettingsStore,
    StorageConnectionError,
    StorageError,
    WorkworthRepository,
)

__all__ = [
    "AtomicWriteError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "SettingsStore",
    "StorageConnectionError",
    "StorageError",
    "WorkworthRepository",
]
