"""
Storage Services Package

Provides the abstract key-value interface, its implementations, typed
access to individual keys and the repository that serializes writes.
"""

from workworth.services.storage.interface import (
    AtomicWriteError,
    KeyValueStoreInterface,
    StorageConnectionError,
    StorageError,
    StoredValue,
)
from workworth.services.storage.json_file import JsonFileKeyValueStore
from workworth.services.storage.memory import InMemoryKeyValueStore
from workworth.services.storage.repository import WorkworthRepository
from workworth.services.storage.settings_store import (
    SettingsStore,
    StoreKeys,
    StoreSnapshot,
    decode_labels,
    decode_summaries,
    decode_transactions,
    encode_labels,
    encode_summaries,
    encode_transactions,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    "StoredValue",
    # Exceptions
    "AtomicWriteError",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Typed access
    "SettingsStore",
    "StoreKeys",
    "StoreSnapshot",
    "WorkworthRepository",
    # Codecs
    "decode_labels",
    "decode_summaries",
    "decode_transactions",
    "encode_labels",
    "encode_summaries",
    "encode_transactions",
]
