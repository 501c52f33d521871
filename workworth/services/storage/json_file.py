"""
JSON File Storage Implementation

The whole store is one JSON object on disk, the same shape as a mobile
preferences file: scalar settings next to JSON-encoded collections.

Every write rewrites the document through a temporary file and
os.replace, so a crash leaves either the old or the new document and
multi-key writes are atomic.

TRADEOFFS:
- The whole document is rewritten on every change (fine for one
  person's expenses)
- Single process only; the in-process lock does not protect against a
  second process editing the same file
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

import structlog

from workworth.services.storage.interface import (
    AtomicWriteError,
    KeyValueStoreInterface,
    StorageConnectionError,
    StoredValue,
)

logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    File-backed key-value store.

    The document is loaded lazily on first access and kept in memory;
    the file is the source of truth only at startup.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._data: Optional[dict[str, StoredValue]] = None
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, StoredValue]:
        """Read the document; a corrupted file is treated as empty."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageConnectionError(f"Cannot read store {self._path}: {e}")

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(
                "store_file_corrupted",
                path=str(self._path),
                error=str(e),
            )
            return {}
        if not isinstance(document, dict):
            logger.warning("store_file_not_an_object", path=str(self._path))
            return {}
        return document

    def _flush(self, data: dict[str, StoredValue]) -> None:
        """Write the document atomically."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageConnectionError(f"Cannot write store {self._path}: {e}")

    async def _document(self) -> dict[str, StoredValue]:
        if self._data is None:
            self._data = await asyncio.to_thread(self._load)
        return self._data

    async def _commit(self, data: dict[str, StoredValue]) -> None:
        await asyncio.to_thread(self._flush, data)
        self._data = data

    async def read(self, key: str) -> Optional[StoredValue]:
        async with self._lock:
            return (await self._document()).get(key)

    async def write(self, key: str, value: StoredValue) -> None:
        async with self._lock:
            data = dict(await self._document())
            data[key] = value
            await self._commit(data)

    async def write_many(self, values: Mapping[str, StoredValue]) -> None:
        """Write all keys in one flush; a failed flush writes none of them."""
        async with self._lock:
            data = dict(await self._document())
            data.update(values)
            try:
                await self._commit(data)
            except StorageConnectionError as e:
                raise AtomicWriteError(
                    f"Keys {sorted(values)} were not written to {self._path}"
                ) from e

    async def remove(self, *keys: str) -> None:
        async with self._lock:
            current = await self._document()
            data = {k: v for k, v in current.items() if k not in keys}
            await self._commit(data)

    async def clear(self) -> None:
        async with self._lock:
            await self._commit({})
