"""Async key-value persistence used by the document store.

Values are JSON-compatible dictionaries. Notes live under ``note_<id>`` and
templates under ``template_<id>``.
"""

from __future__ import annotations

import copy
import json
import re
from collections.abc import Iterable
from typing import Any, Protocol
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient, ReplaceOne
from pymongo.errors import DocumentTooLarge, OperationFailure, PyMongoError

from amarnote.config import Config
from amarnote.errors import StorageError, StorageQuotaExceededError

logger = structlog.get_logger(__name__)

StoredValue = dict[str, Any]

# MongoDB error codes that mean "no room left" rather than a generic failure
QUOTA_ERROR_CODES = {10334, 12501, 14031}


class KeyValueStore(Protocol):
    """Persistence contract: atomic per-key get/set/delete plus batch helpers."""

    async def get(self, key: str) -> StoredValue | None: ...

    async def set(self, key: str, value: StoredValue) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def list_keys(self, prefix: str = "") -> list[str]: ...

    async def get_many(self, keys: list[str]) -> list[StoredValue | None]: ...

    async def set_many(self, entries: Iterable[tuple[str, StoredValue]]) -> None: ...

    async def close(self) -> None: ...


class MemoryStore:
    """In-process store. Values are deep-copied in and out like a real backend would serialize them."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._data: dict[str, StoredValue] = {}
        self._sizes: dict[str, int] = {}
        self._quota_bytes = quota_bytes

    @property
    def used_bytes(self) -> int:
        return sum(self._sizes.values())

    async def get(self, key: str) -> StoredValue | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: StoredValue) -> None:
        await self.set_many([(key, value)])

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)
        self._sizes.pop(key, None)

    async def list_keys(self, prefix: str = "") -> list[str]:
        return [key for key in self._data if key.startswith(prefix)]

    async def get_many(self, keys: list[str]) -> list[StoredValue | None]:
        return [await self.get(key) for key in keys]

    async def set_many(self, entries: Iterable[tuple[str, StoredValue]]) -> None:
        sizes = dict(self._sizes)
        staged: dict[str, StoredValue] = {}
        for key, value in entries:
            sizes[key] = len(json.dumps(value, ensure_ascii=False).encode("utf-8"))
            staged[key] = copy.deepcopy(value)

        if self._quota_bytes is not None and sum(sizes.values()) > self._quota_bytes:
            raise StorageQuotaExceededError(f"Storage quota of {self._quota_bytes} bytes exceeded")

        self._data.update(staged)
        self._sizes = sizes

    async def close(self) -> None:
        """Nothing to release."""


class MongoStore:
    """Key-value store backed by one MongoDB collection, one document per key."""

    def __init__(self, database_url: str, collection_name: str = "kv") -> None:
        self._client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(database_url)
        database = self._client.get_database(urlparse(database_url).path[1:] or "amarnote")
        self._collection = database.get_collection(collection_name)

    async def get(self, key: str) -> StoredValue | None:
        try:
            doc = await self._collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to read {key}") from e
        return doc["value"] if doc else None

    async def set(self, key: str, value: StoredValue) -> None:
        try:
            await self._collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)
        except PyMongoError as e:
            raise _storage_error(e, f"Failed to write {key}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to delete {key}") from e

    async def list_keys(self, prefix: str = "") -> list[str]:
        query = {"_id": {"$regex": f"^{re.escape(prefix)}"}} if prefix else {}
        try:
            return [doc["_id"] async for doc in self._collection.find(query, {"_id": 1})]
        except PyMongoError as e:
            raise StorageError("Failed to list keys") from e

    async def get_many(self, keys: list[str]) -> list[StoredValue | None]:
        try:
            found = {doc["_id"]: doc["value"] async for doc in self._collection.find({"_id": {"$in": keys}})}
        except PyMongoError as e:
            raise StorageError("Failed to read keys") from e
        return [found.get(key) for key in keys]

    async def set_many(self, entries: Iterable[tuple[str, StoredValue]]) -> None:
        operations = [ReplaceOne({"_id": key}, {"_id": key, "value": value}, upsert=True) for key, value in entries]
        if not operations:
            return
        try:
            await self._collection.bulk_write(operations, ordered=True)
        except PyMongoError as e:
            raise _storage_error(e, f"Failed to write {len(operations)} entries") from e

    async def close(self) -> None:
        await self._client.aclose()


def _storage_error(error: PyMongoError, message: str) -> StorageError:
    if isinstance(error, DocumentTooLarge):
        return StorageQuotaExceededError(f"{message}: document too large")
    if isinstance(error, OperationFailure) and error.code in QUOTA_ERROR_CODES:
        return StorageQuotaExceededError(f"{message}: {error.details or error}")
    logger.warning("storage_write_failed", error=str(error))
    return StorageError(message)


def create_store(config: Config) -> KeyValueStore:
    """Pick the backend from configuration: MongoDB when a URL is set, memory otherwise."""
    if config.database_url:
        return MongoStore(config.database_url)
    return MemoryStore(quota_bytes=config.storage_quota_bytes)
