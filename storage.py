"""
Key-value persistence for the day counter.

Backends expose the same asynchronous get/set/remove calls as the mobile
key-value store the screen was designed against. Every backend failure is
raised as StorageError so callers only have one exception to handle.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from contextlib import closing
from typing import Dict, Optional

from settings import StorageConfig


class StorageError(Exception):
    """Raised when the backing store cannot be read or written."""


class KeyValueStore(ABC):
    """Abstract asynchronous string key-value store."""

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""


class MemoryKeyValueStore(KeyValueStore):
    """
    In-memory store for tests and throwaway sessions.

    Data is lost when the process exits.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class SqliteKeyValueStore(KeyValueStore):
    """
    Durable store backed by a single SQLite table.

    Each call opens its own connection and runs in a worker thread, so the
    event loop never blocks on disk I/O.
    """

    def __init__(self, path: str):
        self.path = path
        logging.info(f"Key-value store at {path}")

    def _connect(self) -> sqlite3.Connection:
        db_dir = os.path.dirname(self.path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        conn = sqlite3.connect(self.path)
        try:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS kv_store ("
                "key TEXT PRIMARY KEY, "
                "value TEXT NOT NULL, "
                "updated_at TEXT NOT NULL DEFAULT (datetime('now')))"
            )
        except sqlite3.Error:
            conn.close()
            raise
        return conn

    def _get(self, key: str) -> Optional[str]:
        with closing(self._connect()) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def _set(self, key: str, value: str) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = datetime('now')",
                (key, value),
            )

    def _remove(self, key: str) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    async def get_item(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._get, key)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Could not read {key!r}: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._set, key, value)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Could not write {key!r}: {e}") from e

    async def remove_item(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Could not remove {key!r}: {e}") from e


def create_store(config: StorageConfig) -> KeyValueStore:
    if config.backend == "memory":
        return MemoryKeyValueStore()
    return SqliteKeyValueStore(config.path)
