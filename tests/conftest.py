"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import datetime

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from storage import KeyValueStore, MemoryKeyValueStore, StorageError  # noqa: E402

TODAY = datetime(2024, 1, 11, 15, 30)


class FailingStore(KeyValueStore):
    """Store whose every call fails, like a broken disk."""

    def __init__(self):
        self.calls = []

    async def get_item(self, key):
        self.calls.append(("get", key))
        raise StorageError("disk unavailable")

    async def set_item(self, key, value):
        self.calls.append(("set", key, value))
        raise StorageError("disk unavailable")

    async def remove_item(self, key):
        self.calls.append(("remove", key))
        raise StorageError("disk unavailable")


@pytest.fixture
def fixed_now():
    """Clock frozen at 2024-01-11 15:30 local time."""
    return lambda: TODAY


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def sqlite_path(tmp_path):
    return str(tmp_path / "data" / "counter.sqlite")
