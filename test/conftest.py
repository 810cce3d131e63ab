from datetime import datetime, timezone

import pytest

from storelib.store import EntityStore
from storelib.utils import exceptions
from storelib.utils.storage import MemoryStorage, StorageBase

FIXED_NOW = datetime(2024, 1, 15, 12, 30, tzinfo=timezone.utc)


class FailingStorage(MemoryStorage):
    """Memory storage whose reads and/or writes fail like an exhausted or locked medium"""

    def __init__(self, fail_reads=False, fail_writes=False):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get(self, key):
        if self.fail_reads:
            raise exceptions.StorageReadError('access denied')
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise exceptions.StorageWriteError('quota exceeded')
        super().set(key, value)


@pytest.fixture
def fixed_timestamp() -> str:
    return '2024-01-15T12:30:00.000Z'


@pytest.fixture
def storage() -> StorageBase:
    return MemoryStorage()


@pytest.fixture
def store(storage) -> EntityStore:
    return EntityStore(storage, clock=lambda: FIXED_NOW)


@pytest.fixture
def empty_store(store) -> EntityStore:
    store.set_app_state({'users': [], 'restaurants': [], 'menus': [], 'orders': []})
    return store


@pytest.fixture
def failing_storage_factory():
    return FailingStorage
