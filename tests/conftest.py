"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import pytest

from large_object_store.cache.eviction import LRUEvictionPolicy
from large_object_store.cache.store import AsyncKVStore, KVStore
from large_object_store.paging.async_wrapper import AsyncLargeObjectStore
from large_object_store.paging.codec import EntryCodec
from large_object_store.paging.errors import BackendFailure
from large_object_store.paging.wrapper import LargeObjectStore

# Small slab limits so multi-page values stay cheap to build
MAX_OBJECT_SIZE = 1000
ITEM_HEADER_SIZE = 100


# ============================================================================
# Failure-injecting and recording stores
# ============================================================================

class RecordingStore(KVStore):
    """KVStore that records every call made against it."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.writes = []
        self.reads = []
        self.multi_reads = []
        self.deletes = []

    def write(self, key, value, ttl=None, raw=False):
        self.writes.append((key, len(value), {"ttl": ttl, "raw": raw}))
        return super().write(key, value, ttl=ttl, raw=raw)

    def read(self, key):
        self.reads.append(key)
        return super().read(key)

    def read_multi(self, keys):
        self.multi_reads.append(list(keys))
        return {key: KVStore.read(self, key) for key in keys}

    def delete(self, key):
        self.deletes.append(key)
        return super().delete(key)


class FlakyStore(RecordingStore):
    """
    Store whose Nth write (1-based) fails.

    Args:
        fail_on: Index of the write call that fails
        raise_error: Raise BackendFailure instead of returning False
    """

    def __init__(self, fail_on: int, raise_error: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.fail_on = fail_on
        self.raise_error = raise_error
        self._write_calls = 0

    def write(self, key, value, ttl=None, raw=False):
        self._write_calls += 1
        if self._write_calls == self.fail_on:
            self.writes.append((key, len(value), {"ttl": ttl, "raw": raw, "failed": True}))
            if self.raise_error:
                raise BackendFailure(f"write of {key} failed")
            return False
        return super().write(key, value, ttl=ttl, raw=raw)


class GatherOnlyAsyncStore:
    """Async store without read_multi, forcing concurrent single reads."""

    def __init__(self):
        self.store = KVStore(max_item_size=MAX_OBJECT_SIZE)
        self.reads = []

    async def write(self, key, value, ttl=None, raw=False):
        return self.store.write(key, value, ttl=ttl, raw=raw)

    async def read(self, key):
        self.reads.append(key)
        return self.store.read(key)

    async def delete(self, key):
        return self.store.delete(key)


# ============================================================================
# KVStore Fixtures
# ============================================================================

@pytest.fixture
def store() -> KVStore:
    """Create a fresh KVStore with a 1000-byte entry limit."""
    return KVStore(max_item_size=MAX_OBJECT_SIZE, max_keys=100)


@pytest.fixture
def small_store() -> KVStore:
    """Create a KVStore with small capacity for eviction testing (5 keys)."""
    return KVStore(max_item_size=MAX_OBJECT_SIZE, max_keys=5)


@pytest.fixture
def recording_store() -> RecordingStore:
    """Create a KVStore that records the calls made against it."""
    return RecordingStore(max_item_size=MAX_OBJECT_SIZE, max_keys=100)


# ============================================================================
# LRU Fixtures
# ============================================================================

@pytest.fixture
def lru_cache() -> LRUEvictionPolicy:
    """Create an LRU cache for testing (5 items max, unbounded bytes)."""
    return LRUEvictionPolicy(max_size=5)


@pytest.fixture
def byte_lru() -> LRUEvictionPolicy:
    """Create an LRU cache bounded by 100 bytes."""
    return LRUEvictionPolicy(max_size=100, max_bytes=100)


# ============================================================================
# Wrapper Fixtures
# ============================================================================

@pytest.fixture
def codec() -> EntryCodec:
    return EntryCodec()


def make_wrapper(backend) -> LargeObjectStore:
    """Wrap backend with the test slab limits."""
    return LargeObjectStore(
        backend,
        max_object_size=MAX_OBJECT_SIZE,
        item_header_size=ITEM_HEADER_SIZE,
    )


@pytest.fixture
def flaky_cache():
    """
    Factory building a LargeObjectStore over a FlakyStore.

    Usage:
        cache = flaky_cache(fail_on=2)
        cache.store.writes  # calls seen by the backend
    """
    def factory(fail_on: int, raise_error: bool = False) -> LargeObjectStore:
        backend = FlakyStore(
            fail_on,
            raise_error=raise_error,
            max_item_size=MAX_OBJECT_SIZE,
            max_keys=100,
        )
        return make_wrapper(backend)
    return factory


@pytest.fixture
def cache(recording_store: RecordingStore) -> LargeObjectStore:
    """LargeObjectStore over a recording in-memory store."""
    return make_wrapper(recording_store)


@pytest.fixture
def async_store() -> AsyncKVStore:
    return AsyncKVStore(RecordingStore(max_item_size=MAX_OBJECT_SIZE, max_keys=100))


@pytest.fixture
def async_cache(async_store: AsyncKVStore) -> AsyncLargeObjectStore:
    """AsyncLargeObjectStore over an in-memory async store."""
    return AsyncLargeObjectStore(
        async_store,
        max_object_size=MAX_OBJECT_SIZE,
        item_header_size=ITEM_HEADER_SIZE,
    )


@pytest.fixture
def gather_cache() -> AsyncLargeObjectStore:
    """AsyncLargeObjectStore over a store without read_multi."""
    return AsyncLargeObjectStore(
        GatherOnlyAsyncStore(),
        max_object_size=MAX_OBJECT_SIZE,
        item_header_size=ITEM_HEADER_SIZE,
    )


@pytest.fixture
def flaky_async_cache():
    """Factory building an AsyncLargeObjectStore whose Nth backend write fails."""
    def factory(fail_on: int, raise_error: bool = False) -> AsyncLargeObjectStore:
        backend = FlakyStore(
            fail_on,
            raise_error=raise_error,
            max_item_size=MAX_OBJECT_SIZE,
            max_keys=100,
        )
        return AsyncLargeObjectStore(
            AsyncKVStore(backend),
            max_object_size=MAX_OBJECT_SIZE,
            item_header_size=ITEM_HEADER_SIZE,
        )
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

