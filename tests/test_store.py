"""
Tests for the In-Memory Slab-Limited Store

These tests verify the KVStore backend operations:
- write(): Insert or update entries within the item size limit
- read() / read_multi(): Retrieve entries by key
- delete(): Remove entries
- exists(): Check if key exists

Run with: python -m pytest tests/test_store.py -v
"""

import pytest

from large_object_store.cache.store import KVStore
from large_object_store.paging.backend import Store


class TestKVStoreWrite:
    """Test write() method."""

    def test_write_new_key(self, store: KVStore):
        result = store.write("key1", b"value1")
        assert result is True
        assert store.size() == 1

    def test_write_update_existing_key(self, store: KVStore):
        """Test updating an existing key's value."""
        store.write("key1", b"value1")
        result = store.write("key1", b"value2")

        assert result is True
        assert store.read("key1") == b"value2"
        assert store.size() == 1  # Size should not increase

    def test_write_at_item_limit(self, store: KVStore):
        """Test an entry of exactly max_item_size bytes (key included) is kept."""
        assert store.write("k", b"x" * 999) is True
        assert store.read("k") == b"x" * 999

    def test_write_over_item_limit(self, store: KVStore):
        """Test an oversized entry is rejected and nothing is stored."""
        assert store.write("k", b"x" * 1000) is False
        assert store.read("k") is None
        assert store.size() == 0

    def test_oversized_update_keeps_old_value(self, store: KVStore):
        store.write("k", b"old")
        assert store.write("k", b"x" * 5000) is False
        assert store.read("k") == b"old"

    def test_key_bytes_count_toward_limit(self, store: KVStore):
        """Test a long key shrinks the room left for the value."""
        assert store.write("k" * 500, b"x" * 500) is True
        assert store.write("k" * 501, b"x" * 500) is False

    def test_write_bytearray(self, store: KVStore):
        store.write("k", bytearray(b"abc"))
        assert store.read("k") == b"abc"

    def test_write_rejects_non_bytes(self, store: KVStore):
        with pytest.raises(TypeError):
            store.write("k", "text")

    def test_raw_flag_accepted(self, store: KVStore):
        """Test raw=True stores the blob unchanged."""
        assert store.write("k", b"\x00\xff", raw=True) is True
        assert store.read("k") == b"\x00\xff"


class TestKVStoreRead:
    """Test read() and read_multi()."""

    def test_read_nonexistent_key(self, store: KVStore):
        assert store.read("nonexistent") is None

    def test_read_multi_preserves_absent(self, store: KVStore):
        """Test read_multi maps every requested key, None when absent."""
        store.write("a", b"1")
        store.write("c", b"3")

        assert store.read_multi(["a", "b", "c"]) == {"a": b"1", "b": None, "c": b"3"}

    def test_read_multi_empty(self, store: KVStore):
        assert store.read_multi([]) == {}


class TestKVStoreDelete:
    """Test delete() method."""

    def test_delete_existing_key(self, store: KVStore):
        store.write("key1", b"value1")

        assert store.delete("key1") is True
        assert store.read("key1") is None
        assert store.size() == 0

    def test_delete_nonexistent_key(self, store: KVStore):
        assert store.delete("nonexistent") is False

    def test_delete_one_of_many(self, store: KVStore):
        """Test deleting one key doesn't affect others."""
        store.write("key1", b"value1")
        store.write("key2", b"value2")
        store.write("key3", b"value3")

        store.delete("key2")

        assert store.read("key1") == b"value1"
        assert store.read("key2") is None
        assert store.read("key3") == b"value3"
        assert store.size() == 2


class TestKVStoreExists:
    """Test exists() method."""

    def test_exists_with_existing_key(self, store: KVStore):
        store.write("key1", b"value1")
        assert store.exists("key1") is True

    def test_exists_with_nonexistent_key(self, store: KVStore):
        assert store.exists("nonexistent") is False

    def test_exists_does_not_touch_lru(self, small_store: KVStore):
        """Test exists() leaves the eviction order alone."""
        for i in range(5):
            small_store.write(f"key{i}", b"v")

        small_store.exists("key0")
        small_store.write("key5", b"v")

        assert small_store.exists("key0") is False


class TestKVStoreEviction:
    """Test LRU eviction inside the store."""

    def test_evicts_lru_key_when_full(self, small_store: KVStore):
        for i in range(5):
            small_store.write(f"key{i}", b"v")

        small_store.read("key0")
        small_store.write("key5", b"v")

        assert small_store.read("key0") == b"v"
        assert small_store.read("key1") is None
        assert small_store.size() == 5

    def test_byte_budget_eviction(self):
        """Test entries are evicted to stay within max_bytes."""
        store = KVStore(max_item_size=1000, max_keys=100, max_bytes=300)
        store.write("a", b"x" * 99)  # 100 bytes
        store.write("b", b"x" * 99)
        store.write("c", b"x" * 99)
        store.write("d", b"x" * 149)  # 150 bytes, evicts a and b

        assert store.keys() == ["c", "d"]
        assert store.get_stats()["total_bytes"] == 250

    def test_entry_over_byte_budget(self):
        store = KVStore(max_item_size=1000, max_keys=100, max_bytes=300)
        assert store.write("a", b"x" * 500) is False


class TestKVStoreSizeAndClear:
    """Test size(), clear() and get_stats()."""

    def test_size_empty_store(self, store: KVStore):
        assert store.size() == 0

    def test_clear(self, store: KVStore):
        store.write("key1", b"value1")
        store.write("key2", b"value2")

        store.clear()

        assert store.size() == 0
        assert store.read("key1") is None
        assert store.get_stats()["total_bytes"] == 0

    def test_stats(self, store: KVStore):
        store.write("ab", b"1234")

        stats = store.get_stats()

        assert stats["total_keys"] == 1
        assert stats["active_keys"] == 1
        assert stats["total_bytes"] == 6
        assert stats["max_item_size"] == 1000
        assert stats["utilization"] == 0.01

    def test_satisfies_store_protocol(self, store: KVStore):
        assert isinstance(store, Store)
