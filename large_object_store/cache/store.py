"""
In-Memory Slab-Limited Store Module

KVStore is a small memcached-like backend used to run the paging adapter
without a network cache: it enforces a maximum entry size, per-item TTL
and LRU eviction under an item-count and byte budget.

Size accounting:
    An entry is charged len(key bytes) + len(value). Entries larger than
    max_item_size are rejected (write returns False), as a memcached
    server answers SERVER_ERROR for items above its slab limit.
"""

import asyncio
import logging
import time
from typing import Optional, Dict, Any, Sequence

from ..config.settings import settings
from .eviction import LRUEvictionPolicy

logger = logging.getLogger(__name__)


class KVStore:
    """
    In-memory key-value store with a per-entry size cap, TTL and LRU eviction.

    Implements the Store protocol expected by LargeObjectStore.

    Internal Storage:
        LRUEvictionPolicy holding key -> (value, expiration_timestamp)
        expiration_timestamp = 0 means no expiration

    Attributes:
        max_item_size: Largest entry accepted, key bytes included
        max_keys: Maximum number of entries before LRU eviction
        max_bytes: Byte budget for all entries (0 = unbounded)
    """

    def __init__(self, max_item_size: int = None, max_keys: int = None, max_bytes: int = None):
        """
        Initialize the store.

        Args:
            max_item_size: Entry size cap (default settings.MAX_OBJECT_SIZE)
            max_keys: Maximum number of keys (default settings.MAX_KEYS)
            max_bytes: Total byte budget (default settings.MAX_BYTES)
        """
        self.max_item_size = max_item_size if max_item_size is not None else settings.MAX_OBJECT_SIZE
        self.max_keys = max_keys if max_keys is not None else settings.MAX_KEYS
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_BYTES

        self._entries = LRUEvictionPolicy(self.max_keys, self.max_bytes)

    def write(self, key: str, value: bytes, ttl: int = None, raw: bool = False) -> bool:
        """
        Insert or replace an entry.

        Args:
            key: The key to store
            value: The bytes to store
            ttl: Time-to-live in seconds (None or 0 = settings.DEFAULT_TTL)
            raw: Store as an opaque blob. Values are always kept as bytes
                 here, so the flag only exists for interface compatibility.

        Returns:
            True if stored, False if the entry exceeds the size limits

        Raises:
            TypeError: If value is not bytes
        """
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"KVStore values must be bytes, got {type(value).__name__}")

        size = len(key.encode("utf-8")) + len(value)
        if size > self.max_item_size:
            logger.debug(f"Rejected {key}: {size} bytes exceeds item limit {self.max_item_size}")
            return False
        if self.max_bytes and size > self.max_bytes:
            logger.debug(f"Rejected {key}: {size} bytes exceeds byte budget {self.max_bytes}")
            return False

        ttl = ttl or settings.DEFAULT_TTL
        expires_at = time.time() + ttl if ttl > 0 else 0

        evicted = self._entries.put(key, (bytes(value), expires_at), size=size)
        if evicted:
            logger.debug(f"Evicted {len(evicted)} key(s) to store {key}: {evicted}")
        return True

    def read(self, key: str) -> Optional[bytes]:
        """Return the value for key, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._expired(expires_at):
            # Lazy expiration
            self._entries.delete(key)
            return None
        return value

    def read_multi(self, keys: Sequence[str]) -> Dict[str, Optional[bytes]]:
        """Read several keys at once. Absent keys map to None."""
        return {key: self.read(key) for key in keys}

    def delete(self, key: str) -> bool:
        """
        Delete an entry.

        Returns:
            True if key was deleted, False if it didn't exist or had expired
        """
        entry = self._entries.peek(key)
        if entry is None:
            return False

        self._entries.delete(key)
        _, expires_at = entry
        return not self._expired(expires_at)

    def exists(self, key: str) -> bool:
        """Check if a key exists and is not expired, without touching LRU order."""
        entry = self._entries.peek(key)
        if entry is None:
            return False
        if self._expired(entry[1]):
            self._entries.delete(key)
            return False
        return True

    def keys(self) -> list:
        """All stored keys, least recently used first."""
        return self._entries.get_all_keys()

    def size(self) -> int:
        """
        Get the current number of keys in the store.

        Note: This may include expired keys that haven't been cleaned up yet.
        """
        return self._entries.size()

    def clear(self) -> None:
        """Remove all keys from the store."""
        self._entries.clear()

    def cleanup_expired(self) -> int:
        """
        Remove all expired keys from the store (active expiration).

        Returns:
            Number of keys removed
        """
        expired = [k for k, (_, exp) in self._entries.items() if self._expired(exp)]
        for key in expired:
            self._entries.delete(key)
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing key counts, byte usage and limits
        """
        total = self._entries.size()
        expired = sum(1 for _, (_, exp) in self._entries.items() if self._expired(exp))

        return {
            "total_keys": total,
            "expired_keys": expired,
            "active_keys": total - expired,
            "total_bytes": self._entries.total_bytes(),
            "max_keys": self.max_keys,
            "max_bytes": self.max_bytes,
            "max_item_size": self.max_item_size,
            "utilization": total / self.max_keys if self.max_keys > 0 else 0,
        }

    @staticmethod
    def _expired(expires_at: float) -> bool:
        return bool(expires_at) and expires_at <= time.time()


class AsyncKVStore:
    """
    Coroutine facade over a KVStore, implementing the AsyncStore protocol.

    Calls are serialized with an asyncio.Lock so concurrent tasks see a
    consistent LRU order.

    Attributes:
        store: The underlying KVStore
    """

    def __init__(self, store: KVStore = None):
        self.store = store if store is not None else KVStore()
        self._lock = asyncio.Lock()

    async def write(self, key: str, value: bytes, ttl: int = None, raw: bool = False) -> bool:
        async with self._lock:
            return self.store.write(key, value, ttl=ttl, raw=raw)

    async def read(self, key: str) -> Optional[bytes]:
        async with self._lock:
            return self.store.read(key)

    async def read_multi(self, keys: Sequence[str]) -> Dict[str, Optional[bytes]]:
        async with self._lock:
            return self.store.read_multi(keys)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self.store.delete(key)
