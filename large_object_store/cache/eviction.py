"""
LRU Eviction Policy Module

Byte-budgeted Least Recently Used eviction for the in-memory backend.

Like a memcached slab allocator, the backend runs out of memory before
it runs out of keys, so the policy bounds both the number of items and
the total number of bytes they occupy. Orphaned payload pages left by
delete() or aborted writes are reclaimed here, once they become the
least recently used items.

LRU Concept:
- Most recently accessed items are at the END of the OrderedDict
- Least recently accessed items are at the BEGINNING
- On access (get/put), move item to end
- On eviction, remove from beginning until both budgets hold
"""

from collections import OrderedDict
from typing import Optional, Tuple, Any, Dict, List


class LRUEvictionPolicy:
    """
    LRU container bounded by item count and total byte size.

    Usage:
        lru = LRUEvictionPolicy(max_size=100, max_bytes=1024 ** 2)
        evicted = lru.put("page_1", blob, size=len(blob))

    Attributes:
        max_size: Maximum number of items
        max_bytes: Maximum total size of all items (0 = unbounded)
    """

    def __init__(self, max_size: int, max_bytes: int = 0):
        """
        Initialize the LRU cache.

        Raises:
            ValueError: If max_size is not positive or max_bytes is negative
        """
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        if max_bytes < 0:
            raise ValueError("max_bytes must not be negative")
        self.max_size = max_size
        self.max_bytes = max_bytes
        self._cache: "OrderedDict[str, Tuple[Any, int]]" = OrderedDict()
        self._total_bytes = 0

    def get(self, key: str) -> Optional[Any]:
        """Get an item and mark it as recently used."""
        if key not in self._cache:
            return None

        self._cache.move_to_end(key)
        return self._cache[key][0]

    def put(self, key: str, value: Any, size: int = 0) -> List[str]:
        """
        Insert or replace an item, evicting LRU items until it fits.

        Args:
            key: The key to store
            value: The value to store
            size: Bytes charged against max_bytes for this item

        Returns:
            Keys evicted to make room, oldest first

        Raises:
            ValueError: If the item alone exceeds max_bytes
        """
        if self.max_bytes and size > self.max_bytes:
            raise ValueError(f"item of {size} bytes exceeds budget of {self.max_bytes}")

        self.delete(key)

        evicted = []
        while self._cache and self._over_budget(size):
            lru_key, _ = self.evict_lru()
            evicted.append(lru_key)

        self._cache[key] = (value, size)
        self._total_bytes += size
        return evicted

    def delete(self, key: str) -> bool:
        """Delete an item. Returns False if it was not present."""
        if key not in self._cache:
            return False
        _, size = self._cache.pop(key)
        self._total_bytes -= size
        return True

    def contains(self, key: str) -> bool:
        """Check if key exists without updating LRU order."""
        return key in self._cache

    def peek(self, key: str) -> Optional[Any]:
        """Get value without updating LRU order."""
        entry = self._cache.get(key)
        return entry[0] if entry is not None else None

    def evict_lru(self) -> Optional[Tuple[str, Any]]:
        """
        Evict the least recently used item.

        Returns:
            Tuple of (key, value) that was evicted, or None if empty
        """
        if not self._cache:
            return None
        key, (value, size) = self._cache.popitem(last=False)
        self._total_bytes -= size
        return key, value

    def get_lru_key(self) -> Optional[str]:
        if not self._cache:
            return None
        return next(iter(self._cache))

    def get_mru_key(self) -> Optional[str]:
        if not self._cache:
            return None
        return next(reversed(self._cache))

    def size(self) -> int:
        """Get current number of items."""
        return len(self._cache)

    def total_bytes(self) -> int:
        """Get the summed size of all items."""
        return self._total_bytes

    def is_full(self) -> bool:
        """Check if either budget is exhausted."""
        if len(self._cache) >= self.max_size:
            return True
        return bool(self.max_bytes) and self._total_bytes >= self.max_bytes

    def clear(self) -> None:
        self._cache.clear()
        self._total_bytes = 0

    def get_all_keys(self) -> List[str]:
        """All keys from LRU (oldest) to MRU (newest)."""
        return list(self._cache.keys())

    def items(self) -> List[Tuple[str, Any]]:
        """All (key, value) pairs in LRU order, without touching it."""
        return [(key, value) for key, (value, _) in self._cache.items()]

    def get_stats(self) -> Dict[str, Any]:
        return {
            "size": len(self._cache),
            "max_size": self.max_size,
            "total_bytes": self._total_bytes,
            "max_bytes": self.max_bytes,
            "utilization": len(self._cache) / self.max_size,
            "lru_key": self.get_lru_key(),
            "mru_key": self.get_mru_key(),
        }

    def _over_budget(self, incoming: int) -> bool:
        if len(self._cache) >= self.max_size:
            return True
        return bool(self.max_bytes) and self._total_bytes + incoming > self.max_bytes
