"""In-memory backend module for Large Object Store."""

from .eviction import LRUEvictionPolicy
from .store import AsyncKVStore, KVStore

__all__ = ["AsyncKVStore", "KVStore", "LRUEvictionPolicy"]
