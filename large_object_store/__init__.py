"""
Large Object Store: paged values for size-limited key-value caches

Stores values of any size in a backend whose entries are capped at a
slab limit, by splitting the serialized value across several entries
and reassembling it on read.
"""

from .paging import (
    AsyncLargeObjectStore,
    BackendFailure,
    CompressionError,
    DecodeError,
    EncodeError,
    KeyTooLongError,
    LargeObjectStore,
    LargeObjectStoreError,
    wrap,
)

__version__ = "1.0.0"

__all__ = [
    "AsyncLargeObjectStore",
    "BackendFailure",
    "CompressionError",
    "DecodeError",
    "EncodeError",
    "KeyTooLongError",
    "LargeObjectStore",
    "LargeObjectStoreError",
    "wrap",
]
