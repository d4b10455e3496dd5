"""Paging adapter for size-limited key-value backends."""

from .async_wrapper import AsyncLargeObjectStore
from .backend import AsyncStore, Store
from .codec import CompressedEntry, EntryCodec
from .errors import (
    BackendFailure,
    CompressionError,
    DecodeError,
    EncodeError,
    KeyTooLongError,
    LargeObjectStoreError,
)
from .manifest import Manifest, ManifestMode
from .wrapper import LargeObjectStore, wrap

__all__ = [
    "AsyncLargeObjectStore",
    "AsyncStore",
    "BackendFailure",
    "CompressedEntry",
    "CompressionError",
    "DecodeError",
    "EncodeError",
    "EntryCodec",
    "KeyTooLongError",
    "LargeObjectStore",
    "LargeObjectStoreError",
    "Manifest",
    "ManifestMode",
    "Store",
    "wrap",
]
