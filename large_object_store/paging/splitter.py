"""
Page Splitter Module

Pure functions that decide how an encoded payload is cut into pages.

The key is stored on the same slab page as the value, so every byte of
key reduces the room left for payload:

    slice_size = max_object_size - item_header_size - len(key bytes)
    page_count = ceil(len(payload) / slice_size), at least 1
"""

import math
from typing import List

from .errors import KeyTooLongError


def key_length(key: str) -> int:
    """Byte length of a key as the backend stores it."""
    return len(key.encode("utf-8"))


def slice_size(key_byte_length: int, max_object_size: int, item_header_size: int) -> int:
    """
    Compute the number of payload bytes that fit in one page.

    Raises:
        KeyTooLongError: If nothing is left for payload
    """
    size = max_object_size - item_header_size - key_byte_length
    if size <= 0:
        raise KeyTooLongError(key_byte_length, size)
    return size


def page_count(payload_length: int, size: int) -> int:
    """Number of pages needed for payload_length bytes at size bytes per page."""
    return max(1, math.ceil(payload_length / size))


def split(
        payload: bytes,
        key_byte_length: int,
        max_object_size: int,
        item_header_size: int,
) -> List[bytes]:
    """
    Cut a payload into ordered page slices.

    Every slice holds exactly slice_size bytes except the last, which
    holds the remainder. An empty payload yields one empty slice. The
    number of slices always equals page_count().

    Example:
        >>> [len(s) for s in split(b"x" * 1800, 1, 1000, 100)]
        [899, 899, 2]
    """
    size = slice_size(key_byte_length, max_object_size, item_header_size)
    if not payload:
        return [b""]
    return [payload[start:start + size] for start in range(0, len(payload), size)]


def page_key(base_key: str, index: int) -> str:
    """Backend key for page index of base_key (0 is the manifest)."""
    return f"{base_key}_{index}"


def page_keys(base_key: str, count: int) -> List[str]:
    """Backend keys of payload pages 1..count, in order."""
    return [page_key(base_key, index) for index in range(1, count + 1)]
