"""
Exception hierarchy for the paging adapter.

Every error raised by the adapter derives from LargeObjectStoreError so
callers can catch the whole family in one place.
"""


class LargeObjectStoreError(Exception):
    """Base class for all paging adapter errors."""


class BackendFailure(LargeObjectStoreError):
    """A read, write or delete against the backing store failed."""


class DecodeError(LargeObjectStoreError):
    """Payload or manifest bytes could not be deserialized."""


class EncodeError(LargeObjectStoreError):
    """A value could not be serialized."""


class CompressionError(LargeObjectStoreError):
    """Compressing or decompressing a payload failed."""


class KeyTooLongError(LargeObjectStoreError, ValueError):
    """
    The key leaves no room for payload in a backend entry.

    Attributes:
        key_length: Byte length of the offending key
        slice_size: The computed (non-positive) slice size
    """

    def __init__(self, key_length: int, slice_size: int):
        self.key_length = key_length
        self.slice_size = slice_size
        super().__init__(
            f"key of {key_length} bytes leaves a slice size of {slice_size}"
        )
