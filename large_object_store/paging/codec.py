"""
Entry Codec Module

Turns a logical value into the byte payload that gets paged into the
backend, and back again.

Payload framing:
    compress=False:  pickle(value)
    compress=True:   pickle(CompressedEntry(zlib(pickle(value))))

On decode the outer pickle is loaded first; if it yields a
CompressedEntry the inner bytes are inflated and loaded again.

Payloads are unpickled, so the backend must only hold data written by
trusted processes.
"""

import pickle
import zlib
from typing import Any, Optional

from ..config.settings import settings
from .errors import CompressionError, DecodeError, EncodeError


class CompressedEntry:
    """
    Envelope holding the compressed pickle of a value.

    Attributes:
        compressed_value: zlib-deflated pickle bytes of the wrapped value
    """

    def __init__(self, compressed_value: bytes):
        self.compressed_value = compressed_value

    @classmethod
    def wrap(cls, serialized: bytes, level: int = -1) -> "CompressedEntry":
        """Compress already-serialized bytes into a new envelope."""
        try:
            return cls(zlib.compress(serialized, level))
        except zlib.error as exc:
            raise CompressionError(f"compression failed: {exc}") from exc

    def decompress(self) -> bytes:
        """Return the serialized bytes held by this envelope."""
        try:
            return zlib.decompress(self.compressed_value)
        except (zlib.error, TypeError) as exc:
            raise CompressionError(f"decompression failed: {exc}") from exc

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompressedEntry):
            return NotImplemented
        return self.compressed_value == other.compressed_value

    def __repr__(self) -> str:
        return f"CompressedEntry({len(self.compressed_value)} bytes)"


class EntryCodec:
    """
    Serializer for logical values with optional zlib compression.

    Usage:
        codec = EntryCodec()
        payload = codec.encode({"rows": rows}, compress=True)
        value = codec.decode(payload)

    Attributes:
        protocol: Pickle protocol used for both the value and the envelope
        compression_level: zlib level (0-9, or -1 for the zlib default)
    """

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL, compression_level: Optional[int] = None):
        self.protocol = protocol
        self.compression_level = (
            compression_level if compression_level is not None else settings.COMPRESSION_LEVEL
        )

    def encode(self, value: Any, compress: bool = False) -> bytes:
        """
        Serialize a value into an encoded payload.

        Args:
            value: Any picklable object
            compress: Wrap the serialized value in a CompressedEntry

        Returns:
            The payload bytes to be split into pages

        Raises:
            EncodeError: If the value cannot be pickled
            CompressionError: If zlib rejects the input
        """
        serialized = self._dumps(value)
        if not compress:
            return serialized

        entry = CompressedEntry.wrap(serialized, self.compression_level)
        return self._dumps(entry)

    def decode(self, data: bytes) -> Any:
        """
        Deserialize an encoded payload back into its value.

        Raises:
            DecodeError: If the bytes are not a valid payload
            CompressionError: If a compressed envelope cannot be inflated
        """
        loaded = self._loads(data)
        if isinstance(loaded, CompressedEntry):
            return self._loads(loaded.decompress())
        return loaded

    def _dumps(self, value: Any) -> bytes:
        try:
            return pickle.dumps(value, protocol=self.protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            raise EncodeError(f"cannot serialize {type(value).__name__}: {exc}") from exc

    @staticmethod
    def _loads(data: bytes) -> Any:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise DecodeError(f"expected bytes, got {type(data).__name__}")
        try:
            return pickle.loads(data)
        except Exception as exc:
            # Corrupt pickles can fail with almost any exception type
            raise DecodeError(f"malformed payload: {exc}") from exc
