"""
Manifest Module

The manifest is the entry stored at page 0 of every key. It is a tagged
record, so readers never have to guess its meaning from the value type.

Wire format:
    b"R" + <encoded payload>          raw mode, the whole payload fits one page
    b"P" + <uint32 big-endian count>  paged mode, payload lives in pages 1..N
"""

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import DecodeError

_COUNT = struct.Struct(">I")


class ManifestMode(Enum):
    """Storage mode recorded in a manifest."""
    RAW = b"R"
    PAGED = b"P"


@dataclass(frozen=True)
class Manifest:
    """
    Decoded page-0 record.

    Attributes:
        mode: RAW or PAGED
        payload: The encoded payload (RAW only)
        page_count: Number of payload pages (PAGED), always 1 for RAW
    """
    mode: ManifestMode
    payload: Optional[bytes] = None
    page_count: int = 1

    @classmethod
    def raw(cls, payload: bytes) -> "Manifest":
        """Create a manifest carrying the payload inline."""
        return cls(mode=ManifestMode.RAW, payload=bytes(payload), page_count=1)

    @classmethod
    def paged(cls, page_count: int) -> "Manifest":
        """Create a manifest pointing at page_count payload pages."""
        if page_count < 2:
            raise ValueError(f"paged manifest needs at least 2 pages, got {page_count}")
        return cls(mode=ManifestMode.PAGED, page_count=page_count)

    @property
    def is_raw(self) -> bool:
        return self.mode is ManifestMode.RAW

    def to_bytes(self) -> bytes:
        """Serialize the manifest for storage at page 0."""
        if self.is_raw:
            return self.mode.value + self.payload
        return self.mode.value + _COUNT.pack(self.page_count)

    @classmethod
    def from_bytes(cls, data: bytes, max_pages: Optional[int] = None) -> "Manifest":
        """
        Parse a stored manifest.

        Args:
            data: The bytes stored at page 0
            max_pages: Largest page count accepted (None = no ceiling)

        Raises:
            DecodeError: For non-bytes input, an unknown tag or a bad count
        """
        if not isinstance(data, (bytes, bytearray)):
            raise DecodeError(f"manifest must be bytes, got {type(data).__name__}")
        if not data:
            raise DecodeError("empty manifest")

        tag, body = bytes(data[:1]), bytes(data[1:])
        if tag == ManifestMode.RAW.value:
            return cls(mode=ManifestMode.RAW, payload=body, page_count=1)

        if tag == ManifestMode.PAGED.value:
            if len(body) != _COUNT.size:
                raise DecodeError(f"paged manifest has {len(body)} count bytes")
            (page_count,) = _COUNT.unpack(body)
            if page_count < 2:
                raise DecodeError(f"paged manifest with page count {page_count}")
            if max_pages is not None and page_count > max_pages:
                raise DecodeError(f"paged manifest page count {page_count} exceeds {max_pages}")
            return cls(mode=ManifestMode.PAGED, page_count=page_count)

        raise DecodeError(f"unknown manifest tag {tag!r}")
