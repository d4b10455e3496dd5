"""
Paged Store Wrapper Module

LargeObjectStore sits in front of a size-limited key-value backend and
stores values of any size by splitting their encoded payload across
several backend entries.

Key layout for a logical key "report":
    report_0        manifest (raw payload, or the page count)
    report_1..N     payload slices, only in paged mode

Caveats:
- Multi-page writes are not atomic. A failed page write aborts the
  write and leaves earlier pages orphaned with no manifest.
- Concurrent writers to one key are not coordinated. A reader can pair
  the manifest of one writer with pages of another (a torn read); the
  result then fails to decode or decodes to a mix of the two values.
- delete() only removes the manifest. Payload pages stay until the
  backend evicts them or a later write overwrites them. Use purge() to
  remove them eagerly.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config.settings import settings
from .backend import Store
from .codec import EntryCodec
from .errors import BackendFailure, EncodeError
from .manifest import Manifest
from .splitter import key_length, page_key, page_keys, split

logger = logging.getLogger(__name__)


class PagedLayout:
    """
    Backend-independent paging logic shared by the sync and async wrappers.

    Attributes:
        max_object_size: Largest entry the backend accepts, in bytes
        item_header_size: Fixed per-entry overhead charged by the backend
        codec: EntryCodec used to (de)serialize values
        max_pages: Largest page count written or trusted on read
    """

    def __init__(
            self,
            max_object_size: int = None,
            item_header_size: int = None,
            codec: EntryCodec = None,
            max_pages: int = None,
    ):
        self.max_object_size = (
            max_object_size if max_object_size is not None else settings.MAX_OBJECT_SIZE
        )
        self.item_header_size = (
            item_header_size if item_header_size is not None else settings.ITEM_HEADER_SIZE
        )
        self.codec = codec if codec is not None else EntryCodec()
        self.max_pages = max_pages if max_pages is not None else settings.MAX_PAGES

    def encode_pages(self, key: str, value: Any, compress: bool = False) -> List[bytes]:
        """Encode a value and split it into the slices written for key."""
        payload = self.codec.encode(value, compress=compress)
        pages = split(payload, key_length(key), self.max_object_size, self.item_header_size)
        if len(pages) > self.max_pages:
            raise EncodeError(f"{key} needs {len(pages)} pages, limit is {self.max_pages}")
        logger.debug(f"Encoded {key}: {len(payload)} bytes in {len(pages)} page(s)")
        return pages

    def read_manifest(self, data: bytes) -> Manifest:
        """Parse page 0, rejecting page counts above max_pages."""
        return Manifest.from_bytes(data, max_pages=self.max_pages)

    @staticmethod
    def join_pages(
            key: str,
            keys: Sequence[str],
            found: Dict[str, Optional[bytes]],
    ) -> Optional[bytes]:
        """
        Concatenate fetched pages in index order.

        Returns None when any page is missing, since a partial payload
        cannot be decoded.
        """
        slices = [found.get(k) for k in keys]
        present = sum(1 for s in slices if s is not None)
        if present < len(keys):
            logger.debug(f"Partial read of {key}: {present}/{len(keys)} pages present")
            return None
        return b"".join(slices)


class LargeObjectStore(PagedLayout):
    """
    Stores arbitrarily large values in a backend with a per-entry size cap.

    Usage:
        cache = LargeObjectStore(KVStore())
        cache.write("report", rows, compress=True, ttl=3600)
        rows = cache.read("report")
        rows = cache.fetch("report", build_report, ttl=3600)

    A value of None cannot be told apart from a miss, so read() and
    fetch() treat a cached None as absent.

    Attributes:
        store: The wrapped backend (see backend.Store)
    """

    def __init__(self, store: Store, **kwargs: Any):
        super().__init__(**kwargs)
        self.store = store

    def write(self, key: str, value: Any, compress: bool = False, **options: Any) -> bool:
        """
        Store a value under key, paging it when it exceeds one entry.

        Args:
            key: Logical key
            value: Any picklable value
            compress: zlib-compress the serialized value before paging
            **options: Passed through to the backend (e.g. ttl)

        Returns:
            True if the manifest was stored, False if any backend write failed

        Raises:
            KeyTooLongError: If the key leaves no room for payload
            EncodeError, CompressionError: If the value cannot be encoded
        """
        pages = self.encode_pages(key, value, compress)

        if len(pages) == 1:
            return self._write_entry(page_key(key, 0), Manifest.raw(pages[0]).to_bytes(), options)

        page_options = dict(options, raw=True)
        for index, page in enumerate(pages, start=1):
            if not self._write_entry(page_key(key, index), page, page_options):
                logger.warning(f"Aborted write of {key}: page {index}/{len(pages)} not stored")
                return False

        return self._write_entry(page_key(key, 0), Manifest.paged(len(pages)).to_bytes(), options)

    def read(self, key: str) -> Optional[Any]:
        """
        Read and reassemble the value stored under key.

        Returns:
            The value, or None on a miss or when any payload page is gone

        Raises:
            DecodeError: If the manifest or payload is malformed
        """
        data = self.store.read(page_key(key, 0))
        if data is None:
            return None

        manifest = self.read_manifest(data)
        if manifest.is_raw:
            payload = manifest.payload
        else:
            keys = page_keys(key, manifest.page_count)
            payload = self.join_pages(key, keys, self.store.read_multi(keys))
            if payload is None:
                return None

        return self.codec.decode(payload)

    def fetch(
            self,
            key: str,
            producer: Callable[[], Any],
            compress: bool = False,
            **options: Any,
    ) -> Any:
        """
        Return the cached value, computing and storing it on a miss.

        The producer runs at most once and only on a miss. Its result is
        returned even when storing it fails.
        """
        value = self.read(key)
        if value is not None:
            return value

        value = producer()
        if not self.write(key, value, compress=compress, **options):
            logger.debug(f"fetch could not store {key}")
        return value

    def delete(self, key: str) -> bool:
        """Delete the manifest of key. Payload pages are left to expire."""
        return self.store.delete(page_key(key, 0))

    def purge(self, key: str) -> bool:
        """
        Delete the manifest of key and every payload page it points to.

        Returns:
            The backend result of the manifest delete, False on a miss
        """
        data = self.store.read(page_key(key, 0))
        if data is None:
            return False

        manifest = self.read_manifest(data)
        if not manifest.is_raw:
            for page in page_keys(key, manifest.page_count):
                self.store.delete(page)
        return self.store.delete(page_key(key, 0))

    def page_count(self, key: str) -> Optional[int]:
        """Number of pages recorded for key (1 in raw mode), None on a miss."""
        data = self.store.read(page_key(key, 0))
        if data is None:
            return None
        return self.read_manifest(data).page_count

    def _write_entry(self, key: str, value: bytes, options: Dict[str, Any]) -> bool:
        try:
            return bool(self.store.write(key, value, **options))
        except BackendFailure as exc:
            logger.warning(f"Backend write of {key} failed: {exc}")
            return False


def wrap(store: Store, **kwargs: Any) -> LargeObjectStore:
    """Wrap a backend store in a LargeObjectStore."""
    return LargeObjectStore(store, **kwargs)
