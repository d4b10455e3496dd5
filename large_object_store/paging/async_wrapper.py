"""
Async Paged Store Wrapper Module

Coroutine version of LargeObjectStore for asyncio backends. Semantics
and key layout are identical; see wrapper.py for the caveats.

Payload pages are fetched with the backend's read_multi() when it has
one, otherwise with concurrent single reads via asyncio.gather().
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Optional, Sequence

from .backend import AsyncStore
from .errors import BackendFailure
from .manifest import Manifest
from .splitter import page_key, page_keys
from .wrapper import PagedLayout

logger = logging.getLogger(__name__)


class AsyncLargeObjectStore(PagedLayout):
    """
    Async adapter storing arbitrarily large values in a size-capped backend.

    Usage:
        cache = AsyncLargeObjectStore(AsyncKVStore())
        await cache.write("report", rows, compress=True)
        rows = await cache.read("report")
    """

    def __init__(self, store: AsyncStore, **kwargs: Any):
        super().__init__(**kwargs)
        self.store = store

    async def write(self, key: str, value: Any, compress: bool = False, **options: Any) -> bool:
        """Store a value under key. Returns False if any backend write failed."""
        pages = self.encode_pages(key, value, compress)

        if len(pages) == 1:
            return await self._write_entry(page_key(key, 0), Manifest.raw(pages[0]).to_bytes(), options)

        page_options = dict(options, raw=True)
        for index, page in enumerate(pages, start=1):
            if not await self._write_entry(page_key(key, index), page, page_options):
                logger.warning(f"Aborted write of {key}: page {index}/{len(pages)} not stored")
                return False

        return await self._write_entry(page_key(key, 0), Manifest.paged(len(pages)).to_bytes(), options)

    async def read(self, key: str) -> Optional[Any]:
        """Read the value stored under key, None on a miss or partial read."""
        data = await self.store.read(page_key(key, 0))
        if data is None:
            return None

        manifest = self.read_manifest(data)
        if manifest.is_raw:
            payload = manifest.payload
        else:
            keys = page_keys(key, manifest.page_count)
            payload = self.join_pages(key, keys, await self._read_pages(keys))
            if payload is None:
                return None

        return self.codec.decode(payload)

    async def fetch(
            self,
            key: str,
            producer: Callable[[], Any],
            compress: bool = False,
            **options: Any,
    ) -> Any:
        """
        Return the cached value, computing and storing it on a miss.

        The producer may be a plain function or return an awaitable.
        """
        value = await self.read(key)
        if value is not None:
            return value

        value = producer()
        if inspect.isawaitable(value):
            value = await value
        if not await self.write(key, value, compress=compress, **options):
            logger.debug(f"fetch could not store {key}")
        return value

    async def delete(self, key: str) -> bool:
        """Delete the manifest of key only."""
        return await self.store.delete(page_key(key, 0))

    async def purge(self, key: str) -> bool:
        """Delete the manifest of key and all of its payload pages."""
        data = await self.store.read(page_key(key, 0))
        if data is None:
            return False

        manifest = self.read_manifest(data)
        if not manifest.is_raw:
            await asyncio.gather(
                *(self.store.delete(page) for page in page_keys(key, manifest.page_count))
            )
        return await self.store.delete(page_key(key, 0))

    async def page_count(self, key: str) -> Optional[int]:
        """Number of pages recorded for key (1 in raw mode), None on a miss."""
        data = await self.store.read(page_key(key, 0))
        if data is None:
            return None
        return self.read_manifest(data).page_count

    async def _read_pages(self, keys: Sequence[str]) -> Dict[str, Optional[bytes]]:
        read_multi = getattr(self.store, "read_multi", None)
        if read_multi is not None:
            return await read_multi(keys)

        values = await asyncio.gather(*(self.store.read(k) for k in keys))
        return dict(zip(keys, values))

    async def _write_entry(self, key: str, value: bytes, options: Dict[str, Any]) -> bool:
        try:
            return bool(await self.store.write(key, value, **options))
        except BackendFailure as exc:
            logger.warning(f"Backend write of {key} failed: {exc}")
            return False
