"""Store capability protocols consumed by the paging adapter."""

from typing import Any, Dict, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Store(Protocol):
    """
    Synchronous key-value backend with a per-entry size limit.

    write() options include ``raw=True`` for payload pages (store the bytes
    as an opaque blob) and pass-through backend options such as ``ttl``.
    A store signals failure by returning False or raising BackendFailure.
    """

    def write(self, key: str, value: bytes, **options: Any) -> bool:
        ...

    def read(self, key: str) -> Optional[bytes]:
        ...

    def read_multi(self, keys: Sequence[str]) -> Dict[str, Optional[bytes]]:
        """Return every requested key, mapped to None when absent."""
        ...

    def delete(self, key: str) -> bool:
        ...


@runtime_checkable
class AsyncStore(Protocol):
    """Coroutine flavour of Store. read_multi is optional."""

    async def write(self, key: str, value: bytes, **options: Any) -> bool:
        ...

    async def read(self, key: str) -> Optional[bytes]:
        ...

    async def delete(self, key: str) -> bool:
        ...
