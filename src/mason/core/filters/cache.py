"""Cache backend contract and the ``Cache`` dynamic filter.

The backend is an external collaborator; MemoryCache is the in-process
reference implementation used by default and in tests.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Tuple

from .base import DynamicFilter, YieldBlock

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    """Minimal cache interface used by the Cache filter."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str, options: Optional[Mapping[str, Any]] = None) -> None: ...


class MemoryCache:
    """Dict-backed cache honouring an ``expires_in`` option (seconds).

    Reference backend only: an expired entry is evicted when a read finds it
    or when ``purge_expired()`` runs, and there is no size bound, so entries
    that are never read again stay in memory until purged or cleared.
    """

    def __init__(
        self,
        default_expires_in: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_expires_in = default_expires_in
        self._clock = clock
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}

    def get(self, key: str) -> Optional[str]:
        item = self._data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    def set(self, key: str, value: str, options: Optional[Mapping[str, Any]] = None) -> None:
        expires_in = (options or {}).get("expires_in", self.default_expires_in)
        expires_at = self._clock() + float(expires_in) if expires_in is not None else None
        self._data[key] = (value, expires_at)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def purge_expired(self) -> int:
        """Evict every expired entry and return how many were dropped."""
        now = self._clock()
        expired = [k for k, (_, at) in self._data.items() if at is not None and now >= at]
        for key in expired:
            del self._data[key]
        return len(expired)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


def cache_filter(
    key: str,
    expires_in: Optional[float] = None,
    *,
    cache: Optional[CacheBackend] = None,
) -> DynamicFilter:
    """Build a filter that serves ``key`` from cache or renders and stores it.

    On a hit the yield block is not called. When ``cache`` is omitted the
    active request's cache is used.
    """
    def run(yield_block: YieldBlock) -> str:
        backend = cache
        if backend is None:
            from mason.core.context import current_request

            backend = current_request().cache
        cached = backend.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached
        logger.debug("Cache miss for %s", key)
        value = yield_block()
        options = {"expires_in": expires_in} if expires_in is not None else None
        backend.set(key, value, options)
        return value

    return DynamicFilter(run, name="Cache")


__all__ = ["CacheBackend", "MemoryCache", "cache_filter"]
