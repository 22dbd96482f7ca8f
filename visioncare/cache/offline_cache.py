"""
Offline cache for table responses and static assets.

Works like a browser service worker cache:
- install(): pre-populate the named cache with the app-shell asset list
- activate(): drop every cache whose name is not the current one
- network_first(): table data, falling back to the last stored copy
- cache_first(): static assets, fetched once and then served from the cache
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]


class CacheStorage:
    """In-process store of named caches (cache name -> key -> value)."""

    def __init__(self) -> None:
        self._caches: Dict[str, Dict[str, Any]] = {}

    def open(self, name: str) -> Dict[str, Any]:
        return self._caches.setdefault(name, {})

    def keys(self) -> List[str]:
        return list(self._caches.keys())

    def delete(self, name: str) -> bool:
        return self._caches.pop(name, None) is not None

    def match(self, key: str) -> Optional[Any]:
        for cache in self._caches.values():
            if key in cache:
                return cache[key]
        return None


class OfflineCache:
    def __init__(
        self,
        name: str,
        storage: Optional[CacheStorage] = None,
        assets: Iterable[str] = (),
    ) -> None:
        self.name = name
        self.storage = storage or CacheStorage()
        self.assets = list(assets)

    @property
    def cache(self) -> Dict[str, Any]:
        return self.storage.open(self.name)

    async def install(self, loader: Callable[[str], Awaitable[Any]]) -> int:
        """Cache every configured asset; returns how many were stored."""
        cache = self.cache
        for asset in self.assets:
            cache[asset] = await loader(asset)
        logger.info("Cached app shell: %d assets in %s", len(self.assets), self.name)
        return len(self.assets)

    def activate(self) -> List[str]:
        deleted = []
        for cache_name in self.storage.keys():
            if cache_name != self.name:
                logger.info("Deleting old cache: %s", cache_name)
                self.storage.delete(cache_name)
                deleted.append(cache_name)
        return deleted

    def put(self, key: str, value: Any) -> None:
        self.cache[key] = value

    def match(self, key: str) -> Optional[Any]:
        return self.storage.match(key)

    async def network_first(self, key: str, fetch: Fetcher, fallback_on: tuple = (Exception,)) -> Any:
        try:
            value = await fetch()
        except fallback_on as e:
            cached = self.match(key)
            if cached is None:
                raise
            logger.warning("Network request for %s failed (%s); serving cached copy", key, e)
            return cached
        self.put(key, value)
        return value

    async def cache_first(self, key: str, fetch: Fetcher) -> Any:
        cached = self.match(key)
        if cached is not None:
            return cached
        value = await fetch()
        if value is not None:
            self.put(key, value)
        return value
