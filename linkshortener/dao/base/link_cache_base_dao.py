"""Abstract base class for the short code -> target URL cache.

The cache is a disposable, time-bounded copy of the link store. Entries may
be evicted or go stale at any time; callers must never use the cache to
decide whether a short code exists or is free.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional


class LinkCacheBaseDAO(ABC):
    """Interface for link cache data access objects (DAOs).

    Methods:
        get(shortcode: str) -> str | None:
            Cached target URL, or None on miss.

        set_with_ttl(shortcode: str, target: str, ttl: int, expires_at: datetime | None = None) -> bool:
            Cache a target URL for `ttl` seconds. Returns False if nothing was written.

        invalidate(shortcode: str) -> bool:
            Drop a cached entry. Returns True if an entry was removed.

    All methods raise DataStoreError when the cache is unreachable and
    CacheError when it rejects a command.
    """

    @abstractmethod
    def get(self, shortcode: str) -> str | None:
        pass

    @abstractmethod
    def set_with_ttl(self, shortcode: str, target: str, ttl: int, expires_at: Optional[datetime] = None) -> bool:
        pass

    @abstractmethod
    def invalidate(self, shortcode: str) -> bool:
        pass
