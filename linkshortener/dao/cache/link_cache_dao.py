"""DAO for caching short code -> target URL lookups in Redis

Responsibilities:
    - Serve target URLs for recently created or resolved links;
    - Store entries with a TTL no longer than the link's own lifetime;
    - Drop entries on request.

Key layout:
    cache:<prefix>:links:<shortcode>  -> JSON {target, expires_at}, EX <ttl>

The link's expiry is embedded in the entry: an entry whose link has already
expired is reported as a miss even while Redis still holds it.

NOTE:
    The cache is never authoritative. A miss says nothing about whether a short
    code exists; only the link store can answer that.

Classes:
    LinkCacheDAO:
        Cache-aside DAO for link lookups backed by Redis.

Example:
    >>> dao = LinkCacheDAO(prefix="linkshortener:dev")
    >>> dao.set_with_ttl("abc123", "https://example.com/page", 3600)
    True
    >>> dao.get("abc123")
    'https://example.com/page'
    >>> dao.invalidate("abc123")
    True
    >>> dao.get("abc123") is None
    True
"""

import json
import logging
from datetime import datetime
from typing import Optional

from beartype import beartype

from linkshortener.dao.base import LinkCacheBaseDAO
from linkshortener.dao.cache.cache_key_schema import CacheKeySchema
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_command_error, handle_redis_connection_error
from linkshortener.dao.exceptions import CacheError
from linkshortener.utils.helpers import is_expired


logger = logging.getLogger(__name__)


class LinkCacheDAO(RedisClientMixin, LinkCacheBaseDAO):
    """Redis-backed cache for link lookups

    Attributes (via mixins):
        redis (redis.Redis):
            Redis client used to communicate with the cache.
        keys (CacheKeySchema):
            Key schema helper for generating namespaced cache keys.

    Methods:
        get(shortcode: str) -> str | None:
            Cached target URL, or None on miss (absent, expired or unreadable entry).

        set_with_ttl(shortcode: str, target: str, ttl: int, expires_at: datetime | None = None) -> bool:
            Cache a target URL for `ttl` seconds. A non-positive TTL writes nothing.

        invalidate(shortcode: str) -> bool:
            Delete the cached entry.
    """

    def __init__(self, prefix: Optional[str] = None, **kwargs):
        super().__init__(prefix=prefix, **kwargs)
        self.keys = CacheKeySchema(prefix=prefix)

    @handle_redis_connection_error
    @handle_redis_command_error(CacheError)
    @beartype
    def get(self, shortcode: str) -> str | None:
        blob = self.redis.get(self.keys.link_key(shortcode))

        # CACHE MISS
        if blob is None:
            return None

        try:
            entry = json.loads(blob)
            target = entry['target']
            expires_at = entry.get('expires_at')
            expires_at = None if expires_at is None else datetime.fromisoformat(expires_at)
        except (ValueError, KeyError, TypeError):
            logger.warning('Discarding unreadable cache entry.', extra={'shortcode': shortcode})
            return None

        # CACHE HIT on an already expired link: treat as a miss
        if is_expired(expires_at):
            return None
        return target

    @handle_redis_connection_error
    @handle_redis_command_error(CacheError)
    @beartype
    def set_with_ttl(self, shortcode: str, target: str, ttl: int, expires_at: Optional[datetime] = None) -> bool:
        """Cache a target URL for `ttl` seconds

        Args:
            shortcode (str):
                The short code of the link.
            target (str):
                The link's target URL.
            ttl (int):
                Seconds to keep the entry. Values <= 0 skip the write, since
                Redis rejects non-positive expiries.
            expires_at (Optional[datetime]):
                The link's own expiry, embedded in the entry.

        Returns:
            bool: True if the entry was written.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
            CacheError:
                If Redis rejects the write (e.g. READONLY, OOM).
        """
        if ttl <= 0:
            return False

        entry = {
            'target': target,
            'expires_at': None if expires_at is None else expires_at.isoformat(),
        }
        return bool(self.redis.set(self.keys.link_key(shortcode), json.dumps(entry), ex=ttl))

    @handle_redis_connection_error
    @handle_redis_command_error(CacheError)
    @beartype
    def invalidate(self, shortcode: str) -> bool:
        return self.redis.delete(self.keys.link_key(shortcode)) > 0
