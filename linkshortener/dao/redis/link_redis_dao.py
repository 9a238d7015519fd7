"""Data Access Object (DAO) implementation for managing links in Redis

This module provides a Redis-based implementation of LinkBaseDAO, the
authoritative record of every short code.

Responsibilities:
    - Insert links under the short code unique constraint;
    - Maintain the fingerprint -> short code deduplication index;
    - Retrieve links by short code or by fingerprint;
    - Maintain per-link click counters;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Key layout (see RedisKeySchema):
    <prefix>:links:<shortcode>              -> JSON {target, fingerprint, created_at, expires_at}
    <prefix>:links:<shortcode>:clicks       -> click counter
    <prefix>:fingerprints:<fingerprint>     -> shortcode

All three keys of a link carry the link's expiry (EXAT), so expired links
vanish on their own. Links without an expiry are kept indefinitely.

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> from linkshortener.dao.redis import LinkRedisDAO
    >>> dao = LinkRedisDAO(prefix="linkshortener:dev")

    >>> link = LinkModel(
    ...     shortcode="abc123",
    ...     target="https://example.com/page",
    ...     fingerprint="6b0d...",
    ...     created_at=datetime.now(UTC),
    ... )
    >>> dao.insert(link)
    LinkModel(shortcode='abc123', ...)

    >>> dao.find_by_code("abc123").target
    'https://example.com/page'
    >>> dao.increment_clicks("abc123")
    1
"""

import json
import logging
from datetime import datetime

import redis
from beartype import beartype

from linkshortener.models import LinkModel
from linkshortener.types import LinkRecord
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error
from linkshortener.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


logger = logging.getLogger(__name__)


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing links

    This class implements the LinkBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        find_by_code(shortcode: str) -> LinkModel | None:
            Retrieve a link and its click count by short code.

        find_by_fingerprint(fingerprint: str) -> LinkModel | None:
            Retrieve the link currently indexed under a URL fingerprint.

        insert(link: LinkModel) -> LinkModel:
            Insert a link, its click counter and its fingerprint index entry.
            Raises LinkAlreadyExistsError when the short code is taken.

        increment_clicks(shortcode: str) -> int:
            Increment the click counter of an existing link.
            Raises LinkNotFoundError when the short code doesn't exist.

    All methods raise DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def find_by_code(self, shortcode: str) -> LinkModel | None:
        """Retrieve a stored link by short code

        Fetches the link record and its click counter in a single Redis
        transaction. Records whose expiry has passed are reported as absent
        even if Redis hasn't evicted them yet.

        Args:
            shortcode (str):
                The short code of the link.

        Returns:
            LinkModel | None:
                The link if found and not expired, otherwise None.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.find_by_code('abc123')
            LinkModel(shortcode='abc123', target='https://example.com', ...)
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(self.keys.link_key(shortcode))
            pipe.get(self.keys.link_clicks_key(shortcode))
            blob, clicks = pipe.execute()

        if blob is None:
            return None

        link = self._deserialize(shortcode, blob, clicks)
        return None if link.is_expired() else link

    @handle_redis_connection_error
    @beartype
    def find_by_fingerprint(self, fingerprint: str) -> LinkModel | None:
        """Retrieve the link indexed under a URL fingerprint

        The fingerprint index is last-writer-wins: if two links were created
        for the same URL, the most recent one is returned.

        Args:
            fingerprint (str):
                SHA-256 hex digest of the normalized target URL.

        Returns:
            LinkModel | None:
                The link if found and not expired, otherwise None.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        shortcode = self.redis.get(self.keys.fingerprint_key(fingerprint))
        if shortcode is None:
            return None

        link = self.find_by_code(shortcode)
        # The index entry may outlive its link by a moment, or point at a code
        # whose record was removed by hand.
        if link is None or link.fingerprint != fingerprint:
            return None
        return link

    @handle_redis_connection_error
    @beartype
    def insert(self, link: LinkModel) -> LinkModel:
        """Insert a link into Redis

        The link key is WATCHed, checked and then written together with its
        click counter and fingerprint index entry in one MULTI/EXEC
        transaction. If another writer claims the short code in between,
        EXEC aborts and nothing is written:

            (writer 1): WATCH links:abc123 -> EXISTS links:abc123 => 0
            (writer 2): SET links:abc123 ... NX => OK
            (writer 1): MULTI; SET ...; EXEC => aborted (WatchError)

        Args:
            link (LinkModel):
                The link to be inserted.

        Returns:
            LinkModel: the inserted link.

        Raises:
            LinkAlreadyExistsError:
                If a link with the same short code already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        link_key = self.keys.link_key(link.shortcode)
        clicks_key = self.keys.link_clicks_key(link.shortcode)
        fingerprint_key = self.keys.fingerprint_key(link.fingerprint)
        expiry = {} if link.expires_at is None else {'exat': int(link.expires_at.timestamp())}

        with self.redis.pipeline(transaction=True) as pipe:
            try:
                pipe.watch(link_key)
                if pipe.exists(link_key):
                    raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")

                pipe.multi()
                pipe.set(link_key, self._serialize(link), nx=True, **expiry)
                pipe.set(clicks_key, link.clicks, **expiry)
                pipe.set(fingerprint_key, link.shortcode, **expiry)
                created, _, _ = pipe.execute()
            except redis.exceptions.WatchError as e:
                raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.") from e

        if not created:
            raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")

        logger.debug('Inserted link.', extra={'shortcode': link.shortcode, 'expiresAt': link.expires_at})
        return link

    @handle_redis_connection_error
    @beartype
    def increment_clicks(self, shortcode: str) -> int:
        """Increment the click counter of a link

        The link key is WATCHed while the counter is bumped, and the counter
        is (re)created with the link's own expiry. A counter can therefore
        neither outlive its link nor be resurrected for a link that expired
        a moment ago:

            WATCH links:abc123 -> GET links:abc123 => record (expires_at)
            MULTI
            SET links:abc123:clicks 0 NX [EXAT expires_at]
            INCR links:abc123:clicks
            EXEC

        Args:
            shortcode (str):
                The short code of the link.

        Return:
            int:
                click count after the increment.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists, or it vanished
                during the increment.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.increment_clicks('abc123')
            42
        """
        link_key = self.keys.link_key(shortcode)
        clicks_key = self.keys.link_clicks_key(shortcode)

        with self.redis.pipeline(transaction=True) as pipe:
            try:
                pipe.watch(link_key)
                blob = pipe.get(link_key)
                if blob is None:
                    raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")

                expires_at = json.loads(blob).get('expires_at')
                expiry = {} if expires_at is None else {'exat': int(datetime.fromisoformat(expires_at).timestamp())}

                pipe.multi()
                pipe.set(clicks_key, 0, nx=True, **expiry)
                pipe.incr(clicks_key)
                _, clicks = pipe.execute()
            except redis.exceptions.WatchError as e:
                # Link keys are written once; a change under WATCH means the link expired
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.") from e

        return clicks

    @staticmethod
    def _serialize(link: LinkModel) -> str:
        record: LinkRecord = {
            'target': link.target,
            'fingerprint': link.fingerprint,
            'created_at': link.created_at.isoformat(),
            'expires_at': None if link.expires_at is None else link.expires_at.isoformat(),
        }
        return json.dumps(record)

    @staticmethod
    def _deserialize(shortcode: str, blob: str, clicks: str | None) -> LinkModel:
        record: LinkRecord = json.loads(blob)
        expires_at = record.get('expires_at')
        return LinkModel(
            shortcode=shortcode,
            target=record['target'],
            fingerprint=record['fingerprint'],
            created_at=datetime.fromisoformat(record['created_at']),
            expires_at=None if expires_at is None else datetime.fromisoformat(expires_at),
            clicks=int(clicks or 0),
        )
