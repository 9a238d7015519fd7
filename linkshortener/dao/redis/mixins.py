"""Shared Redis client and connectivity check for Redis-backed DAOs

Every Redis-backed DAO in this package (link store, link cache, rate windows,
click event publisher) mixes in RedisClientMixin ahead of its base DAO:

    >>> class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    ...     pass
    ...
    >>> dao = LinkRedisDAO(prefix='linkshortener:prod', **load_config().redis_config())
    >>> dao._healthcheck()
    True
"""

from typing import Optional

import redis

from linkshortener.dao.redis.redis_key_schema import RedisKeySchema
from linkshortener.dao.redis.helpers import _describe_connection, create_redis_client
from linkshortener.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Redis client, key schema and PING healthcheck

    A DAO either receives a ready `redis_client` or builds its own from the
    `redis_*` keyword arguments accepted by create_redis_client(). DAOs built
    by create_services() share one client, and with it one connection pool;
    only the first of them needs to PING Redis.

    Attributes:
        redis (redis.Redis):
            Client used by the DAO.
        keys (RedisKeySchema):
            Namespaced key names. DAOs with their own key layout replace it.

    Raises:
        DataStoreError:
            On construction, if `healthcheck` is set and Redis is unreachable.
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
        healthcheck: bool = True,
        **redis_config,
    ):
        self.redis = redis_client if redis_client is not None else create_redis_client(**redis_config)
        self.keys = RedisKeySchema(prefix=prefix)

        if healthcheck:
            self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns:
            bool: True if Redis answered. False if it didn't and `raise_error` is unset.

        Raises:
            DataStoreError:
                If Redis didn't answer and `raise_error` is set.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {_describe_connection(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True
