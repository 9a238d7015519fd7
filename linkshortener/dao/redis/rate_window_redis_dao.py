"""Fixed rate limit windows kept as Redis counters

Each client owns at most one window key at a time:

    <prefix>:ratelimit:<xxh64(client key)>  -> request count, EX <window seconds>

Classes:
    RateWindowRedisDAO:
        Count requests against per-client windows in Redis.
"""

import logging

from beartype import beartype

from linkshortener.models import RateWindowModel
from linkshortener.dao.base import RateWindowBaseDAO
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_command_error, handle_redis_connection_error
from linkshortener.dao.exceptions import RateWindowError


logger = logging.getLogger(__name__)


class RateWindowRedisDAO(RedisClientMixin, RateWindowBaseDAO):
    """Redis-based DAO for fixed rate limit windows

    Methods:
        hit(client_key: str, window_seconds: int) -> RateWindowModel:
            Count one request against the client's window and report the
            resulting count and remaining window TTL.
            Raises DataStoreError on connectivity issues with Redis and
            RateWindowError when Redis rejects the update.

    Example:
        >>> dao = RateWindowRedisDAO(prefix='linkshortener:dev')
        >>> dao.hit('203.0.113.7', 900)
        RateWindowModel(client_key='203.0.113.7', count=1, ttl=900)
    """

    @handle_redis_connection_error
    @handle_redis_command_error(RateWindowError)
    @beartype
    def hit(self, client_key: str, window_seconds: int) -> RateWindowModel:
        """Count one request against the client's current window

        Window creation, expiry and increment run in one MULTI/EXEC
        transaction, so a window can never exist without an expiry:

            SET <key> 0 NX EX <window>   -> opens the window if none is open
            INCR <key>                   -> counts this request
            TTL <key>                    -> seconds until the window resets

        NOTE: a TTL of -1 means the key exists without expiry, which can only
              happen if something outside this DAO wrote it (e.g. a plain INCR
              from an older deployment). Such a window would never reset, so it
              is given a fresh expiry here.

        Args:
            client_key (str):
                Client identity, e.g. an IP address or API key.
            window_seconds (int):
                Window length in seconds.

        Returns:
            RateWindowModel: count (including this request) and window TTL.

        Raises:
            ValueError:
                If window_seconds is not positive.
            DataStoreError:
                If Redis connectivity issues occur.
            RateWindowError:
                If Redis rejects the update (e.g. READONLY, OOM).
        """
        if window_seconds <= 0:
            raise ValueError(f'Window must be a positive number of seconds (given value: {window_seconds}).')

        key = self.keys.rate_window_key(client_key)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(key, 0, nx=True, ex=window_seconds)
            pipe.incr(key)
            pipe.ttl(key)
            _, count, ttl = pipe.execute()

        if ttl < 0:
            logger.warning('Rate window without expiry, repairing.', extra={'key': key, 'ttl': ttl})
            self.redis.expire(key, window_seconds)
            ttl = window_seconds

        return RateWindowModel(client_key=client_key, count=count, ttl=ttl)
