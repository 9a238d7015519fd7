"""Redis client construction and error translation shared by Redis-backed DAOs

Functions:
    create_redis_client(...) -> redis.Redis
        Build a client from `redis_*` connection details
        (see ShortenerConfig.redis_config()).

    handle_redis_connection_error(method)
        Decorator translating redis-py connectivity errors into DataStoreError.

    handle_redis_command_error(error)(method)
        Decorator translating commands rejected by Redis into `error`.
"""

import functools
import redis
from typing import TypeVar, Any, Optional
from collections.abc import Callable

from linkshortener.dao.exceptions import DAOError, DataStoreError


__all__ = ['create_redis_client', 'handle_redis_connection_error', 'handle_redis_command_error']

F = TypeVar('F', bound=Callable[..., Any])


def _describe_connection(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def create_redis_client(
    redis_host: str = 'localhost',
    redis_port: int = 6379,
    redis_db: int = 0,
    redis_username: Optional[str] = None,
    redis_password: Optional[str] = None,
    redis_socket_timeout: Optional[float] = None,
    redis_decode_responses: bool = True,
) -> redis.Redis:
    """Build a Redis client

    The socket timeout bounds both connecting and every single call, so an
    unresponsive Redis surfaces as DataStoreError instead of a hung request.
    None waits indefinitely.

    Example:
        >>> client = create_redis_client(**load_config().redis_config())
    """
    return redis.Redis(
        host=redis_host,
        port=int(redis_port),
        db=int(redis_db),
        username=redis_username,
        password=redis_password,
        socket_timeout=redis_socket_timeout,
        socket_connect_timeout=redis_socket_timeout,
        decode_responses=redis_decode_responses,
    )


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Both refused connections and socket timeouts are translated, so a caller
    never has to know about redis-py's exception hierarchy.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            redis.exceptions.ConnectionError or redis.exceptions.TimeoutError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def find_by_code(self, shortcode):
        ...     return self.redis.get(self.keys.link_key(shortcode))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {_describe_connection(self.redis)}.") from e

    return wrapper


def handle_redis_command_error(error: type[DAOError]) -> Callable[[F], F]:
    """Wrap Redis-interacting DAO methods to translate rejected commands

    Redis may refuse a command while the connection is fine, e.g. READONLY
    from a replica after a failover or OOM under `maxmemory-policy noeviction`.
    Such errors are raised as `error`. Connectivity errors pass through
    untouched, so stack this decorator below handle_redis_connection_error.

    Args:
        error (type[DAOError]):
            DAO exception to raise for rejected commands.

    Example:
        >>> @handle_redis_connection_error
        ... @handle_redis_command_error(CacheError)
        ... def get(self, shortcode):
        ...     return self.redis.get(self.keys.link_key(shortcode))
    """

    def decorator(method: F) -> F:
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError):
                raise
            except redis.exceptions.RedisError as e:
                raise error(f'Redis rejected {method.__name__}() at {_describe_connection(self.redis)}: {e}') from e

        return wrapper

    return decorator
