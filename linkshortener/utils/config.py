"""Utility functions for application configuration management.

Configuration is read from environment variables. Every tunable the engine
and the rate limiter consume has a default, so an empty environment yields a
working local setup against Redis on localhost:6379.

Environment variables:

    APP_NAME / APP_ENV
        Namespace for all Redis keys (`<APP_NAME>:<APP_ENV>`).
    REDIS_HOST / REDIS_PORT / REDIS_DB / REDIS_USERNAME / REDIS_PASSWORD
        Redis connection details.
    REDIS_SOCKET_TIMEOUT
        Seconds a single Redis call may block before it's abandoned.
    RATE_LIMIT_WINDOW_SECONDS / RATE_LIMIT_MAX_REQUESTS
        Fixed rate limit window length and ceiling.
    CACHE_DEFAULT_TTL_SECONDS
        Cache TTL for links which never expire.
    SHORT_CODE_LENGTH / MAX_GENERATION_RETRIES
        Generated short code length and collision retry ceiling.
    CLICK_EVENTS_CHANNEL
        Pub/sub channel where click events are published.
    SHORT_URL_BASE
        Public base URL used to render short URLs.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    load_config() -> ShortenerConfig
        Read the full application configuration from the environment.

Example:
    >>> from linkshortener.utils.config import load_config
    >>> config = load_config()
    >>> config.rate_limit_max_requests
    100
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from linkshortener.exceptions import BadConfigurationError
from linkshortener.types import RedisConfiguration
from linkshortener.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    SHORT_URL_BASE_ENV,
    REDIS_HOST_ENV,
    REDIS_PORT_ENV,
    REDIS_DB_ENV,
    REDIS_USERNAME_ENV,
    REDIS_PASSWORD_ENV,
    REDIS_SOCKET_TIMEOUT_ENV,
    RATE_LIMIT_WINDOW_SECONDS_ENV,
    RATE_LIMIT_MAX_REQUESTS_ENV,
    CACHE_DEFAULT_TTL_SECONDS_ENV,
    SHORT_CODE_LENGTH_ENV,
    MAX_GENERATION_RETRIES_ENV,
    CLICK_EVENTS_CHANNEL_ENV,
    SEVEN_DAYS_SECONDS,
    FIFTEEN_MINUTES_SECONDS,
    DEFAULT_RATE_LIMIT_MAX_REQUESTS,
    DEFAULT_SHORT_CODE_LENGTH,
    DEFAULT_MAX_GENERATION_RETRIES,
    DEFAULT_CLICK_EVENTS_CHANNEL,
    MIN_SHORT_CODE_LENGTH,
    MAX_SHORT_CODE_LENGTH,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShortenerConfig:
    """Resolved application configuration.

    Attributes:
        prefix (Optional[str]):
            Namespace prefix for Redis keys, e.g. 'linkshortener:dev'.
        redis_host, redis_port, redis_db, redis_username, redis_password:
            Redis connection details.
        redis_socket_timeout (float):
            Seconds a single Redis call may block.
        rate_limit_window_seconds (int):
            Length of a fixed rate limit window.
        rate_limit_max_requests (int):
            Requests admitted per client per window.
        cache_default_ttl_seconds (int):
            Cache TTL for links without an expiry.
        short_code_length (int):
            Length of generated short codes.
        max_generation_retries (int):
            Generation attempts before giving up on a free short code.
        click_events_channel (str):
            Pub/sub channel for click events.
        short_url_base (str):
            Public base URL for rendered short URLs.
    """

    prefix: Optional[str] = None
    redis_host: str = 'localhost'
    redis_port: int = 6379
    redis_db: int = 0
    redis_username: Optional[str] = None
    redis_password: Optional[str] = None
    redis_socket_timeout: float = 5.0
    rate_limit_window_seconds: int = FIFTEEN_MINUTES_SECONDS
    rate_limit_max_requests: int = DEFAULT_RATE_LIMIT_MAX_REQUESTS
    cache_default_ttl_seconds: int = SEVEN_DAYS_SECONDS
    short_code_length: int = DEFAULT_SHORT_CODE_LENGTH
    max_generation_retries: int = DEFAULT_MAX_GENERATION_RETRIES
    click_events_channel: str = DEFAULT_CLICK_EVENTS_CHANNEL
    short_url_base: str = 'http://localhost:3000'

    def redis_config(self) -> RedisConfiguration:
        """Return keyword arguments accepted by RedisClientMixin-based DAOs."""
        return {
            'redis_host': self.redis_host,
            'redis_port': self.redis_port,
            'redis_db': self.redis_db,
            'redis_username': self.redis_username,
            'redis_password': self.redis_password,
            'redis_socket_timeout': self.redis_socket_timeout,
        }


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(APP_NAME_ENV)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _int_from_env(name: str, default: int, minimum: int = 0, maximum: int | None = None) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default

    try:
        value = int(raw)
    except ValueError as e:
        raise BadConfigurationError(f'{name} must be an integer (given value: {raw!r}).') from e

    if value < minimum or (maximum is not None and value > maximum):
        bounds = f'>= {minimum}' if maximum is None else f'between {minimum} and {maximum}'
        raise BadConfigurationError(f'{name} must be {bounds} (given value: {value}).')
    return value


def _float_from_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default

    try:
        value = float(raw)
    except ValueError as e:
        raise BadConfigurationError(f'{name} must be a number (given value: {raw!r}).') from e

    if value <= 0:
        raise BadConfigurationError(f'{name} must be positive (given value: {value}).')
    return value


def load_config() -> ShortenerConfig:
    """Load application configuration from environment variables

    Returns:
        ShortenerConfig: resolved configuration, defaults filled in.

    Raises:
        BadConfigurationError:
            If a numeric variable is malformed or out of range.

    Example:
        >>> os.environ['RATE_LIMIT_MAX_REQUESTS'] = '3'
        >>> load_config().rate_limit_max_requests
        3
    """
    config = ShortenerConfig(
        prefix=app_prefix(),
        redis_host=os.environ.get(REDIS_HOST_ENV, 'localhost'),
        redis_port=_int_from_env(REDIS_PORT_ENV, 6379, minimum=1, maximum=65535),
        redis_db=_int_from_env(REDIS_DB_ENV, 0),
        redis_username=os.environ.get(REDIS_USERNAME_ENV) or None,
        redis_password=os.environ.get(REDIS_PASSWORD_ENV) or None,
        redis_socket_timeout=_float_from_env(REDIS_SOCKET_TIMEOUT_ENV, 5.0),
        rate_limit_window_seconds=_int_from_env(RATE_LIMIT_WINDOW_SECONDS_ENV, FIFTEEN_MINUTES_SECONDS, minimum=1),
        rate_limit_max_requests=_int_from_env(RATE_LIMIT_MAX_REQUESTS_ENV, DEFAULT_RATE_LIMIT_MAX_REQUESTS, minimum=1),
        cache_default_ttl_seconds=_int_from_env(CACHE_DEFAULT_TTL_SECONDS_ENV, SEVEN_DAYS_SECONDS, minimum=1),
        short_code_length=_int_from_env(
            SHORT_CODE_LENGTH_ENV,
            DEFAULT_SHORT_CODE_LENGTH,
            minimum=MIN_SHORT_CODE_LENGTH,
            maximum=MAX_SHORT_CODE_LENGTH,
        ),
        max_generation_retries=_int_from_env(MAX_GENERATION_RETRIES_ENV, DEFAULT_MAX_GENERATION_RETRIES, minimum=1),
        click_events_channel=os.environ.get(CLICK_EVENTS_CHANNEL_ENV, DEFAULT_CLICK_EVENTS_CHANNEL),
        short_url_base=os.environ.get(SHORT_URL_BASE_ENV, 'http://localhost:3000'),
    )
    logger.debug('Loaded configuration from environment.', extra={'prefix': config.prefix, 'redisHost': config.redis_host})
    return config
