"""Wire the engine, the rate limiter and the click recorder together

All DAOs share one Redis client (and therefore one connection pool). Nothing
here is cached at module level: every call builds a fresh set of services.

Example:
    >>> from linkshortener.factory import create_services
    >>> services = create_services()
    >>> link = services.engine.create('https://example.com/blog/article-123')
    >>> services.short_url(link.shortcode)
    'http://localhost:3000/aZ3k9Q'
"""

import logging
from dataclasses import dataclass
from typing import Optional

import redis

from linkshortener.dao.cache import LinkCacheDAO
from linkshortener.dao.redis import LinkRedisDAO, RateWindowRedisDAO
from linkshortener.dao.redis.helpers import create_redis_client
from linkshortener.events import ClickEventRedisPublisher, ClickRecorder
from linkshortener.services import ResolutionEngine, RateLimiter
from linkshortener.utils.config import ShortenerConfig, load_config
from linkshortener.utils.helpers import get_short_url


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    """Ready-to-use application services.

    Attributes:
        config (ShortenerConfig): configuration the services were built from.
        engine (ResolutionEngine): link creation and resolution.
        limiter (RateLimiter): per-client request admission.
        recorder (ClickRecorder): click event consumer.
    """

    config: ShortenerConfig
    engine: ResolutionEngine
    limiter: RateLimiter
    recorder: ClickRecorder

    def short_url(self, shortcode: str) -> str:
        return get_short_url(shortcode, self.config.short_url_base)


def create_services(
    config: Optional[ShortenerConfig] = None,
    redis_client: Optional[redis.Redis] = None,
) -> Services:
    """Build the application services

    Args:
        config (Optional[ShortenerConfig]):
            Configuration to use. Read from the environment if None.
        redis_client (Optional[redis.Redis]):
            Client shared by all DAOs. Built from `config` if None.

    Returns:
        Services: engine, limiter and click recorder.

    Raises:
        BadConfigurationError:
            If the environment holds invalid configuration.
        DataStoreError:
            If Redis is unreachable.
    """
    config = config or load_config()
    if redis_client is None:
        redis_client = create_redis_client(**config.redis_config())

    store = LinkRedisDAO(redis_client=redis_client, prefix=config.prefix)
    # The client was just healthchecked by the link store
    cache = LinkCacheDAO(redis_client=redis_client, prefix=config.prefix, healthcheck=False)
    windows = RateWindowRedisDAO(redis_client=redis_client, prefix=config.prefix, healthcheck=False)
    publisher = ClickEventRedisPublisher(
        channel=config.click_events_channel,
        redis_client=redis_client,
        prefix=config.prefix,
        healthcheck=False,
    )

    engine = ResolutionEngine(
        store=store,
        cache=cache,
        publisher=publisher,
        code_length=config.short_code_length,
        max_generation_retries=config.max_generation_retries,
        default_cache_ttl=config.cache_default_ttl_seconds,
    )
    limiter = RateLimiter(
        windows,
        window_seconds=config.rate_limit_window_seconds,
        max_requests=config.rate_limit_max_requests,
    )
    recorder = ClickRecorder(
        store=store,
        redis_client=redis_client,
        channel=config.click_events_channel,
        prefix=config.prefix,
    )

    logger.debug('Created services.', extra={'prefix': config.prefix})
    return Services(config=config, engine=engine, limiter=limiter, recorder=recorder)
