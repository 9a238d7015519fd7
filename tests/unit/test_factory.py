"""Unit tests for create_services() in factory.py

Test coverage includes:

1. Wiring
   - Ensures all services share one Redis client.
   - Ensures configuration values reach the engine, limiter and recorder.

2. Client construction
   - Ensures a Redis client is built from configuration when none is given.
   - Ensures configuration is read from the environment when none is given.

3. Error handling
   - Ensures an unreachable Redis raises DataStoreError.
"""

from unittest.mock import MagicMock

import pytest
import redis

from linkshortener.dao.cache import LinkCacheDAO
from linkshortener.dao.redis import LinkRedisDAO, RateWindowRedisDAO
from linkshortener.dao.exceptions import DataStoreError
from linkshortener.events import ClickEventRedisPublisher
from linkshortener.factory import create_services
from linkshortener.utils.config import ShortenerConfig


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def redis_client():
    client = MagicMock(spec=redis.Redis)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    client.ping.return_value = True
    return client


@pytest.fixture
def config(app_prefix):
    return ShortenerConfig(
        prefix=app_prefix,
        redis_host='redis.test',
        redis_port=6380,
        redis_db=2,
        redis_password='secret',
        redis_socket_timeout=1.5,
        rate_limit_window_seconds=60,
        rate_limit_max_requests=3,
        cache_default_ttl_seconds=3600,
        short_code_length=8,
        max_generation_retries=4,
        click_events_channel='clicks',
        short_url_base='https://sho.rt/',
    )


# -------------------------------
# 1. Wiring
# -------------------------------


def test_create_services_wiring(config, redis_client):
    services = create_services(config, redis_client=redis_client)

    engine = services.engine
    assert isinstance(engine.store, LinkRedisDAO)
    assert isinstance(engine.cache, LinkCacheDAO)
    assert isinstance(engine.publisher, ClickEventRedisPublisher)
    assert isinstance(services.limiter.backend, RateWindowRedisDAO)
    assert services.recorder.store is engine.store

    for dao in (engine.store, engine.cache, engine.publisher, services.limiter.backend):
        assert dao.redis is redis_client
    assert services.recorder.redis is redis_client

    # Only the link store pings Redis
    redis_client.ping.assert_called_once()


def test_create_services_applies_configuration(config, redis_client):
    services = create_services(config, redis_client=redis_client)

    assert services.config is config
    assert services.engine.code_length == 8
    assert services.engine.max_generation_retries == 4
    assert services.engine.default_cache_ttl == 3600
    assert services.engine.publisher.channel == 'testapp:test:clicks'
    assert services.recorder.channel == 'testapp:test:clicks'
    assert services.limiter.window_seconds == 60
    assert services.limiter.max_requests == 3
    assert services.engine.store.keys.link_key('abc123') == 'testapp:test:links:abc123'
    assert services.engine.cache.keys.link_key('abc123') == 'cache:testapp:test:links:abc123'


def test_short_url(config, redis_client):
    services = create_services(config, redis_client=redis_client)
    assert services.short_url('abc123') == 'https://sho.rt/abc123'


# -------------------------------
# 2. Client construction
# -------------------------------


def test_create_services_builds_redis_client(monkeypatch, config, redis_client):
    redis_cls = MagicMock(return_value=redis_client)
    monkeypatch.setattr('linkshortener.dao.redis.helpers.redis.Redis', redis_cls)

    create_services(config)

    redis_cls.assert_called_once_with(
        host='redis.test',
        port=6380,
        db=2,
        username=None,
        password='secret',
        socket_timeout=1.5,
        socket_connect_timeout=1.5,
        decode_responses=True,
    )


def test_create_services_reads_environment(monkeypatch, redis_client):
    monkeypatch.setenv('APP_NAME', 'envapp')
    monkeypatch.setenv('APP_ENV', 'staging')
    monkeypatch.setenv('RATE_LIMIT_MAX_REQUESTS', '7')

    services = create_services(redis_client=redis_client)

    assert services.config.prefix == 'envapp:staging'
    assert services.limiter.max_requests == 7


# -------------------------------
# 3. Error handling
# -------------------------------


def test_create_services_with_unreachable_redis(config, redis_client):
    redis_client.ping.side_effect = redis.exceptions.ConnectionError('Connection refused')

    with pytest.raises(DataStoreError, match='Check the provided configuration parameters.'):
        create_services(config, redis_client=redis_client)
