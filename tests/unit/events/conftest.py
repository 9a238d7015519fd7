from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
import redis

from linkshortener.models import ClickEventModel


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis client."""
    client = MagicMock(spec=redis.Redis)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    client.ping.return_value = True
    return client


@pytest.fixture
def click_event() -> ClickEventModel:
    return ClickEventModel(
        shortcode='abc123',
        user_agent='Mozilla/5.0',
        referer='https://news.example.org/',
        client_ip='203.0.113.7',
        timestamp=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
    )
