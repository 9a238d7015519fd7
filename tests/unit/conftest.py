"""Shared fixtures: in-memory DAOs honoring the link store, cache and rate
window contracts, used by the service-level tests."""

import math
from datetime import datetime, timedelta, UTC
from typing import Optional

import pytest

from linkshortener.models import LinkModel, RateWindowModel, ClickEventModel
from linkshortener.dao.base import LinkBaseDAO, LinkCacheBaseDAO, RateWindowBaseDAO
from linkshortener.dao.exceptions import DataStoreError, LinkAlreadyExistsError, LinkNotFoundError
from linkshortener.events import ClickEventBasePublisher
from linkshortener.utils.helpers import is_expired


class InMemoryLinkDAO(LinkBaseDAO):
    """Dictionary-backed link store; `down=True` simulates an outage."""

    def __init__(self):
        self.links: dict[str, LinkModel] = {}
        self.fingerprints: dict[str, str] = {}
        self.insert_calls = 0
        self.find_by_code_calls = 0
        self.down = False

    def _check(self):
        if self.down:
            raise DataStoreError("Can't connect to Redis at memory:0/0.")

    def find_by_code(self, shortcode: str) -> LinkModel | None:
        self._check()
        self.find_by_code_calls += 1
        link = self.links.get(shortcode)
        return None if link is None or link.is_expired() else link

    def find_by_fingerprint(self, fingerprint: str) -> LinkModel | None:
        self._check()
        shortcode = self.fingerprints.get(fingerprint)
        return None if shortcode is None else self.find_by_code(shortcode)

    def insert(self, link: LinkModel) -> LinkModel:
        self._check()
        self.insert_calls += 1
        existing = self.links.get(link.shortcode)
        if existing is not None and not existing.is_expired():
            raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")
        self.links[link.shortcode] = link
        self.fingerprints[link.fingerprint] = link.shortcode
        return link

    def increment_clicks(self, shortcode: str) -> int:
        self._check()
        link = self.links.get(shortcode)
        if link is None or link.is_expired():
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
        self.links[shortcode] = LinkModel(
            shortcode=link.shortcode,
            target=link.target,
            fingerprint=link.fingerprint,
            created_at=link.created_at,
            expires_at=link.expires_at,
            clicks=link.clicks + 1,
        )
        return link.clicks + 1


class InMemoryLinkCache(LinkCacheBaseDAO):
    """Dictionary-backed cache honoring TTLs against the (frozen) clock."""

    def __init__(self):
        self.entries: dict[str, tuple[str, datetime, Optional[datetime]]] = {}
        self.down = False

    def _check(self):
        if self.down:
            raise DataStoreError("Can't connect to Redis at memory:0/0.")

    def get(self, shortcode: str) -> str | None:
        self._check()
        entry = self.entries.get(shortcode)
        if entry is None:
            return None
        target, evict_at, expires_at = entry
        if datetime.now(UTC) >= evict_at or is_expired(expires_at):
            return None
        return target

    def set_with_ttl(self, shortcode: str, target: str, ttl: int, expires_at: Optional[datetime] = None) -> bool:
        self._check()
        if ttl <= 0:
            return False
        self.entries[shortcode] = (target, datetime.now(UTC) + timedelta(seconds=ttl), expires_at)
        return True

    def invalidate(self, shortcode: str) -> bool:
        self._check()
        return self.entries.pop(shortcode, None) is not None

    def ttl(self, shortcode: str) -> int:
        _, evict_at, _ = self.entries[shortcode]
        return math.ceil((evict_at - datetime.now(UTC)).total_seconds())


class InMemoryRateWindowDAO(RateWindowBaseDAO):
    def __init__(self):
        self.windows: dict[str, tuple[int, datetime]] = {}
        self.down = False

    def hit(self, client_key: str, window_seconds: int) -> RateWindowModel:
        if self.down:
            raise DataStoreError("Can't connect to Redis at memory:0/0.")

        now = datetime.now(UTC)
        count, expires_at = self.windows.get(client_key, (0, now))
        if expires_at <= now:
            count, expires_at = 0, now + timedelta(seconds=window_seconds)
        count += 1
        self.windows[client_key] = (count, expires_at)
        return RateWindowModel(client_key=client_key, count=count, ttl=math.ceil((expires_at - now).total_seconds()))


class RecordingPublisher(ClickEventBasePublisher):
    def __init__(self):
        self.events: list[ClickEventModel] = []
        self.down = False

    def publish(self, event: ClickEventModel) -> None:
        if self.down:
            raise DataStoreError("Can't connect to Redis at memory:0/0.")
        self.events.append(event)


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def app_prefix() -> str:
    """Provide a consistent Redis key prefix for testing."""
    return 'testapp:test'


@pytest.fixture
def link_store() -> InMemoryLinkDAO:
    return InMemoryLinkDAO()


@pytest.fixture
def link_cache() -> InMemoryLinkCache:
    return InMemoryLinkCache()


@pytest.fixture
def rate_windows() -> InMemoryRateWindowDAO:
    return InMemoryRateWindowDAO()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()
