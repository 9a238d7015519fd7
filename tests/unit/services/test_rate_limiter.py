"""Unit tests for RateLimiter

Test coverage includes:

1. Window accounting
   - Ensures max=3/window=60 admits 3 requests with remaining 2, 1, 0.
   - Ensures the 4th request is denied with retry_after <= 60.
   - Ensures windows are per client and reset once expired.

2. Fail open
   - Ensures backend outages and rejected window updates admit the request.

3. enforce()
   - Ensures denied requests raise RateLimitedError carrying retry_after.
"""

from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from linkshortener.models import AdmitDecision, RateWindowModel
from linkshortener.dao.base import RateWindowBaseDAO
from linkshortener.dao.exceptions import RateWindowError
from linkshortener.exceptions import RateLimitedError
from linkshortener.services import RateLimiter


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def limiter(rate_windows):
    return RateLimiter(rate_windows, window_seconds=60, max_requests=3)


# -------------------------------
# 1. Window accounting
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_admit_counts_down_remaining(limiter):
    """Ensure 3 requests are admitted with remaining 2, 1, 0."""
    decisions = [limiter.admit('203.0.113.7') for _ in range(3)]

    assert [d.allowed for d in decisions] == [True, True, True]
    assert [d.remaining for d in decisions] == [2, 1, 0]
    assert all(d.retry_after_seconds == 0 for d in decisions)
    assert all(d.limit == 3 for d in decisions)


def test_admit_denies_over_limit(limiter):
    """Ensure the 4th request is denied with retry_after within the window."""
    with freeze_time('2025-10-15 12:00:00') as frozen:
        for _ in range(3):
            limiter.admit('203.0.113.7')
        frozen.tick(timedelta(seconds=15))
        decision = limiter.admit('203.0.113.7')

    assert decision == AdmitDecision(allowed=False, remaining=0, retry_after_seconds=45, limit=3)
    assert 0 < decision.retry_after_seconds <= 60


@freeze_time('2025-10-15 12:00:00')
def test_admit_tracks_clients_separately(limiter):
    """Ensure one client's window doesn't affect another's."""
    for _ in range(4):
        limiter.admit('203.0.113.7')

    decision = limiter.admit('198.51.100.23')
    assert decision.allowed
    assert decision.remaining == 2


def test_admit_resets_after_window_expires(limiter):
    """Ensure a new window opens once the previous one expired."""
    with freeze_time('2025-10-15 12:00:00'):
        for _ in range(4):
            limiter.admit('203.0.113.7')

    with freeze_time(datetime(2025, 10, 15, 12, 1, 0, tzinfo=UTC)):
        decision = limiter.admit('203.0.113.7')

    assert decision.allowed
    assert decision.remaining == 2


def test_admit_passes_window_to_backend():
    backend = MagicMock(spec=RateWindowBaseDAO)
    backend.hit.return_value = RateWindowModel(client_key='k', count=1, ttl=900)
    limiter = RateLimiter(backend)

    decision = limiter.admit('k')

    backend.hit.assert_called_once_with('k', 900)
    assert decision == AdmitDecision(allowed=True, remaining=99, retry_after_seconds=0, limit=100)


# -------------------------------
# 2. Fail open
# -------------------------------


def test_admit_fails_open_when_backend_is_down(limiter, rate_windows):
    """Ensure backend outages never block traffic."""
    rate_windows.down = True

    decisions = [limiter.admit('203.0.113.7') for _ in range(10)]

    assert all(d.allowed for d in decisions)
    assert all(d.remaining == 3 for d in decisions)


def test_enforce_fails_open_when_backend_is_down(limiter, rate_windows):
    rate_windows.down = True
    assert limiter.enforce('203.0.113.7').allowed


def test_admit_fails_open_when_backend_rejects_update():
    """Ensure a window update rejected by Redis (e.g. OOM) never blocks traffic."""
    backend = MagicMock(spec=RateWindowBaseDAO)
    backend.hit.side_effect = RateWindowError("Redis rejected hit() at redis.test:6379/0: OOM command not allowed.")
    limiter = RateLimiter(backend, window_seconds=60, max_requests=3)

    assert limiter.admit('203.0.113.7') == AdmitDecision(allowed=True, remaining=3, retry_after_seconds=0, limit=3)


# -------------------------------
# 3. enforce()
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_enforce_raises_when_denied(limiter):
    """Ensure enforce() raises RateLimitedError with retry_after."""
    for _ in range(3):
        assert limiter.enforce('203.0.113.7').allowed

    with pytest.raises(RateLimitedError) as exc_info:
        limiter.enforce('203.0.113.7')

    assert exc_info.value.retry_after == 60
    assert exc_info.value.error_code == 'ratelimit:rate_limited'


@pytest.mark.parametrize('kwargs', [{'window_seconds': 0}, {'max_requests': 0}])
def test_invalid_limiter_parameters(rate_windows, kwargs):
    with pytest.raises(ValueError):
        RateLimiter(rate_windows, **kwargs)


def test_backend_errors_other_than_outages_propagate():
    backend = MagicMock(spec=RateWindowBaseDAO)
    backend.hit.side_effect = ValueError('Window must be a positive number of seconds.')
    limiter = RateLimiter(backend)

    with pytest.raises(ValueError):
        limiter.admit('k')


def test_fail_open_logs_warning(limiter, rate_windows, caplog):
    rate_windows.down = True
    with caplog.at_level('WARNING', logger='linkshortener.services.rate_limiter'):
        limiter.admit('203.0.113.7')
    assert 'failing open' in caplog.text
    assert 'memory:0/0' in caplog.records[0].reason
