"""Fixed window rate limiting

Each client gets `max_requests` requests per `window_seconds` window. The
window opens on the client's first request in a quiet period and resets when
it expires:

    Empty --(1st request)--> Counting --(request max+1)--> Exceeded
      ^                                                        |
      +-------------------(window expires)---------------------+

A limiter backend outage never blocks traffic: requests are admitted (fail
open) and the outage is logged.

Example:
    >>> limiter = RateLimiter(RateWindowRedisDAO(prefix='linkshortener:dev'), window_seconds=60, max_requests=3)
    >>> [limiter.admit('203.0.113.7').remaining for _ in range(3)]
    [2, 1, 0]
    >>> limiter.admit('203.0.113.7')
    AdmitDecision(allowed=False, remaining=0, retry_after_seconds=60, limit=3)
"""

import logging

from linkshortener.models import AdmitDecision
from linkshortener.dao.base import RateWindowBaseDAO
from linkshortener.dao.exceptions import DataStoreError, RateWindowError
from linkshortener.exceptions import RateLimitedError
from linkshortener.utils.constants import DEFAULT_RATE_LIMIT_MAX_REQUESTS, FIFTEEN_MINUTES_SECONDS


logger = logging.getLogger(__name__)


class RateLimiter:
    """Admit or deny requests per client within fixed windows.

    Attributes:
        backend (RateWindowBaseDAO):
            Window counter store.
        window_seconds (int):
            Window length. Defaults to 900 (15 minutes).
        max_requests (int):
            Requests admitted per client per window. Defaults to 100.
    """

    def __init__(
        self,
        backend: RateWindowBaseDAO,
        window_seconds: int = FIFTEEN_MINUTES_SECONDS,
        max_requests: int = DEFAULT_RATE_LIMIT_MAX_REQUESTS,
    ):
        if window_seconds < 1:
            raise ValueError(f'window_seconds must be >= 1 (given value: {window_seconds}).')
        if max_requests < 1:
            raise ValueError(f'max_requests must be >= 1 (given value: {max_requests}).')

        self.backend = backend
        self.window_seconds = window_seconds
        self.max_requests = max_requests

    def admit(self, client_key: str) -> AdmitDecision:
        """Count a request from `client_key` and decide whether it may proceed

        Returns:
            AdmitDecision:
                allowed with `remaining = max - count` while the window has
                room; otherwise denied with `retry_after_seconds` set to the
                window's remaining TTL. On a backend outage the request is
                allowed and `remaining` reports the full limit.
        """
        try:
            window = self.backend.hit(client_key, self.window_seconds)
        except (DataStoreError, RateWindowError) as e:
            logger.warning('Rate limiter backend unavailable, failing open.', extra={'reason': str(e)})
            return AdmitDecision(
                allowed=True,
                remaining=self.max_requests,
                retry_after_seconds=0,
                limit=self.max_requests,
            )

        if window.count <= self.max_requests:
            return AdmitDecision(
                allowed=True,
                remaining=self.max_requests - window.count,
                retry_after_seconds=0,
                limit=self.max_requests,
            )

        logger.info('Rate limit exceeded.', extra={'count': window.count, 'retryAfter': window.ttl})
        return AdmitDecision(
            allowed=False,
            remaining=0,
            retry_after_seconds=max(window.ttl, 0),
            limit=self.max_requests,
        )

    def enforce(self, client_key: str) -> AdmitDecision:
        """Like admit(), but raise RateLimitedError when the request is denied"""
        decision = self.admit(client_key)
        if not decision.allowed:
            raise RateLimitedError(
                f'Too many requests. Try again in {decision.retry_after_seconds} seconds.',
                retry_after=decision.retry_after_seconds,
            )
        return decision
