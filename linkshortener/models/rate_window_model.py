from dataclasses import dataclass


@dataclass(frozen=True)
class RateWindowModel:
    """Snapshot of one client's fixed rate limit window right after a hit.

    Attributes:
        client_key (str):
            Client identity the window belongs to (e.g. IP or API key).
        count (int):
            Requests counted in the window, including the current one.
        ttl (int):
            Seconds until the window expires and the count resets.
    """

    client_key: str
    count: int
    ttl: int


@dataclass(frozen=True)
class AdmitDecision:
    """Outcome of RateLimiter.admit().

    Attributes:
        allowed (bool):
            True if the request may proceed.
        remaining (int):
            Requests left in the current window (0 once exhausted).
        retry_after_seconds (int):
            Seconds until the window resets when denied, 0 when allowed.
        limit (int):
            Configured ceiling per window.
    """

    allowed: bool
    remaining: int
    retry_after_seconds: int
    limit: int
