"""Helper utilities shared by the engine and the DAOs.

Functions:
    get_short_url(shortcode, base) -> str
        Get string representation of short URL for a given shortcode
    seconds_until(moment) -> int
        Whole seconds from now until a given moment, never negative
    is_expired(expires_at) -> bool
        Check whether an optional expiry moment has passed

Example:
    >>> from linkshortener.utils.helpers import get_short_url
    >>> get_short_url('abc123', 'https://sho.rt/')
    'https://sho.rt/abc123'
"""

import math
from datetime import datetime, UTC


def get_short_url(shortcode: str, base: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        base (str): public base URL of the shortener

    Returns:
        str: short url string representation
    """
    return f'{base.rstrip("/")}/{shortcode}'


def seconds_until(moment: datetime) -> int:
    """Compute whole seconds remaining until `moment` (UTC).

    Partial seconds are dropped so a TTL derived from it never outlives
    `moment`. Moments in the past yield 0.

    Args:
        moment (datetime):
            Timezone-aware datetime. Naive values are taken as UTC.

    Returns:
        int: max(0, floor(moment - now)) in seconds.

    Example:
        >>> seconds_until(datetime.now(UTC) + timedelta(seconds=90.5))
        90
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    remaining = (moment - datetime.now(UTC)).total_seconds()
    return max(0, math.floor(remaining))


def is_expired(expires_at: datetime | None) -> bool:
    """Return True if `expires_at` is set and not in the future."""
    if expires_at is None:
        return False
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at <= datetime.now(UTC)
