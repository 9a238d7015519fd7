from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from linkshortener.utils.helpers import is_expired


@dataclass(frozen=True)
class LinkModel:
    """Represent a shortened URL mapping.

    Attributes:
        shortcode (str):
            The unique short identifier, matching [0-9A-Za-z]{4,12}.
        target (str):
            The normalized long URL the short code redirects to.
        fingerprint (str):
            SHA-256 hex digest of `target`, used for deduplication.
        created_at (datetime):
            Creation moment (UTC).
        expires_at (Optional[datetime]):
            Moment after which the link is no longer resolvable.
            None for links that never expire.
        clicks (int):
            Number of recorded resolutions.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> link = LinkModel(
        ...     shortcode='abc123',
        ...     target='https://example.com/article/123',
        ...     fingerprint='9f86d0...',
        ...     created_at=datetime.now(UTC),
        ...     expires_at=datetime.now(UTC) + timedelta(days=30),
        ... )
        >>> link.clicks
        0
        >>> link.is_expired()
        False
    """

    shortcode: str
    target: str
    fingerprint: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    clicks: int = 0

    def is_expired(self) -> bool:
        return is_expired(self.expires_at)
