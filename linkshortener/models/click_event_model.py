from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from linkshortener.types import ClickEventPayload


@dataclass(frozen=True)
class ClickEventModel:
    """A single successful resolution of a short code.

    Published to the click events channel after `resolve()` succeeds.
    The schema is fixed: payloads carrying unknown or missing fields are
    rejected by `from_payload()`.

    Attributes:
        shortcode (str):
            The resolved short code.
        user_agent (Optional[str]):
            Requesting client's User-Agent header.
        referer (Optional[str]):
            Requesting client's Referer header.
        client_ip (Optional[str]):
            Requesting client's address.
        timestamp (datetime):
            Moment of resolution (UTC).
    """

    shortcode: str
    user_agent: Optional[str]
    referer: Optional[str]
    client_ip: Optional[str]
    timestamp: datetime

    def to_payload(self) -> ClickEventPayload:
        return {
            'shortcode': self.shortcode,
            'user_agent': self.user_agent,
            'referer': self.referer,
            'client_ip': self.client_ip,
            'timestamp': self.timestamp.isoformat(),
        }

    @classmethod
    def from_payload(cls, payload: ClickEventPayload) -> 'ClickEventModel':
        """Build an event from a decoded payload

        Raises:
            ValueError: If the payload doesn't match the event schema.
        """
        expected = {'shortcode', 'user_agent', 'referer', 'client_ip', 'timestamp'}
        if not isinstance(payload, dict) or set(payload) != expected:
            raise ValueError(f'Click event payload must have exactly the fields {sorted(expected)}.')
        if not isinstance(payload['shortcode'], str) or not payload['shortcode']:
            raise ValueError('Click event shortcode must be a non-empty string.')
        for field in ('user_agent', 'referer', 'client_ip'):
            if payload[field] is not None and not isinstance(payload[field], str):
                raise ValueError(f'Click event {field} must be a string or null.')
        if not isinstance(payload['timestamp'], str):
            raise ValueError('Click event timestamp must be an ISO-8601 string.')

        return cls(
            shortcode=payload['shortcode'],
            user_agent=payload['user_agent'],
            referer=payload['referer'],
            client_ip=payload['client_ip'],
            timestamp=datetime.fromisoformat(payload['timestamp']),
        )
