"""Record click events into the link store

ClickRecorder subscribes to the click events channel and increments the
click counter of every resolved link. It runs outside the request path:
resolution only publishes events and never waits for them to be recorded.

Messages that can't be decoded or don't match the event schema, and events
for links that no longer exist, are logged and skipped. A store outage is
not swallowed: it propagates out of run() so the process supervisor can
restart the recorder.

Example:
    >>> recorder = ClickRecorder(store=LinkRedisDAO(prefix='linkshortener:dev'),
    ...                          redis_client=redis.Redis(decode_responses=True),
    ...                          prefix='linkshortener:dev')
    >>> recorder.run()  # blocks
"""

import json
import logging
from typing import Any, Optional

import redis

from linkshortener.models import ClickEventModel
from linkshortener.dao.base import LinkBaseDAO
from linkshortener.dao.exceptions import LinkNotFoundError
from linkshortener.events.redis_publisher import channel_name
from linkshortener.utils.constants import DEFAULT_CLICK_EVENTS_CHANNEL


logger = logging.getLogger(__name__)


class ClickRecorder:
    """Consume click events and increment link click counters.

    Attributes:
        store (LinkBaseDAO):
            Authoritative link store.
        redis (redis.Redis):
            Client used to subscribe to the click events channel.
        channel (str):
            Fully qualified channel name, namespaced by prefix.

    Methods:
        handle(message: dict) -> bool:
            Record one pub/sub message. Returns True if a click was counted.

        run(max_messages: int | None = None) -> int:
            Subscribe and record events until the subscription ends or
            `max_messages` events were handled. Returns the number of clicks counted.
    """

    def __init__(
        self,
        store: LinkBaseDAO,
        redis_client: redis.Redis,
        channel: str = DEFAULT_CLICK_EVENTS_CHANNEL,
        prefix: Optional[str] = None,
    ):
        self.store = store
        self.redis = redis_client
        self.channel = channel_name(channel, prefix)

    def handle(self, message: dict[str, Any]) -> bool:
        if message.get('type') != 'message':
            return False

        try:
            event = ClickEventModel.from_payload(json.loads(message.get('data')))
        except (TypeError, ValueError) as e:
            logger.warning('Skipping malformed click event.', extra={'channel': self.channel, 'reason': str(e)})
            return False

        try:
            clicks = self.store.increment_clicks(event.shortcode)
        except LinkNotFoundError:
            logger.info('Skipping click event for unknown link.', extra={'shortcode': event.shortcode})
            return False

        logger.debug('Recorded click.', extra={'shortcode': event.shortcode, 'clicks': clicks})
        return True

    def run(self, max_messages: int | None = None) -> int:
        pubsub = self.redis.pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(self.channel)
        logger.info('Listening for click events.', extra={'channel': self.channel})

        handled = 0
        recorded = 0
        try:
            for message in pubsub.listen():
                if self.handle(message):
                    recorded += 1
                handled += 1
                if max_messages is not None and handled >= max_messages:
                    break
        finally:
            pubsub.close()
        return recorded
