"""Publish click events on a Redis pub/sub channel

Events are encoded as JSON objects (see ClickEventModel.to_payload()) and
PUBLISHed on the configured channel. Pub/sub is fire-and-forget: events sent
while no recorder is subscribed are lost, which is acceptable for click
counts.

Example:
    >>> publisher = ClickEventRedisPublisher(channel='click_events', prefix='linkshortener:dev')
    >>> publisher.publish(ClickEventModel(shortcode='abc123', ...))
"""

import json
import logging
from typing import Optional

from beartype import beartype

from linkshortener.models import ClickEventModel
from linkshortener.events.base_publisher import ClickEventBasePublisher
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_command_error, handle_redis_connection_error
from linkshortener.dao.exceptions import ClickPublishError
from linkshortener.utils.constants import DEFAULT_CLICK_EVENTS_CHANNEL


logger = logging.getLogger(__name__)


def channel_name(channel: str, prefix: Optional[str] = None) -> str:
    return f'{prefix}:{channel}' if prefix is not None else channel


class ClickEventRedisPublisher(RedisClientMixin, ClickEventBasePublisher):
    """Redis pub/sub click event publisher

    Attributes:
        channel (str):
            Fully qualified channel name, namespaced by prefix.
    """

    def __init__(self, channel: str = DEFAULT_CLICK_EVENTS_CHANNEL, prefix: Optional[str] = None, **kwargs):
        super().__init__(prefix=prefix, **kwargs)
        self.channel = channel_name(channel, prefix)

    @handle_redis_connection_error
    @handle_redis_command_error(ClickPublishError)
    @beartype
    def publish(self, event: ClickEventModel) -> None:
        receivers = self.redis.publish(self.channel, json.dumps(event.to_payload()))
        logger.debug(
            'Published click event.',
            extra={'shortcode': event.shortcode, 'channel': self.channel, 'receivers': receivers},
        )
