from linkshortener.events.base_publisher import ClickEventBasePublisher
from linkshortener.events.redis_publisher import ClickEventRedisPublisher
from linkshortener.events.click_recorder import ClickRecorder


__all__ = [
    'ClickEventBasePublisher',
    'ClickEventRedisPublisher',
    'ClickRecorder',
]
