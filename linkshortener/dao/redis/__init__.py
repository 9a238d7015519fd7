from linkshortener.dao.redis.redis_key_schema import RedisKeySchema
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.link_redis_dao import LinkRedisDAO
from linkshortener.dao.redis.rate_window_redis_dao import RateWindowRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'LinkRedisDAO',
    'RateWindowRedisDAO',
]
