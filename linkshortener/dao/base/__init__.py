from linkshortener.dao.base.link_base_dao import LinkBaseDAO
from linkshortener.dao.base.link_cache_base_dao import LinkCacheBaseDAO
from linkshortener.dao.base.rate_window_base_dao import RateWindowBaseDAO


__all__ = [
    'LinkBaseDAO',
    'LinkCacheBaseDAO',
    'RateWindowBaseDAO',
]
