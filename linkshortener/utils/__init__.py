from linkshortener.utils.config import app_env, app_name, app_prefix, load_config, ShortenerConfig
from linkshortener.utils.helpers import get_short_url, seconds_until, is_expired
from linkshortener.utils.shortener import CodeGenerator
from linkshortener.utils.hasher import UrlHasher
from linkshortener.utils.logging import initialize_logging


__all__ = [
    'CodeGenerator',
    'UrlHasher',
    'ShortenerConfig',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'get_short_url',
    'seconds_until',
    'is_expired',
    'initialize_logging',
]
