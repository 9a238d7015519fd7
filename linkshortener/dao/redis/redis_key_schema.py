import functools
from collections.abc import Callable

import xxhash


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linkshortener:prod" or "linkshortener:dev".

    Rate limit client keys are hashed with xxh64: they're caller-supplied
    (API keys, IP addresses) and shouldn't end up verbatim in key names.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, shortcode: str) -> str:
        return f'links:{shortcode}'

    @prefix_key
    def link_clicks_key(self, shortcode: str) -> str:
        return f'links:{shortcode}:clicks'

    @prefix_key
    def fingerprint_key(self, fingerprint: str) -> str:
        return f'fingerprints:{fingerprint}'

    @prefix_key
    def rate_window_key(self, client_key: str) -> str:
        return f'ratelimit:{xxhash.xxh64_hexdigest(client_key.encode("utf-8"))}'
