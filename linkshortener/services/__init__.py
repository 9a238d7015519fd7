from linkshortener.services.resolution_engine import ResolutionEngine
from linkshortener.services.rate_limiter import RateLimiter


__all__ = [
    'ResolutionEngine',
    'RateLimiter',
]
