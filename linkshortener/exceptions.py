"""Application-level exceptions

Every error surfaced to callers of the resolution engine or the rate limiter
derives from LinkShortenerError and carries a stable `error_code` that a
transport layer can hand back to clients verbatim.

Propagation:
    - InvalidUrlError, InvalidCodeFormatError, InvalidExpirationError,
      CodeInUseError, CodeGenerationExhaustedError and NotFoundError are
      client-facing and terminal. The engine never retries them.
    - BackendUnavailableError is raised only for the authoritative link store.
      Cache and rate limiter backend outages are logged and degraded around.
    - RateLimitedError is raised by RateLimiter.enforce() when a client's
      window is exhausted. A limiter backend outage never raises it.
"""


class LinkShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:link_shortener_error'


class LinkError(LinkShortenerError):
    """Base exception for errors raised while creating or resolving links."""

    error_code = 'link:link_error'


class InvalidUrlError(LinkError):
    """Raised when a target URL is malformed or uses a disallowed scheme."""

    error_code = 'link:invalid_url'


class InvalidCodeFormatError(LinkError):
    """Raised when a custom short code fails the character/length rule."""

    error_code = 'link:invalid_code_format'


class InvalidExpirationError(LinkError):
    """Raised when a link is requested with an expiry that is not in the future."""

    error_code = 'link:invalid_expiration'


class CodeInUseError(LinkError):
    """Raised when a custom short code is already taken."""

    error_code = 'link:code_in_use'


class CodeGenerationExhaustedError(LinkError):
    """Raised when no free short code was found within the retry ceiling."""

    error_code = 'link:code_generation_exhausted'


class NotFoundError(LinkError):
    """Raised when a short code is unknown or its link has expired."""

    error_code = 'link:not_found'


class RateLimitedError(LinkShortenerError):
    """Raised when a client exceeded its request window.

    Attributes:
        retry_after (int):
            Seconds until the client's current window expires.
    """

    error_code = 'ratelimit:rate_limited'

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after


class InfrastructureError(LinkShortenerError):
    """Base exception for all backend infrastructure errors."""

    error_code = 'infra:infrastructure_error'


class BackendUnavailableError(InfrastructureError):
    """Raised when the authoritative link store can't be reached."""

    error_code = 'infra:backend_unavailable'


class ConfigurationError(LinkShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
