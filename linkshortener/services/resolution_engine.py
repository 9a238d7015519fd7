"""Short code generation, deduplication and cache-aside resolution

ResolutionEngine is the only component allowed to create links. It ties the
authoritative link store, the disposable link cache, the code generator and
the URL hasher together:

    create(target_url, custom_code=None, expires_at=None) -> LinkModel
        1- Normalize target URL (InvalidUrlError)
        2- Fingerprint normalized URL
        3- Return existing link for the same fingerprint (deduplication)
        4- Pick a short code: validated custom code, or generated with bounded retry
        5- Insert link; a short code race re-runs step 4 once
        6- Cache target URL (best-effort)

    resolve(short_code, ...) -> str
        1- Cache lookup; a hit never touches the store
        2- Store lookup on miss (NotFoundError when absent or expired)
        3- Re-populate cache (best-effort)
        4- Publish click event (best-effort)

    info(short_code) -> LinkModel
        Full link record from the store, click count included.

NOTE: deduplication (step 3 of create) is check-then-act. Two concurrent
      creates of the same brand-new URL may both pass the check and insert two
      links with different short codes. Only short code uniqueness is enforced
      by the store; duplicate URLs under concurrency are accepted.

Failure policy:
    - Link store outages raise BackendUnavailableError.
    - Cache and click publishing failures (outages or rejected commands) are
      logged and ignored.

Example:
    >>> engine = ResolutionEngine(store=LinkRedisDAO(prefix='linkshortener:dev'),
    ...                           cache=LinkCacheDAO(prefix='linkshortener:dev'))
    >>> link = engine.create('https://Example.com/blog/article-123')
    >>> link.target
    'https://example.com/blog/article-123'
    >>> engine.resolve(link.shortcode)
    'https://example.com/blog/article-123'
"""

import logging
from contextlib import contextmanager
from datetime import datetime, UTC
from typing import Optional

from linkshortener.models import LinkModel, ClickEventModel
from linkshortener.dao.base import LinkBaseDAO, LinkCacheBaseDAO
from linkshortener.dao.exceptions import CacheError, ClickPublishError, DataStoreError, LinkAlreadyExistsError
from linkshortener.events.base_publisher import ClickEventBasePublisher
from linkshortener.exceptions import (
    BackendUnavailableError,
    CodeGenerationExhaustedError,
    CodeInUseError,
    InvalidCodeFormatError,
    InvalidExpirationError,
    NotFoundError,
)
from linkshortener.utils.hasher import UrlHasher
from linkshortener.utils.helpers import is_expired, seconds_until
from linkshortener.utils.shortener import CodeGenerator
from linkshortener.utils.constants import (
    DEFAULT_MAX_GENERATION_RETRIES,
    DEFAULT_SHORT_CODE_LENGTH,
    MIN_SHORT_CODE_LENGTH,
    MAX_SHORT_CODE_LENGTH,
    SEVEN_DAYS_SECONDS,
)


logger = logging.getLogger(__name__)

# Code selection + insert passes; the second pass covers a short code race
# slipping between the availability check and the insert.
INSERT_ATTEMPTS = 2


@contextmanager
def link_store_guard(operation: str):
    """Translate link store outages into BackendUnavailableError"""
    try:
        yield
    except DataStoreError as e:
        logger.error('Link store unavailable.', extra={'operation': operation, 'reason': str(e)})
        raise BackendUnavailableError('Link store is unavailable.') from e


class ResolutionEngine:
    """Create and resolve short links

    Attributes:
        store (LinkBaseDAO):
            Authoritative link store; sole arbiter of short code uniqueness.
        cache (LinkCacheBaseDAO):
            Disposable short code -> target URL cache.
        generator (CodeGenerator):
            Short code source.
        hasher (UrlHasher):
            URL normalization and fingerprinting.
        publisher (Optional[ClickEventBasePublisher]):
            Click event sink. None disables click events.
        code_length (int):
            Length of generated short codes.
        max_generation_retries (int):
            Total number of generated codes tried per code selection pass.
        default_cache_ttl (int):
            Cache TTL (seconds) for links without an expiry.
    """

    def __init__(
        self,
        store: LinkBaseDAO,
        cache: LinkCacheBaseDAO,
        generator: Optional[CodeGenerator] = None,
        hasher: Optional[UrlHasher] = None,
        publisher: Optional[ClickEventBasePublisher] = None,
        code_length: int = DEFAULT_SHORT_CODE_LENGTH,
        max_generation_retries: int = DEFAULT_MAX_GENERATION_RETRIES,
        default_cache_ttl: int = SEVEN_DAYS_SECONDS,
    ):
        if not MIN_SHORT_CODE_LENGTH <= code_length <= MAX_SHORT_CODE_LENGTH:
            raise ValueError(
                f'code_length must be between {MIN_SHORT_CODE_LENGTH} and {MAX_SHORT_CODE_LENGTH} (given value: {code_length}).'
            )
        if max_generation_retries < 1:
            raise ValueError(f'max_generation_retries must be >= 1 (given value: {max_generation_retries}).')
        if default_cache_ttl < 1:
            raise ValueError(f'default_cache_ttl must be >= 1 (given value: {default_cache_ttl}).')

        self.store = store
        self.cache = cache
        self.generator = generator or CodeGenerator()
        self.hasher = hasher or UrlHasher()
        self.publisher = publisher
        self.code_length = code_length
        self.max_generation_retries = max_generation_retries
        self.default_cache_ttl = default_cache_ttl

    def create(
        self,
        target_url: str,
        custom_code: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> LinkModel:
        """Create a short link for `target_url`, or return the existing one

        Args:
            target_url (str):
                Long URL to shorten. Must be an absolute http(s) URL.
            custom_code (Optional[str]):
                Requested short code, [0-9A-Za-z]{4,12}. Generated if omitted.
            expires_at (Optional[datetime]):
                Moment the link stops resolving. Naive values are taken as UTC.

        Returns:
            LinkModel: the newly created link, or the existing non-expired
            link with the same normalized URL.

        Raises:
            InvalidUrlError:
                If `target_url` is malformed or not http(s).
            InvalidExpirationError:
                If `expires_at` is not in the future.
            InvalidCodeFormatError:
                If `custom_code` fails the character/length rule.
            CodeInUseError:
                If `custom_code` is already taken.
            CodeGenerationExhaustedError:
                If no free short code was found within the retry ceiling.
            BackendUnavailableError:
                If the link store is unreachable.
        """
        target = self.hasher.normalize(target_url)
        if expires_at is not None:
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=UTC)
            if is_expired(expires_at):
                raise InvalidExpirationError(f'Expiry must be in the future (given value: {expires_at.isoformat()}).')
        fingerprint = self.hasher.fingerprint(target)

        with link_store_guard('find_by_fingerprint'):
            existing = self.store.find_by_fingerprint(fingerprint)
        if existing is not None and not existing.is_expired():
            logger.debug('Returning existing link for URL.', extra={'shortcode': existing.shortcode})
            return existing

        for attempt in range(1, INSERT_ATTEMPTS + 1):
            shortcode = self._select_code(custom_code)
            link = LinkModel(
                shortcode=shortcode,
                target=target,
                fingerprint=fingerprint,
                created_at=datetime.now(UTC),
                expires_at=expires_at,
            )
            try:
                with link_store_guard('insert'):
                    self.store.insert(link)
            except LinkAlreadyExistsError as e:
                if custom_code is not None:
                    raise CodeInUseError(f"Short code '{custom_code}' is already in use.") from e
                if attempt == INSERT_ATTEMPTS:
                    raise CodeGenerationExhaustedError('Failed to generate a unique short code.') from e
                logger.warning('Short code taken during insert, selecting another.', extra={'shortcode': shortcode})
            else:
                break

        logger.info('Created link.', extra={'shortcode': link.shortcode, 'expiresAt': link.expires_at})
        self._cache_link(link.shortcode, link.target, link.expires_at)
        return link

    def resolve(
        self,
        short_code: str,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None,
        client_ip: Optional[str] = None,
    ) -> str:
        """Resolve a short code to its target URL

        The optional request metadata only feeds the published click event.

        Raises:
            NotFoundError:
                If the short code is unknown or its link has expired.
            BackendUnavailableError:
                If the cache misses and the link store is unreachable.
        """
        if not self.generator.validate_custom_code(short_code):
            raise NotFoundError(f"Short code '{short_code}' not found.")

        target = self._cached_target(short_code)
        if target is None:
            with link_store_guard('find_by_code'):
                link = self.store.find_by_code(short_code)
            if link is None or link.is_expired():
                raise NotFoundError(f"Short code '{short_code}' not found.")

            target = link.target
            self._cache_link(short_code, target, link.expires_at)

        self._publish_click(short_code, user_agent, referer, client_ip)
        return target

    def info(self, short_code: str) -> LinkModel:
        """Return the full link record for `short_code`, click count included

        Always read from the link store; the cache holds target URLs only.

        Raises:
            NotFoundError:
                If the short code is unknown or its link has expired.
            BackendUnavailableError:
                If the link store is unreachable.
        """
        if not self.generator.validate_custom_code(short_code):
            raise NotFoundError(f"Short code '{short_code}' not found.")

        with link_store_guard('find_by_code'):
            link = self.store.find_by_code(short_code)
        if link is None or link.is_expired():
            raise NotFoundError(f"Short code '{short_code}' not found.")
        return link

    def cache_ttl(self, expires_at: Optional[datetime]) -> int:
        """Seconds a cache entry for a link expiring at `expires_at` may live"""
        if expires_at is None:
            return self.default_cache_ttl
        return seconds_until(expires_at)

    def _select_code(self, custom_code: Optional[str]) -> str:
        if custom_code is not None:
            if not self.generator.validate_custom_code(custom_code):
                raise InvalidCodeFormatError(f"Invalid short code format '{custom_code}': expected 4-12 characters [0-9A-Za-z].")
            with link_store_guard('find_by_code'):
                taken = self.store.find_by_code(custom_code) is not None
            if taken:
                raise CodeInUseError(f"Short code '{custom_code}' is already in use.")
            return custom_code

        for attempt in range(1, self.max_generation_retries + 1):
            shortcode = self.generator.generate(self.code_length)
            with link_store_guard('find_by_code'):
                taken = self.store.find_by_code(shortcode) is not None
            if not taken:
                return shortcode
            logger.debug('Generated short code collides.', extra={'shortcode': shortcode, 'attempt': attempt})

        raise CodeGenerationExhaustedError(
            f'Failed to generate a unique short code after {self.max_generation_retries} attempts.'
        )

    def _cached_target(self, short_code: str) -> str | None:
        try:
            target = self.cache.get(short_code)
        except (DataStoreError, CacheError) as e:
            logger.warning('Cache read failed, falling back to link store.', extra={'shortcode': short_code, 'reason': str(e)})
            return None

        logger.debug('Cache %s.', 'hit' if target is not None else 'miss', extra={'shortcode': short_code})
        return target

    def _cache_link(self, short_code: str, target: str, expires_at: Optional[datetime]) -> None:
        ttl = self.cache_ttl(expires_at)
        if ttl <= 0:
            return
        try:
            self.cache.set_with_ttl(short_code, target, ttl, expires_at)
        except (DataStoreError, CacheError) as e:
            logger.warning('Cache write failed.', extra={'shortcode': short_code, 'ttl': ttl, 'reason': str(e)})

    def _publish_click(
        self,
        short_code: str,
        user_agent: Optional[str],
        referer: Optional[str],
        client_ip: Optional[str],
    ) -> None:
        if self.publisher is None:
            return

        event = ClickEventModel(
            shortcode=short_code,
            user_agent=user_agent,
            referer=referer,
            client_ip=client_ip,
            timestamp=datetime.now(UTC),
        )
        try:
            self.publisher.publish(event)
        except (DataStoreError, ClickPublishError) as e:
            logger.warning('Click event publish failed.', extra={'shortcode': short_code, 'reason': str(e)})
