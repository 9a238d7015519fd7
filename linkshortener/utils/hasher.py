"""URL normalization and fingerprinting

A fingerprint is the SHA-256 hex digest of a normalized URL. It is what the
link store indexes to detect repeated submissions of the same URL, so it must
stay byte-for-byte stable across processes, platforms and releases: no salts,
no process-local state.

Normalization:
    1. Strip surrounding whitespace and the characters < > ' "
    2. Require an absolute http(s) URL with a host, at most 2048 characters
    3. Lowercase the scheme and the host; leave path, query and fragment alone

Example:
    >>> from linkshortener.utils.hasher import UrlHasher
    >>> UrlHasher.normalize(' HTTPS://Example.com/Path?q=1 ')
    'https://example.com/Path?q=1'
    >>> len(UrlHasher.fingerprint('https://example.com/Path?q=1'))
    64
"""

import hashlib
import re
from urllib.parse import urlsplit, urlunsplit

from linkshortener.exceptions import InvalidUrlError
from linkshortener.utils.constants import MAX_URL_LENGTH


ALLOWED_SCHEMES = frozenset({'http', 'https'})

UNSAFE_CHARACTERS = re.compile(r'[<>\'"]')


class UrlHasher:
    """Normalize URLs and compute their deduplication fingerprints."""

    @staticmethod
    def normalize(url: str) -> str:
        """Return the canonical form of `url`

        Args:
            url (str): user supplied target URL.

        Returns:
            str: normalized URL; this is what gets stored and resolved.

        Raises:
            InvalidUrlError:
                If `url` is not a string, is too long, doesn't parse, isn't
                absolute, or uses a scheme other than http/https.
        """
        if not isinstance(url, str):
            raise InvalidUrlError(f'URL must be of type string (given type: {type(url)}).')

        sanitized = UNSAFE_CHARACTERS.sub('', url.strip())
        if not sanitized:
            raise InvalidUrlError('URL is required.')
        if len(sanitized) > MAX_URL_LENGTH:
            raise InvalidUrlError(f'URL is too long (max {MAX_URL_LENGTH} characters).')

        try:
            parts = urlsplit(sanitized)
            # Accessing .port validates it (raises ValueError when out of range)
            _ = parts.port
        except ValueError as e:
            raise InvalidUrlError(f"Malformed URL '{sanitized}'.") from e

        scheme = parts.scheme.lower()
        if scheme not in ALLOWED_SCHEMES:
            raise InvalidUrlError(f"URL must use http or https (given URL: '{sanitized}').")
        if not parts.hostname:
            raise InvalidUrlError(f"URL must be absolute with a host (given URL: '{sanitized}').")

        netloc = parts.netloc
        host_start = netloc.rfind('@') + 1
        netloc = netloc[:host_start] + netloc[host_start:].lower()

        return urlunsplit((scheme, netloc, parts.path, parts.query, parts.fragment))

    @staticmethod
    def fingerprint(url: str) -> str:
        """Return the SHA-256 hex digest of `url` (64 characters).

        The input is hashed as given; callers normalize first.
        """
        return hashlib.sha256(url.encode('utf-8')).hexdigest()
