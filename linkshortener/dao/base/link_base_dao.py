"""Abstract base class for link data access objects (DAOs).

This class establishes the contract of the authoritative link store,
regardless of the underlying storage mechanism (e.g., Redis, PostgreSQL).

Responsibilities:
    - Insert links under a unique short code constraint.
    - Point lookups by short code and by URL fingerprint.
    - Atomic click counter increments on existing links.

Every operation is atomic at the single-record level. The store is the only
component allowed to arbitrate short code uniqueness.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkshortener.dao.redis import LinkRedisDAO
        >>> dao = LinkRedisDAO(prefix='linkshortener:dev')
        >>> dao.insert(link)
        LinkModel(shortcode='abc123', ...)
        >>> dao.find_by_code('abc123').target
        'https://example.com/blog/article-123'
        >>> dao.find_by_code('missing') is None
        True
"""

from abc import ABC, abstractmethod

from linkshortener.models import LinkModel


class LinkBaseDAO(ABC):
    """Interface for link data access objects (DAOs).

    Methods:
        find_by_code(shortcode: str) -> LinkModel | None:
            Retrieve a non-expired link by short code.

        find_by_fingerprint(fingerprint: str) -> LinkModel | None:
            Retrieve a non-expired link by URL fingerprint.

        insert(link: LinkModel) -> LinkModel:
            Persist a new link.
            Raises LinkAlreadyExistsError if the short code is taken.

        increment_clicks(shortcode: str) -> int:
            Atomically increment the link's click counter.
            Raises LinkNotFoundError if the link doesn't exist.

    All methods raise DataStoreError on connection or I/O failure.
    """

    @abstractmethod
    def find_by_code(self, shortcode: str) -> LinkModel | None:
        """Retrieve a link by its short code.

        Args:
            shortcode (str):
                The short code of the link.

        Returns:
            LinkModel | None: The link if found and not expired, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def find_by_fingerprint(self, fingerprint: str) -> LinkModel | None:
        """Retrieve a link by the fingerprint of its target URL.

        Args:
            fingerprint (str):
                SHA-256 hex digest of the normalized target URL.

        Returns:
            LinkModel | None: The link if found and not expired, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def insert(self, link: LinkModel) -> LinkModel:
        """Insert a new link into the data store.

        Args:
            link (LinkModel):
                The link to be inserted.

        Returns:
            LinkModel: the persisted link.

        Raises:
            LinkAlreadyExistsError:
                If a link with the same short code already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def increment_clicks(self, shortcode: str) -> int:
        """Increment the click counter of an existing link.

        Args:
            shortcode (str):
                The short code of the link.

        Returns:
            int: The click count after the increment.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
