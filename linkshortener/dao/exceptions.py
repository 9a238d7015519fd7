"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a link is not found in the data store.

    LinkAlreadyExistsError:
        Raised when attempting to insert a link whose short code is taken.

    DataStoreError:
        Raised when the data store is unreachable (connection issues, timeouts).

    CacheError:
        Raised when Redis rejects a link cache read or write.

    ClickPublishError:
        Raised when Redis rejects a click event publish.

    RateWindowError:
        Raised when Redis rejects a rate window update.

Example:
    >>> from linkshortener.dao.exceptions import LinkAlreadyExistsError
    >>> raise LinkAlreadyExistsError("Link with code 'abc123' already exists.")
    Traceback (most recent call last):
        ...
    linkshortener.dao.exceptions.LinkAlreadyExistsError: Link with code 'abc123' already exists.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class LinkNotFoundError(DAOError):
    """Exception raised when a link is not found in the data store."""

    pass


class LinkAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a link whose short code already exists in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. refused connections, socket timeouts.
    """

    pass


class CacheError(DAOError):
    """Exception raised when Redis rejects a link cache read or write.

    e.g. READONLY replica after a failover, OOM under `maxmemory-policy noeviction`.
    """

    pass


class ClickPublishError(DAOError):
    """Exception raised when Redis rejects a click event publish."""

    pass


class RateWindowError(DAOError):
    """Exception raised when Redis rejects a rate window update."""

    pass
