"""Custom exceptions.

FeedWatch uses a small hierarchy of exceptions so the orchestration loop can
tell fatal startup problems apart from per-source and per-message failures:

Example:
    >>> from feedwatch.core.exceptions import StorageError, FeedWatchError
    >>> isinstance(StorageError("db error"), FeedWatchError)
    True
    >>> try:
    ...     raise NotFoundError("feed not tracked")
    ... except FeedWatchError as e:
    ...     print(f"Caught: {type(e).__name__}")
    Caught: NotFoundError
"""

from __future__ import annotations


class FeedWatchError(Exception):
    """Base exception for FeedWatch.

    Example:
        >>> from feedwatch.core.exceptions import FeedWatchError
        >>> e = FeedWatchError("something went wrong")
        >>> str(e)
        'something went wrong'
    """


class ConfigurationError(FeedWatchError):
    """Configuration is missing or invalid. Fatal at startup."""


class StorageError(FeedWatchError):
    """Feed store operation failed.

    Example:
        >>> from feedwatch.core.exceptions import StorageError
        >>> raise StorageError("connection lost")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        StorageError: connection lost
    """


class NotFoundError(StorageError):
    """Requested feed source is not tracked (or not active)."""


class SourceListError(FeedWatchError):
    """The desired-source list could not be read."""


class FeedError(FeedWatchError):
    """Fetching or parsing a feed failed.

    Example:
        >>> from feedwatch.core.exceptions import FeedError
        >>> err = FeedError("Connection failed", source="https://example.com/rss")
        >>> err.source
        'https://example.com/rss'
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.cause = cause


class NotificationError(FeedWatchError):
    """A notification could not be delivered before its deadline."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause
