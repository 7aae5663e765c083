"""Feed fetcher and source list protocols.

Example:
    >>> from feedwatch.protocols.feed import FeedFetcher, SourceList
    >>> hasattr(FeedFetcher, "fetch")
    True
    >>> hasattr(SourceList, "load")
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from feedwatch.models.item import FetchedItem


@runtime_checkable
class FeedFetcher(Protocol):
    """Fetches and parses one feed document."""

    async def fetch(self, url: str) -> list[FetchedItem]:
        """Fetch the feed at ``url``.

        Returns:
            Items in document order.

        Raises:
            FeedError: The feed could not be downloaded or parsed.
        """
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...


@runtime_checkable
class SourceList(Protocol):
    """Supplies the desired set of feed URLs."""

    def load(self) -> list[str]:
        """Return the desired URLs in file order (duplicates allowed).

        Raises:
            SourceListError: The list could not be read.
        """
        ...
