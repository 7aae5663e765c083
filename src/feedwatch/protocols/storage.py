"""Feed store protocol.

Defines the narrow interface the reconciler and the check loop need from
persistent storage.

Example:
    >>> from feedwatch.protocols.storage import FeedStore
    >>> hasattr(FeedStore, "reconcile")
    True
    >>> hasattr(FeedStore, "set_checkpoint")
    True
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from feedwatch.models import FeedSource, ReconcileResult


@runtime_checkable
class FeedStore(Protocol):
    """Feed store protocol.

    See Also:
        feedwatch.storage.sqlalchemy_storage.SQLAlchemyFeedStore: SQL implementation
        feedwatch.storage.memory.MemoryFeedStore: In-memory implementation
    """

    async def initialize(self) -> None:
        """Connect and create the schema if needed."""
        ...

    async def close(self) -> None:
        """Release connections."""
        ...

    async def reconcile(self, urls: Sequence[str], run_time: datetime) -> ReconcileResult:
        """Make the active set equal ``urls``, atomically.

        Upserts every URL (new rows get all timestamps set to ``run_time``,
        existing rows get ``last_seen_at`` bumped and ``deactivated_at``
        cleared), then deactivates every active row not in ``urls``.
        Either all of it is applied or none of it.

        Raises:
            StorageError: The transaction failed and was rolled back.
        """
        ...

    async def get(self, url: str) -> FeedSource:
        """Get an active source by URL.

        Raises:
            NotFoundError: The URL is not tracked or is deactivated.
            StorageError: The read failed.
        """
        ...

    async def set_checkpoint(self, url: str, checked_at: datetime) -> None:
        """Set ``last_checked_at`` for one source.

        Raises:
            NotFoundError: The URL is not tracked.
            StorageError: The write failed.
        """
        ...

    async def list_sources(self, active_only: bool = False) -> list[FeedSource]:
        """List tracked sources ordered by URL."""
        ...
