"""In-memory feed store for testing.

Provides a complete in-memory implementation of FeedStore, useful for
tests, dry runs and development.

Example:
    >>> from feedwatch.storage.memory import MemoryFeedStore
    >>> store = MemoryFeedStore()
    >>> hasattr(store, "reconcile")
    True

Note:
    All methods are async. Use within async context or with asyncio.run().
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from feedwatch.core.exceptions import NotFoundError
from feedwatch.models.base import ensure_utc
from feedwatch.models.source import FeedSource, ReconcileResult


class MemoryFeedStore:
    """In-memory feed store using a dict keyed by URL.

    Reconcile builds the new state on a copy and swaps it in at the end,
    so a failure part-way through leaves the store untouched.

    Best for: Testing, development.

    Example:
        >>> from feedwatch.storage.memory import MemoryFeedStore
        >>> s = MemoryFeedStore()
        >>> s._initialized
        False
    """

    def __init__(self) -> None:
        self._sources: dict[str, FeedSource] = {}
        self._initialized = False

    async def initialize(self) -> None:
        """No-op for memory storage."""
        self._initialized = True

    async def close(self) -> None:
        """Clear all data."""
        self._sources.clear()
        self._initialized = False

    async def reconcile(self, urls: Sequence[str], run_time: datetime) -> ReconcileResult:
        """Make the active set equal ``urls``."""
        run_time = ensure_utc(run_time)
        wanted = list(dict.fromkeys(urls))
        wanted_set = set(wanted)
        staged = dict(self._sources)

        result = ReconcileResult(run_time=run_time)
        for url in wanted:
            current = staged.get(url)
            if current is None:
                source = FeedSource(
                    url=url,
                    created_at=run_time,
                    last_seen_at=run_time,
                    last_checked_at=run_time,
                )
                result.added.append(source)
            else:
                source = current.model_copy(
                    update={
                        "last_seen_at": max(current.last_seen_at, run_time),
                        "deactivated_at": None,
                    }
                )
                if not current.is_active:
                    result.reactivated.append(source)
            staged[url] = source

        for url, current in staged.items():
            if current.is_active and url not in wanted_set:
                source = current.model_copy(update={"deactivated_at": run_time})
                staged[url] = source
                result.deactivated.append(source)

        self._sources = staged
        return result

    async def get(self, url: str) -> FeedSource:
        """Get an active source by URL."""
        source = self._sources.get(url)
        if source is None or not source.is_active:
            raise NotFoundError(f"feed '{url}' is not an active source")
        return source

    async def set_checkpoint(self, url: str, checked_at: datetime) -> None:
        """Set the freshness checkpoint for one source."""
        source = self._sources.get(url)
        if source is None:
            raise NotFoundError(f"feed '{url}' is not tracked")
        self._sources[url] = source.model_copy(update={"last_checked_at": ensure_utc(checked_at)})

    async def list_sources(self, active_only: bool = False) -> list[FeedSource]:
        """List tracked sources ordered by URL."""
        sources = sorted(self._sources.values(), key=lambda s: s.url)
        if active_only:
            return [s for s in sources if s.is_active]
        return sources
