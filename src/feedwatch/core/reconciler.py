"""Reconciler - align the stored source registry with the desired list.

Example:
    >>> import asyncio
    >>> from feedwatch.core.reconciler import Reconciler
    >>> from feedwatch.storage.memory import MemoryFeedStore
    >>> async def example():
    ...     reconciler = Reconciler(MemoryFeedStore())
    ...     result = await reconciler.reconcile(["https://a/rss", "https://a/rss", " "])
    ...     return result.added_urls
    >>> asyncio.run(example())
    ['https://a/rss']
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TYPE_CHECKING

from feedwatch.models.base import utcnow

if TYPE_CHECKING:
    from feedwatch.models.source import ReconcileResult
    from feedwatch.protocols.storage import FeedStore

logger = logging.getLogger(__name__)


def normalize_urls(urls: Iterable[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate, keeping first-seen order.

    Example:
        >>> normalize_urls([" b ", "a", "", "b"])
        ['b', 'a']
    """
    return list(dict.fromkeys(u.strip() for u in urls if u and u.strip()))


class Reconciler:
    """Computes additions and deactivations against the feed store.

    One ``run_time`` is captured per call and applied to every row the
    call touches. The store performs the upsert and the deactivation in a
    single transaction and hands back the diff; the reconciler itself
    sends nothing.

    Args:
        store: Feed store.
        clock: Returns "now" as an aware datetime.
    """

    def __init__(self, store: FeedStore, clock: Callable[[], datetime] = utcnow) -> None:
        self._store = store
        self._clock = clock

    async def reconcile(self, desired_urls: Iterable[str]) -> ReconcileResult:
        """Make the active source set equal ``desired_urls``.

        Raises:
            StorageError: The store rolled back; nothing changed.
        """
        urls = normalize_urls(desired_urls)
        run_time = self._clock()

        result = await self._store.reconcile(urls, run_time)

        logger.info(
            f"reconciled {len(urls)} feed(s): {len(result.added)} added, "
            f"{len(result.deactivated)} deactivated, {len(result.reactivated)} reactivated"
        )
        for source in result.reactivated:
            logger.debug(
                f"feed '{source.url}' reactivated, resuming from checkpoint "
                f"{source.last_checked_at.isoformat()}"
            )
        return result
