"""Freshness tracking - which fetched items are new since the checkpoint.

Delivery contract:

* An item is new iff it has a publish timestamp strictly after the
  source's checkpoint. Undated items are skipped (logged, never an error)
  and neither advance nor hold back the checkpoint.
* Items are evaluated in fetch order; no re-sorting.
* Once evaluation of a source has been attempted, its checkpoint moves to
  the wall-clock time at which evaluation finished, whether or not every
  notification went out. A failed notification is therefore not retried on
  the next run: delivery is at-most-once once the checkpoint is saved.

Example:
    >>> from datetime import UTC, datetime, timedelta
    >>> from feedwatch.freshness import FreshnessTracker
    >>> from feedwatch.models.item import FetchedItem
    >>> t0 = datetime(2024, 1, 1, tzinfo=UTC)
    >>> items = [
    ...     FetchedItem(title="old", link="a", published_at=t0 - timedelta(seconds=1)),
    ...     FetchedItem(title="new", link="b", published_at=t0 + timedelta(seconds=5)),
    ...     FetchedItem(title="undated", link="c"),
    ... ]
    >>> [i.title for i in FreshnessTracker().extract_new(t0, items)]
    ['new']
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from feedwatch.models.base import ensure_utc, utcnow
from feedwatch.models.item import FetchedItem

logger = logging.getLogger(__name__)


class FreshnessTracker:
    """Decides which items are new and where the checkpoint goes next.

    Args:
        clock: Returns "now" as an aware datetime. Injected for tests.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock

    def extract_new(
        self,
        checkpoint: datetime,
        items: Iterable[FetchedItem],
        *,
        source: str | None = None,
    ) -> list[FetchedItem]:
        """Return the items published strictly after ``checkpoint``.

        Args:
            checkpoint: The source's ``last_checked_at``.
            items: Items in fetch order.
            source: Feed URL, only used in log messages.
        """
        checkpoint = ensure_utc(checkpoint)
        fresh: list[FetchedItem] = []
        for item in items:
            if not item.is_dated:
                logger.info(f"no published date in feed '{source}' for item '{item.title or item.link}'")
                continue
            if item.published_at > checkpoint:
                fresh.append(item)
        return fresh

    def next_checkpoint(self, now: datetime | None = None) -> datetime:
        """Checkpoint to persist once evaluation of a source has finished.

        Always the evaluation's own "now", never the newest item's publish
        time, so items with skewed or future timestamps cannot pin it.
        """
        return ensure_utc(now) if now is not None else ensure_utc(self._clock())

    @staticmethod
    def format_item(item: FetchedItem) -> str:
        """Notification text for a new item.

        Example:
            >>> from feedwatch.freshness import FreshnessTracker
            >>> from feedwatch.models.item import FetchedItem
            >>> FreshnessTracker.format_item(FetchedItem(title="Hi", link="https://x/1"))
            'Hi\\nhttps://x/1'
        """
        return f"{item.title}\n{item.link}"
