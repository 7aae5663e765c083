"""FeedWatch - orchestrator for one reconcile-and-check invocation.

One invocation:

1. Load the desired feed URLs.
2. Reconcile them against the store and announce the diff (one summary
   message per non-empty group).
3. For each desired URL, in order: fetch, load the checkpoint, notify once
   per new item, then save the advanced checkpoint.

Nothing is carried between invocations except through the store. Every
failure after reconciliation is contained to the source or message it
belongs to and reported through logging.

Example:
    >>> import asyncio
    >>> from feedwatch.core.feedwatch import FeedWatch
    >>> from feedwatch.notifier.console import ConsoleNotifier
    >>> from feedwatch.storage.memory import MemoryFeedStore
    >>> class NoFeeds:
    ...     def load(self):
    ...         return []
    >>> class NoFetch:
    ...     async def fetch(self, url):
    ...         return []
    ...     async def close(self):
    ...         pass
    >>> async def example():
    ...     async with FeedWatch(MemoryFeedStore(), NoFeeds(), NoFetch(), ConsoleNotifier()) as watch:
    ...         result = await watch.check()
    ...     return result.total_new
    >>> asyncio.run(example())
    0
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from feedwatch.core.exceptions import FeedError, NotificationError, SourceListError, StorageError
from feedwatch.core.reconciler import Reconciler, normalize_urls
from feedwatch.freshness import FreshnessTracker
from feedwatch.models.base import utcnow
from feedwatch.models.check import CheckResult, SourceCheck, SourceStatus
from feedwatch.protocols.notification import DEFAULT_NOTIFY_TIMEOUT

if TYPE_CHECKING:
    from feedwatch.models.source import ReconcileResult
    from feedwatch.protocols.feed import FeedFetcher, SourceList
    from feedwatch.protocols.notification import Notifier
    from feedwatch.protocols.storage import FeedStore

logger = logging.getLogger(__name__)


def summary_message(urls: list[str], action: str) -> str:
    """Summary text for a group of changed feeds.

    Example:
        >>> print(summary_message(["https://a/rss", "https://b/rss"], "added"))
        2 feed(s) were added:
        https://a/rss
        https://b/rss
    """
    return f"{len(urls)} feed(s) were {action}:\n" + "\n".join(urls)


class FeedWatch:
    """Main orchestrator for feed registry reconciliation and checking.

    Args:
        store: Feed store (the only shared mutable state).
        source_list: Supplies the desired feed URLs.
        fetcher: Fetches and parses feed documents.
        notifier: Delivers messages.
        notify_timeout: Deadline per message, in seconds.
        tracker: Freshness tracker (default uses ``clock``).
        clock: Returns "now" as an aware datetime.

    ``check()`` is not reentrant. A call made while another is still
    running is skipped rather than queued.
    """

    def __init__(
        self,
        store: FeedStore,
        source_list: SourceList,
        fetcher: FeedFetcher,
        notifier: Notifier,
        *,
        notify_timeout: float = DEFAULT_NOTIFY_TIMEOUT,
        tracker: FreshnessTracker | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._source_list = source_list
        self._fetcher = fetcher
        self._notifier = notifier
        self._notify_timeout = notify_timeout
        self._clock = clock
        self._reconciler = Reconciler(store, clock=clock)
        self._tracker = tracker or FreshnessTracker(clock=clock)
        self._running = asyncio.Lock()
        self._initialized = False

    @property
    def store(self) -> FeedStore:
        """Get the feed store."""
        return self._store

    @property
    def notifier(self) -> Notifier:
        """Get the notifier."""
        return self._notifier

    @property
    def is_running(self) -> bool:
        """True while a check is in progress."""
        return self._running.locked()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def initialize(self) -> None:
        """Initialize the store and notifier.

        Raises:
            StorageError: The store is unreachable (fatal at startup).
        """
        if self._initialized:
            return
        await self._store.initialize()
        await self._notifier.initialize()
        self._initialized = True

    async def close(self) -> None:
        """Close fetcher, notifier and store."""
        try:
            try:
                await self._fetcher.close()
            finally:
                await self._notifier.close()
        finally:
            await self._store.close()
            self._initialized = False

    async def __aenter__(self) -> FeedWatch:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # =========================================================================
    # Reconciliation
    # =========================================================================

    async def update_sources(self, desired_urls: Iterable[str], *, announce: bool = True) -> ReconcileResult:
        """Reconcile the registry and announce what changed.

        A failed summary send is logged; it never fails the update.

        Raises:
            StorageError: Reconciliation rolled back; nothing was announced.
        """
        result = await self._reconciler.reconcile(desired_urls)

        if announce:
            for urls, action in (
                (result.added_urls, "added"),
                (result.deactivated_urls, "deactivated"),
                (result.reactivated_urls, "reactivated"),
            ):
                if urls:
                    await self._notify(summary_message(urls, action))
        return result

    # =========================================================================
    # Check run
    # =========================================================================

    async def check(self) -> CheckResult:
        """Run one reconcile-and-check invocation."""
        if self._running.locked():
            logger.warning("previous check still running, skipping this one")
            return CheckResult(started_at=self._clock(), completed_at=self._clock(), skipped=True)

        async with self._running:
            return await self._check()

    async def _check(self) -> CheckResult:
        result = CheckResult(started_at=self._clock())

        try:
            urls = normalize_urls(self._source_list.load())
        except SourceListError as e:
            logger.error(f"reading feeds: {e}")
            result.error = str(e)
            result.completed_at = self._clock()
            return result

        try:
            result.reconcile = await self.update_sources(urls)
        except StorageError as e:
            logger.error(f"updating feeds: {e}")
            result.error = str(e)
            result.completed_at = self._clock()
            return result

        for url in urls:
            try:
                result.sources.append(await self.check_source(url))
            except Exception as e:
                logger.exception(f"checking feed '{url}' failed unexpectedly")
                result.sources.append(
                    SourceCheck(url=url, status=SourceStatus.ERROR, error=f"{type(e).__name__}: {e}")
                )

        result.completed_at = self._clock()
        logger.info(
            f"check finished: {len(result.sources)} feed(s), {result.total_new} new item(s), "
            f"{result.total_notified} notified, {len(result.failed_sources)} failed"
        )
        return result

    async def check_source(self, url: str) -> SourceCheck:
        """Evaluate one active source and advance its checkpoint.

        The checkpoint is left alone when the fetch or the checkpoint read
        fails. Otherwise it is advanced once evaluation has been attempted,
        even if some notifications failed.
        """
        check = SourceCheck(url=url)

        try:
            items = await self._fetcher.fetch(url)
        except FeedError as e:
            logger.error(f"reading feed '{url}': {e}")
            check.status = SourceStatus.FETCH_FAILED
            check.error = str(e)
            return check
        check.items_fetched = len(items)

        try:
            source = await self._store.get(url)
        except StorageError as e:
            logger.error(f"getting feed '{url}' from db: {e}")
            check.status = SourceStatus.STORE_FAILED
            check.error = str(e)
            return check

        fresh = self._tracker.extract_new(source.last_checked_at, items, source=url)
        check.items_new = len(fresh)
        check.items_undated = sum(1 for item in items if not item.is_dated)

        for item in fresh:
            if await self._notify(self._tracker.format_item(item)):
                check.notifications_sent += 1
            else:
                check.notifications_failed += 1

        check.checkpoint = self._tracker.next_checkpoint()
        try:
            await self._store.set_checkpoint(url, check.checkpoint)
            check.checkpoint_saved = True
        except StorageError as e:
            logger.error(f"setting last checked for feed '{url}': {e}")
            check.status = SourceStatus.STORE_FAILED
            check.error = str(e)

        logger.info(
            f"feed '{url}': {check.items_fetched} item(s), {check.items_new} new, "
            f"{check.notifications_failed} notification(s) failed"
        )
        return check

    async def _notify(self, text: str) -> bool:
        """Send one message. Failures are logged and never retried."""
        try:
            await self._notifier.send(text, timeout=self._notify_timeout)
        except NotificationError as e:
            logger.error(f"sending notification: {e}")
            return False
        return True
