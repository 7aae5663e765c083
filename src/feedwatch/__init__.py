"""
FeedWatch - Feed Registry Reconciliation & Freshness Tracking.

FeedWatch polls a list of RSS/Atom feeds on a schedule and posts one
notification per newly published item.

Key Features:
- Desired feed list reconciled against a persistent registry
  (additions, deactivations, reactivations)
- Per-feed checkpoint; only items published after it are announced
- Atomic reconciliation, per-source failure isolation
- Non-overlapping cron-driven runs

Quick Start:
    >>> from feedwatch import FeedWatch, FileSourceList, RSSFeedFetcher
    >>> from feedwatch import ConsoleNotifier, SQLAlchemyFeedStore
    >>> watch = FeedWatch(
    ...     store=SQLAlchemyFeedStore("sqlite:///feeds.db"),
    ...     source_list=FileSourceList("feeds.txt"),
    ...     fetcher=RSSFeedFetcher(),
    ...     notifier=ConsoleNotifier(),
    ... )
    >>> # async with watch:
    >>> #     result = await watch.check()
"""

# Fetchers and source lists
from feedwatch.adapter.file import FileSourceList
from feedwatch.adapter.rss import RSSFeedFetcher

# Orchestration
from feedwatch.core.feedwatch import FeedWatch
from feedwatch.core.reconciler import Reconciler

# Errors
from feedwatch.core.exceptions import (
    ConfigurationError,
    FeedError,
    FeedWatchError,
    NotFoundError,
    NotificationError,
    SourceListError,
    StorageError,
)

# Freshness
from feedwatch.freshness import FreshnessTracker

# Models
from feedwatch.models import (
    CheckResult,
    FeedSource,
    FetchedItem,
    ReconcileResult,
    SourceCheck,
    SourceStatus,
)

# Notifier backends
from feedwatch.notifier.console import ConsoleNotifier
from feedwatch.notifier.discord import DiscordNotifier

# Scheduler
from feedwatch.scheduler.cron import CronScheduler

# Storage backends
from feedwatch.storage.memory import MemoryFeedStore
from feedwatch.storage.sqlalchemy_storage import SQLAlchemyFeedStore, StoreConfig

__version__ = "0.1.0"

__all__ = [
    # Models
    "FeedSource",
    "FetchedItem",
    "ReconcileResult",
    "CheckResult",
    "SourceCheck",
    "SourceStatus",
    # Storage
    "MemoryFeedStore",
    "SQLAlchemyFeedStore",
    "StoreConfig",
    # Fetching
    "FileSourceList",
    "RSSFeedFetcher",
    # Notifier
    "ConsoleNotifier",
    "DiscordNotifier",
    # Core
    "FeedWatch",
    "Reconciler",
    "FreshnessTracker",
    "CronScheduler",
    # Errors
    "FeedWatchError",
    "ConfigurationError",
    "StorageError",
    "NotFoundError",
    "FeedError",
    "NotificationError",
    "SourceListError",
    # Version
    "__version__",
]
