"""Protocol definitions - all extension points."""

from feedwatch.protocols.feed import FeedFetcher, SourceList
from feedwatch.protocols.notification import Notifier
from feedwatch.protocols.storage import FeedStore

__all__ = [
    # Storage
    "FeedStore",
    # Notification
    "Notifier",
    # Feed
    "FeedFetcher",
    "SourceList",
]
