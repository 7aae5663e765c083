"""Domain models."""

from feedwatch.models.base import FeedWatchModel, ensure_utc, utcnow
from feedwatch.models.check import CheckResult, SourceCheck, SourceStatus
from feedwatch.models.item import FetchedItem
from feedwatch.models.source import FeedSource, ReconcileResult

__all__ = [
    "CheckResult",
    "FeedSource",
    "FeedWatchModel",
    "FetchedItem",
    "ReconcileResult",
    "SourceCheck",
    "SourceStatus",
    "ensure_utc",
    "utcnow",
]
