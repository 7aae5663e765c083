"""Check run results - what happened during one invocation.

These are reporting objects handed back to the caller (CLI, tests).
They are never persisted; the only state carried between runs lives in
the feed store.

Example:
    >>> from feedwatch.models.check import CheckResult, SourceCheck, SourceStatus
    >>> result = CheckResult()
    >>> result.sources.append(SourceCheck(url="https://a.example/rss", items_new=2))
    >>> result.total_new
    2
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from feedwatch.models.base import utcnow
from feedwatch.models.source import ReconcileResult


class SourceStatus(str, Enum):
    """Outcome of evaluating one source.

    Example:
        >>> from feedwatch.models.check import SourceStatus
        >>> SourceStatus.FETCH_FAILED.value
        'fetch_failed'
    """

    OK = "ok"
    FETCH_FAILED = "fetch_failed"
    STORE_FAILED = "store_failed"
    # failed outside a known stage
    ERROR = "error"


@dataclass
class SourceCheck:
    """Per-source statistics for one check run."""

    url: str
    status: SourceStatus = SourceStatus.OK
    items_fetched: int = 0
    items_new: int = 0
    items_undated: int = 0
    notifications_sent: int = 0
    notifications_failed: int = 0
    checkpoint: datetime | None = None
    checkpoint_saved: bool = False
    error: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == SourceStatus.OK


@dataclass
class CheckResult:
    """Result of one reconcile-and-check invocation.

    ``reconcile`` is None when the run aborted before or during
    reconciliation; ``error`` then says why.
    """

    started_at: datetime = field(default_factory=utcnow)
    completed_at: datetime | None = None
    reconcile: ReconcileResult | None = None
    sources: list[SourceCheck] = field(default_factory=list)
    error: str | None = None
    skipped: bool = False

    @property
    def aborted(self) -> bool:
        """True if the run never got past reconciliation."""
        return self.error is not None

    @property
    def total_new(self) -> int:
        """New items across all sources."""
        return sum(s.items_new for s in self.sources)

    @property
    def total_notified(self) -> int:
        return sum(s.notifications_sent for s in self.sources)

    @property
    def failed_sources(self) -> list[SourceCheck]:
        return [s for s in self.sources if not s.is_success]

    @property
    def duration_seconds(self) -> float | None:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()
