"""Feed source registry models.

A FeedSource is the unit of tracking: one row per feed URL, kept forever,
toggled between active and deactivated as the desired-source list changes.

Example:
    >>> from datetime import UTC, datetime
    >>> from feedwatch.models.source import FeedSource
    >>> t = datetime(2024, 1, 1, tzinfo=UTC)
    >>> src = FeedSource(
    ...     url="https://example.com/rss",
    ...     created_at=t,
    ...     last_seen_at=t,
    ...     last_checked_at=t,
    ... )
    >>> src.is_active
    True
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from feedwatch.models.base import FeedWatchModel, ensure_utc


class FeedSource(FeedWatchModel):
    """A tracked feed source.

    Attributes:
        url: Identity key, unique across active and deactivated rows.
        created_at: Set once, at first registration.
        last_seen_at: Most recent reconciliation that included the URL.
        deactivated_at: None while active; time of deactivation otherwise.
        last_checked_at: Checkpoint. Only items published strictly after it
            are new.
    """

    url: str = Field(..., min_length=1)
    created_at: datetime
    last_seen_at: datetime
    deactivated_at: datetime | None = None
    last_checked_at: datetime

    @field_validator("created_at", "last_seen_at", "last_checked_at", "deactivated_at")
    @classmethod
    def _to_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @property
    def is_active(self) -> bool:
        """True while the source is in the desired set."""
        return self.deactivated_at is None


class ReconcileResult(FeedWatchModel):
    """Diff produced by a single reconciliation run.

    Example:
        >>> from datetime import UTC, datetime
        >>> from feedwatch.models.source import ReconcileResult
        >>> r = ReconcileResult(run_time=datetime(2024, 1, 1, tzinfo=UTC))
        >>> r.has_changes
        False
    """

    run_time: datetime
    added: list[FeedSource] = Field(default_factory=list)
    deactivated: list[FeedSource] = Field(default_factory=list)
    reactivated: list[FeedSource] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.deactivated or self.reactivated)

    @property
    def added_urls(self) -> list[str]:
        return [s.url for s in self.added]

    @property
    def deactivated_urls(self) -> list[str]:
        return [s.url for s in self.deactivated]

    @property
    def reactivated_urls(self) -> list[str]:
        return [s.url for s in self.reactivated]
