"""FetchedItem - one entry of a fetched feed document. Never persisted.

Example:
    >>> from feedwatch.models.item import FetchedItem
    >>> item = FetchedItem(title="Hello", link="https://example.com/1")
    >>> item.published_at is None
    True
"""

from __future__ import annotations

from datetime import datetime

from pydantic import field_validator

from feedwatch.models.base import FeedWatchModel, ensure_utc


class FetchedItem(FeedWatchModel):
    """A feed entry as returned by a fetcher."""

    title: str = ""
    link: str = ""
    published_at: datetime | None = None

    @field_validator("published_at")
    @classmethod
    def _to_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @property
    def is_dated(self) -> bool:
        return self.published_at is not None
