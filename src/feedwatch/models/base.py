"""Base model and shared helpers.

Example:
    >>> from datetime import datetime
    >>> from feedwatch.models.base import ensure_utc
    >>> ensure_utc(datetime(2024, 1, 1, 12, 0)).isoformat()
    '2024-01-01T12:00:00+00:00'
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict


class FeedWatchModel(BaseModel):
    """Base model with standard configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


def utcnow() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Naive values are taken to already be in UTC (SQLite drops tzinfo on the
    way back out of the database).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
