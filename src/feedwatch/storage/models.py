"""
FeedWatch SQLAlchemy Models and Schema Management.

This module provides:
- The SQLAlchemy ORM model for the feed source registry
- Idempotent schema creation (the start-up "auto-migrate" step)

Usage:
    from feedwatch.storage.models import FeedSourceModel, create_all_tables

    engine = create_engine("postgresql://...")
    create_all_tables(engine)
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from feedwatch.models.source import FeedSource


# =============================================================================
# Base Model
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all FeedWatch models."""


# =============================================================================
# FeedSource Model - The tracked feed registry
# =============================================================================


class FeedSourceModel(Base):
    """
    Feed source registry.

    One row per URL, never deleted. ``deactivated_at IS NULL`` marks the
    active set, which is what the reconciler's bulk deactivation scans.
    """

    __tablename__ = "feed_sources"
    __table_args__ = (
        Index("ix_feed_sources_deactivated_at", "deactivated_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(String(2048), nullable=False, unique=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_seen_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deactivated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    last_checked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def to_source(self) -> FeedSource:
        """Detach into a FeedSource domain model."""
        return FeedSource(
            url=self.url,
            created_at=self.created_at,
            last_seen_at=self.last_seen_at,
            deactivated_at=self.deactivated_at,
            last_checked_at=self.last_checked_at,
        )

    def __repr__(self) -> str:
        state = "active" if self.deactivated_at is None else "deactivated"
        return f"<FeedSourceModel {self.url!r} {state}>"


# =============================================================================
# Schema Management
# =============================================================================


def create_all_tables(engine: Engine) -> None:
    """Create all tables. Safe to call repeatedly."""
    Base.metadata.create_all(engine, checkfirst=True)
