"""Tests for SQLAlchemyFeedStore-specific behaviour."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool, StaticPool

from feedwatch.core.exceptions import StorageError
from feedwatch.storage.models import FeedSourceModel
from feedwatch.storage.sqlalchemy_storage import SQLAlchemyFeedStore, StoreConfig

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
T1 = T0 + timedelta(hours=6)

A = "https://a.example/rss"
B = "https://b.example/rss"


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'feeds.db'}"


@pytest.fixture
async def store(db_url):
    s = SQLAlchemyFeedStore(db_url)
    await s.initialize()
    yield s
    await s.close()


# =============================================================================
# Configuration
# =============================================================================


class TestStoreConfig:
    """Tests for engine configuration."""

    def test_defaults(self) -> None:
        """Config has pool defaults."""
        config = StoreConfig()
        assert config.pool_size == 5
        assert config.batch_size == 500

    def test_kwargs_override(self) -> None:
        """Keyword arguments build the config."""
        store = SQLAlchemyFeedStore("sqlite://", batch_size=2)
        assert store.config.batch_size == 2

    def test_memory_sqlite_uses_static_pool(self) -> None:
        """In-memory SQLite shares one connection."""
        store = SQLAlchemyFeedStore("sqlite://")
        assert isinstance(store._get_engine().pool, StaticPool)

    def test_pool_size_zero_uses_null_pool(self) -> None:
        """pool_size=0 disables pooling for server databases."""
        pytest.importorskip("psycopg")
        store = SQLAlchemyFeedStore("postgresql+psycopg://u:p@localhost/feeds", pool_size=0)
        assert isinstance(store._get_engine().pool, NullPool)


# =============================================================================
# Lifecycle
# =============================================================================


class TestInitialize:
    """Tests for initialize()."""

    async def test_creates_schema(self, db_url) -> None:
        """initialize() creates the feed_sources table."""
        store = SQLAlchemyFeedStore(db_url)
        await store.initialize()
        try:
            assert "feed_sources" in inspect(store._get_engine()).get_table_names()
        finally:
            await store.close()

    async def test_initialize_twice(self, store) -> None:
        """initialize() is idempotent."""
        await store.reconcile([A], T0)
        await store.initialize()
        assert [s.url for s in await store.list_sources()] == [A]

    async def test_unreachable_database(self, tmp_path) -> None:
        """An unusable database is a StorageError."""
        store = SQLAlchemyFeedStore(f"sqlite:///{tmp_path / 'missing' / 'feeds.db'}")
        with pytest.raises(StorageError):
            await store.initialize()

    async def test_state_survives_reopen(self, db_url) -> None:
        """The registry is persisted across store instances."""
        first = SQLAlchemyFeedStore(db_url)
        await first.initialize()
        await first.reconcile([A, B], T0)
        await first.set_checkpoint(A, T1)
        await first.close()

        second = SQLAlchemyFeedStore(db_url)
        await second.initialize()
        try:
            source = await second.get(A)
            assert source.last_checked_at == T1
            assert source.last_checked_at.tzinfo == UTC
        finally:
            await second.close()


# =============================================================================
# Transactions
# =============================================================================


class TestReconcileTransaction:
    """Reconcile commits everything or nothing."""

    async def test_failure_rolls_back(self, store, monkeypatch) -> None:
        """An error part-way through leaves the registry unchanged."""
        await store.reconcile([A], T0)

        def fail(self):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        with monkeypatch.context() as m:
            m.setattr(FeedSourceModel, "to_source", fail)
            with pytest.raises(StorageError, match="reconciling feeds"):
                await store.reconcile([B], T1)

        sources = await store.list_sources()
        assert [s.url for s in sources] == [A]
        assert sources[0].is_active
        assert sources[0].last_seen_at == T0

    async def test_batched_lookup(self, db_url) -> None:
        """URL lookups larger than batch_size still find every row."""
        store = SQLAlchemyFeedStore(db_url, batch_size=2)
        await store.initialize()
        try:
            urls = [f"https://feeds.example/{i}" for i in range(5)]
            await store.reconcile(urls, T0)
            result = await store.reconcile(urls, T1)
            assert not result.has_changes
            assert len(await store.list_sources(active_only=True)) == 5
        finally:
            await store.close()

    async def test_missing_table_is_storage_error(self, store) -> None:
        """Queries against a broken schema raise StorageError."""
        FeedSourceModel.__table__.drop(store._get_engine())
        with pytest.raises(StorageError):
            await store.list_sources()
