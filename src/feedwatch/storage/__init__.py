"""Feed store backends."""

from feedwatch.storage.memory import MemoryFeedStore
from feedwatch.storage.sqlalchemy_storage import SQLAlchemyFeedStore, StoreConfig

__all__ = [
    "MemoryFeedStore",
    "SQLAlchemyFeedStore",
    "StoreConfig",
]
