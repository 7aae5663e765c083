"""Feed fetchers and source lists."""

from feedwatch.adapter.file import FileSourceList
from feedwatch.adapter.rss import RSSFeedFetcher

__all__ = [
    "FileSourceList",
    "RSSFeedFetcher",
]
