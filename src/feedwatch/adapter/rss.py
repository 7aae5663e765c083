"""RSS/Atom feed fetcher.

Downloads a feed document with httpx and parses it with feedparser, which
handles RSS 0.9x/1.0/2.0 and Atom and normalises publish dates to UTC.

Example:
    >>> from feedwatch.adapter.rss import RSSFeedFetcher
    >>> fetcher = RSSFeedFetcher(timeout=15.0)
    >>> fetcher.timeout
    15.0
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

import feedparser
import httpx

from feedwatch.core.exceptions import FeedError
from feedwatch.models.item import FetchedItem

logger = logging.getLogger(__name__)


def _to_datetime(entry: Any) -> datetime | None:
    """Publish time of an entry, falling back to its updated time."""
    for key in ("published_parsed", "updated_parsed"):
        parsed: time.struct_time | None = entry.get(key)
        if parsed:
            return datetime(*parsed[:6], tzinfo=UTC)
    return None


class RSSFeedFetcher:
    """Feed fetcher for RSS and Atom feeds.

    One ``httpx.AsyncClient`` is reused across fetches and closed by
    ``close()``. There is no retry: a failed fetch is reported and the
    source is tried again on the next scheduled run.

    Args:
        timeout: Request timeout in seconds (default: 30.0).
        user_agent: User-Agent header.
        headers: Extra HTTP headers.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8"

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        user_agent: str = "FeedWatch/0.1.0",
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.headers = headers or {}
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.user_agent, "Accept": self.ACCEPT, **self.headers},
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> RSSFeedFetcher:
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _fetch_xml(self, url: str) -> bytes:
        """Download the raw feed document.

        Raises:
            FeedError: Network error, timeout or non-2xx status.
        """
        client = await self._ensure_client()
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FeedError(
                f"Failed to fetch feed: HTTP {e.response.status_code}",
                source=url,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise FeedError(f"Failed to fetch feed: {e!r}", source=url, cause=e) from e
        return response.content

    def parse(self, content: bytes | str, url: str) -> list[FetchedItem]:
        """Parse a feed document into items, in document order.

        Raises:
            FeedError: The document is not a feed at all.
        """
        parsed = feedparser.parse(content)
        if parsed.get("bozo") and not parsed.entries and not parsed.get("version"):
            raise FeedError(
                f"Failed to parse feed: {parsed.get('bozo_exception')}",
                source=url,
                cause=parsed.get("bozo_exception"),
            )

        return [
            FetchedItem(
                title=entry.get("title") or "",
                link=entry.get("link") or "",
                published_at=_to_datetime(entry),
            )
            for entry in parsed.entries
        ]

    async def fetch(self, url: str) -> list[FetchedItem]:
        """Fetch and parse the feed at ``url``."""
        content = await self._fetch_xml(url)
        items = self.parse(content, url)
        logger.debug(f"fetched {len(items)} item(s) from '{url}'")
        return items
