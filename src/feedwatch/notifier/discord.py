"""Discord notifier - posts messages to channels as a bot.

Uses the Discord REST API directly with httpx:
``POST /channels/{channel_id}/messages`` with a ``Bot`` authorization
header. Every send has a deadline; running out of time counts as a failed
send and is raised as NotificationError like any other failure.

Example:
    >>> from feedwatch.notifier.discord import DiscordNotifier
    >>> n = DiscordNotifier(bot_token="token", channel_ids=["123"])
    >>> n.channel_ids
    ['123']
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from feedwatch.core.exceptions import NotificationError
from feedwatch.protocols.notification import DEFAULT_NOTIFY_TIMEOUT

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"


class DiscordNotifier:
    """Delivers plain-text messages to one or more Discord channels.

    Messages longer than Discord's limit are truncated. The message is
    posted to every configured channel; if any channel fails the send as
    a whole fails, after all channels were attempted.

    Args:
        bot_token: Discord bot token.
        channel_ids: Channels to post to.
        timeout: Default per-message deadline in seconds.
        api_base: API root (overridable for tests/proxies).
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    MAX_MESSAGE_LENGTH = 2000

    def __init__(
        self,
        bot_token: str,
        channel_ids: list[str],
        timeout: float = DEFAULT_NOTIFY_TIMEOUT,
        *,
        api_base: str = DISCORD_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not channel_ids:
            raise ValueError("at least one channel id is required")
        self._bot_token = bot_token
        self.channel_ids = list(channel_ids)
        self.timeout = timeout
        self._api_base = api_base.rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._api_base,
                headers={
                    "Authorization": f"Bot {self._bot_token}",
                    "User-Agent": "DiscordBot (https://github.com/feedwatch/feedwatch, 0.1.0)",
                },
                transport=self._transport,
            )
        return self._client

    async def initialize(self) -> None:
        await self._ensure_client()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    @classmethod
    def truncate(cls, text: str) -> str:
        """Fit ``text`` into a single Discord message.

        Example:
            >>> len(DiscordNotifier.truncate("x" * 2500))
            2000
        """
        if len(text) <= cls.MAX_MESSAGE_LENGTH:
            return text
        return text[: cls.MAX_MESSAGE_LENGTH - 1] + "…"

    async def send(self, text: str, timeout: float | None = None) -> None:
        """Post ``text`` to every channel within the deadline.

        Raises:
            NotificationError: A channel rejected the message, the request
                failed, or the deadline expired.
        """
        deadline = timeout if timeout is not None else self.timeout
        content = self.truncate(text)

        failures: list[str] = []
        try:
            async with asyncio.timeout(deadline):
                for channel_id in self.channel_ids:
                    error = await self._post(channel_id, content)
                    if error is not None:
                        failures.append(error)
        except TimeoutError as e:
            raise NotificationError(f"sending notification timed out after {deadline}s", cause=e) from e

        if failures:
            raise NotificationError("sending notification failed: " + "; ".join(failures))

    async def _post(self, channel_id: str, content: str) -> str | None:
        """Post to one channel. Returns an error description, or None on success."""
        client = await self._ensure_client()
        try:
            resp = await client.post(f"/channels/{channel_id}/messages", json={"content": content})
        except httpx.HTTPError as e:
            return f"channel {channel_id}: {e!r}"

        if resp.is_success:
            return None
        logger.debug(f"Discord returned {resp.status_code} for channel {channel_id}: {resp.text[:200]}")
        return f"channel {channel_id}: HTTP {resp.status_code}"
