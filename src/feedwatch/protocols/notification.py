"""Notification protocol.

A notifier delivers one plain-text message within a deadline. Failures
(including an expired deadline) are raised, never swallowed, so the caller
decides what a failed send means.

Example:
    >>> from feedwatch.protocols.notification import Notifier
    >>> hasattr(Notifier, "send")
    True
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

# Seconds allowed for one message when the caller gives no deadline
DEFAULT_NOTIFY_TIMEOUT = 10.0


@runtime_checkable
class Notifier(Protocol):
    """Notification backend protocol."""

    async def send(self, text: str, timeout: float | None = None) -> None:
        """Send ``text``.

        Args:
            text: Message body.
            timeout: Delivery deadline in seconds; the notifier's default
                when None.

        Raises:
            NotificationError: Delivery failed or the deadline expired.
        """
        ...

    async def initialize(self) -> None:
        """Initialize notifier."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...
