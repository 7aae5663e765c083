"""Console notifier implementation.

Prints notifications to a stream instead of delivering them. Used by
``feedwatch check --dry-run`` and in tests.

Example:
    >>> from feedwatch.notifier.console import ConsoleNotifier
    >>> notifier = ConsoleNotifier()
    >>> hasattr(notifier, 'send')
    True
"""

from __future__ import annotations

import sys
from typing import TextIO

from feedwatch.models.base import utcnow


class ConsoleNotifier:
    """Console notifier that writes each message to a stream.

    Best for: Testing, development, dry runs.

    Example:
        >>> import asyncio
        >>> import io
        >>> from feedwatch.notifier.console import ConsoleNotifier
        >>> out = io.StringIO()
        >>> notifier = ConsoleNotifier(stream=out, show_timestamp=False)
        >>> asyncio.run(notifier.send("Hello\\nhttps://x/1"))
        >>> out.getvalue()
        '📣 Hello\\n   https://x/1\\n'
    """

    INDICATOR = "📣"

    def __init__(
        self,
        stream: TextIO | None = None,
        show_timestamp: bool = True,
    ) -> None:
        """Initialize console notifier.

        Args:
            stream: Output stream (default sys.stdout).
            show_timestamp: Include timestamp in output.
        """
        self._stream = stream or sys.stdout
        self._show_timestamp = show_timestamp
        self._initialized = False
        self.sent: list[str] = []

    async def initialize(self) -> None:
        """Initialize notifier (no-op for console)."""
        self._initialized = True

    async def close(self) -> None:
        """Clean up resources (no-op for console)."""
        self._initialized = False

    async def send(self, text: str, timeout: float | None = None) -> None:
        """Write ``text`` to the stream. The timeout is ignored."""
        self._stream.write(self._format(text) + "\n")
        self._stream.flush()
        self.sent.append(text)

    def _format(self, text: str) -> str:
        """Format a message for display; continuation lines are indented."""
        parts: list[str] = []

        if self._show_timestamp:
            ts = utcnow().strftime("%Y-%m-%d %H:%M:%S")
            parts.append(f"[{ts}]")

        parts.append(self.INDICATOR)
        first, *rest = text.split("\n")
        parts.append(first)

        formatted = " ".join(parts)
        for line in rest:
            formatted += "\n   " + line
        return formatted
