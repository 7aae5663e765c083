"""Tests for ConsoleNotifier implementation.

Tests cover:
- Sending messages
- Output formatting
- Lifecycle (initialize/close)
- Protocol compliance
"""

import io

from feedwatch.notifier.console import ConsoleNotifier
from feedwatch.protocols.notification import Notifier

# =============================================================================
# Basic Send Tests
# =============================================================================


class TestConsoleNotifierSend:
    """Tests for sending messages."""

    async def test_send_writes_to_output(self):
        """send writes the text to the stream."""
        out = io.StringIO()
        notifier = ConsoleNotifier(stream=out)

        await notifier.send("Hello")

        assert "Hello" in out.getvalue()

    async def test_send_records_message(self):
        """Every message is kept in .sent."""
        notifier = ConsoleNotifier(stream=io.StringIO())

        await notifier.send("one")
        await notifier.send("two", timeout=1.0)

        assert notifier.sent == ["one", "two"]


# =============================================================================
# Formatting Tests
# =============================================================================


class TestConsoleNotifierFormat:
    """Tests for output format."""

    async def test_continuation_lines_indented(self):
        """Lines after the first are indented under the indicator."""
        out = io.StringIO()
        notifier = ConsoleNotifier(stream=out, show_timestamp=False)

        await notifier.send("Title\nhttps://example.com/1")

        assert out.getvalue() == "📣 Title\n   https://example.com/1\n"

    async def test_timestamp_prefix(self):
        """Timestamps are shown by default."""
        out = io.StringIO()
        notifier = ConsoleNotifier(stream=out)

        await notifier.send("x")

        assert out.getvalue().startswith("[")


# =============================================================================
# Lifecycle Tests
# =============================================================================


class TestConsoleNotifierLifecycle:
    """Tests for lifecycle methods."""

    async def test_initialize_and_close(self):
        notifier = ConsoleNotifier(stream=io.StringIO())
        await notifier.initialize()
        assert notifier._initialized
        await notifier.close()
        assert not notifier._initialized

    def test_implements_notifier_protocol(self):
        assert isinstance(ConsoleNotifier(), Notifier)
