"""Notifier backends."""

from feedwatch.notifier.console import ConsoleNotifier
from feedwatch.notifier.discord import DiscordNotifier

__all__ = [
    "ConsoleNotifier",
    "DiscordNotifier",
]
