"""CLI entry point."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from feedwatch.adapter.file import FileSourceList
from feedwatch.adapter.rss import RSSFeedFetcher
from feedwatch.core.config import DEFAULT_CONFIG_PATH, Settings, load_settings
from feedwatch.core.exceptions import ConfigurationError, SourceListError, StorageError
from feedwatch.core.feedwatch import FeedWatch
from feedwatch.core.logging import configure_logging
from feedwatch.models.check import CheckResult
from feedwatch.notifier.console import ConsoleNotifier
from feedwatch.notifier.discord import DiscordNotifier
from feedwatch.protocols.notification import Notifier
from feedwatch.scheduler.cron import CronScheduler
from feedwatch.storage.sqlalchemy_storage import SQLAlchemyFeedStore

app = typer.Typer(
    name="feedwatch",
    help="Follow RSS/Atom feeds and announce new items",
    no_args_is_help=True,
)
console = Console()

ConfigOption = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="YAML config file")
FeedsOption = typer.Option(None, "--feeds", "-f", help="Feeds file (overrides the config)")


def _settings(config: Path, feeds: Path | None) -> Settings:
    """Load settings and configure logging, or exit with status 1.

    A missing default config file is fine; settings then come from the
    environment alone.
    """
    if config == DEFAULT_CONFIG_PATH and not config.exists():
        config = None
    try:
        settings = load_settings(config, feeds_path=feeds)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    configure_logging(settings.log_level, settings.log_format)
    return settings


def _build(settings: Settings, notifier: Notifier | None = None) -> FeedWatch:
    return FeedWatch(
        store=SQLAlchemyFeedStore(settings.database_url),
        source_list=FileSourceList(settings.feeds_path),
        fetcher=RSSFeedFetcher(timeout=settings.fetch_timeout, user_agent=settings.user_agent),
        notifier=notifier
        or DiscordNotifier(settings.bot_token, settings.channel_ids, timeout=settings.notify_timeout),
        notify_timeout=settings.notify_timeout,
    )


def _print_result(result: CheckResult) -> None:
    if result.skipped:
        console.print("[yellow]Previous check still running, skipped[/yellow]")
        return
    if result.reconcile is not None:
        for label, urls in (
            ("Added", result.reconcile.added_urls),
            ("Deactivated", result.reconcile.deactivated_urls),
            ("Reactivated", result.reconcile.reactivated_urls),
        ):
            if urls:
                console.print(f"[bold]{label}:[/bold] {', '.join(urls)}")

    table = Table(title="Feeds")
    table.add_column("URL")
    table.add_column("Status")
    table.add_column("Items", justify="right")
    table.add_column("New", justify="right")
    table.add_column("Notified", justify="right")
    table.add_column("Error")
    for source in result.sources:
        style = "green" if source.is_success else "red"
        table.add_row(
            source.url,
            f"[{style}]{source.status.value}[/{style}]",
            str(source.items_fetched),
            str(source.items_new),
            str(source.notifications_sent),
            source.error or "",
        )
    console.print(table)

    duration = result.duration_seconds or 0.0
    console.print(f"{result.total_new} new item(s) from {len(result.sources)} feed(s) in {duration:.1f}s")


@app.command()
def run(
    config: Path = ConfigOption,
    feeds: Path | None = FeedsOption,
    no_initial: bool = typer.Option(False, "--no-initial", help="Wait for the first cron fire"),
) -> None:
    """Check now, then on the cron schedule, until interrupted."""
    settings = _settings(config, feeds)
    watch = _build(settings)

    async def main() -> None:
        async with watch:
            scheduler = CronScheduler(watch.check, settings.cron_schedule, timezone=settings.timezone)
            await scheduler.run_forever(run_immediately=not no_initial)

    try:
        asyncio.run(main())
    except StorageError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        console.print("Stopped")


@app.command()
def check(
    config: Path = ConfigOption,
    feeds: Path | None = FeedsOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Print notifications instead of sending"),
) -> None:
    """Run a single reconcile-and-check pass."""
    settings = _settings(config, feeds)
    watch = _build(settings, ConsoleNotifier() if dry_run else None)

    async def main() -> CheckResult:
        async with watch:
            return await watch.check()

    try:
        result = asyncio.run(main())
    except StorageError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    _print_result(result)
    if result.aborted:
        console.print(f"[red]{result.error}[/red]")
        raise typer.Exit(1)


@app.command()
def reconcile(
    config: Path = ConfigOption,
    feeds: Path | None = FeedsOption,
) -> None:
    """Update the registry from the feeds file without fetching or notifying."""
    settings = _settings(config, feeds)
    watch = _build(settings, ConsoleNotifier())

    async def main():
        async with watch:
            return await watch.update_sources(FileSourceList(settings.feeds_path).load(), announce=False)

    try:
        result = asyncio.run(main())
    except (SourceListError, StorageError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    if not result.has_changes:
        console.print("No changes")
        return
    for label, urls in (
        ("added", result.added_urls),
        ("deactivated", result.deactivated_urls),
        ("reactivated", result.reactivated_urls),
    ):
        for url in urls:
            console.print(f"{label:<12} {url}")


@app.command()
def sources(
    config: Path = ConfigOption,
    show_all: bool = typer.Option(False, "--all", "-a", help="Include deactivated feeds"),
) -> None:
    """List tracked feeds."""
    settings = _settings(config, None)
    store = SQLAlchemyFeedStore(settings.database_url)

    async def main():
        await store.initialize()
        try:
            return await store.list_sources(active_only=not show_all)
        finally:
            await store.close()

    try:
        rows = asyncio.run(main())
    except StorageError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    table = Table(title="Tracked feeds")
    table.add_column("URL")
    table.add_column("Added")
    table.add_column("Last checked")
    if show_all:
        table.add_column("Deactivated")
    for source in rows:
        row = [
            source.url,
            source.created_at.strftime("%Y-%m-%d"),
            source.last_checked_at.strftime("%Y-%m-%d %H:%M"),
        ]
        if show_all:
            row.append(source.deactivated_at.strftime("%Y-%m-%d %H:%M") if source.deactivated_at else "")
        table.add_row(*row)
    console.print(table)


@app.command()
def version() -> None:
    """Show version."""
    from feedwatch import __version__

    console.print(f"feedwatch {__version__}")


if __name__ == "__main__":
    app()
