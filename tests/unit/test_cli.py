"""Tests for the feedwatch command line."""

from __future__ import annotations

import logging
import os

import pytest
from typer.testing import CliRunner

from feedwatch import __version__
from feedwatch.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Run in an empty directory without FEEDWATCH_* variables."""
    for key in list(os.environ):
        if key.startswith("FEEDWATCH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    logger = logging.getLogger("feedwatch")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture
def config(tmp_path):
    feeds = tmp_path / "feeds.txt"
    feeds.write_text("https://a.example/rss\nhttps://b.example/rss\n", encoding="utf-8")
    path = tmp_path / "config.yaml"
    path.write_text(
        "botToken: secret\n"
        "channelID: '123'\n"
        f"dbURI: sqlite:///{tmp_path / 'feeds.db'}\n"
        f"feedsPath: {feeds}\n"
        "logLevel: WARNING\n",
        encoding="utf-8",
    )
    return path


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"feedwatch {__version__}" in result.output


class TestConfigErrors:
    """Fatal configuration problems exit with status 1."""

    def test_missing_settings(self) -> None:
        result = runner.invoke(app, ["sources"])
        assert result.exit_code == 1
        assert "invalid configuration" in result.output

    def test_missing_explicit_config(self, tmp_path) -> None:
        result = runner.invoke(app, ["sources", "--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_environment_only(self, monkeypatch, tmp_path) -> None:
        """Without the default config file, the environment is enough."""
        monkeypatch.setenv("FEEDWATCH_BOT_TOKEN", "secret")
        monkeypatch.setenv("FEEDWATCH_CHANNEL_ID", "1")
        monkeypatch.setenv("FEEDWATCH_DATABASE_URL", f"sqlite:///{tmp_path / 'env.db'}")
        result = runner.invoke(app, ["sources"])
        assert result.exit_code == 0


class TestReconcileAndSources:
    """reconcile and sources work against a real SQLite file."""

    def test_reconcile_then_list(self, config) -> None:
        result = runner.invoke(app, ["reconcile", "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert "added" in result.output
        assert "https://a.example/rss" in result.output

        again = runner.invoke(app, ["reconcile", "--config", str(config)])
        assert "No changes" in again.output

        listed = runner.invoke(app, ["sources", "--config", str(config)])
        assert listed.exit_code == 0
        assert "https://b.example/rss" in listed.output

    def test_feeds_override(self, config, tmp_path) -> None:
        other = tmp_path / "other.txt"
        other.write_text("https://b.example/rss\n", encoding="utf-8")
        runner.invoke(app, ["reconcile", "--config", str(config)])

        result = runner.invoke(app, ["reconcile", "--config", str(config), "--feeds", str(other)])

        assert result.exit_code == 0
        assert "deactivated" in result.output
        assert "https://a.example/rss" in result.output

        active = runner.invoke(app, ["sources", "--config", str(config)])
        assert "https://a.example/rss" not in active.output
        everything = runner.invoke(app, ["sources", "--config", str(config), "--all"])
        assert "https://a.example/rss" in everything.output

    def test_missing_feeds_file(self, config, tmp_path) -> None:
        result = runner.invoke(app, ["reconcile", "--config", str(config), "--feeds", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "feeds file not found" in result.output


class TestCheck:
    """check runs without network access when no feed needs fetching."""

    def test_dry_run_prints_summaries(self, config, tmp_path) -> None:
        runner.invoke(app, ["reconcile", "--config", str(config)])
        empty = tmp_path / "empty.txt"
        empty.write_text("", encoding="utf-8")

        result = runner.invoke(app, ["check", "--config", str(config), "--feeds", str(empty), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "2 feed(s) were deactivated:" in result.output
        assert "0 new item(s) from 0 feed(s)" in result.output

    def test_missing_feeds_file_fails(self, config, tmp_path) -> None:
        result = runner.invoke(
            app, ["check", "--config", str(config), "--feeds", str(tmp_path / "nope.txt"), "--dry-run"]
        )
        assert result.exit_code == 1
