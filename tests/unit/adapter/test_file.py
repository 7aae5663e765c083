"""Tests for feedwatch.adapter.file - newline-delimited feeds file."""

from __future__ import annotations

import pytest

from feedwatch.adapter.file import FileSourceList
from feedwatch.core.exceptions import SourceListError
from feedwatch.protocols.feed import SourceList


class TestFileSourceList:
    """Tests for FileSourceList."""

    def test_implements_source_list_protocol(self, tmp_path) -> None:
        assert isinstance(FileSourceList(tmp_path / "feeds.txt"), SourceList)

    def test_load(self, tmp_path) -> None:
        path = tmp_path / "feeds.txt"
        path.write_text("https://a/rss\n\n   https://b/rss  \n# https://c/rss\n", encoding="utf-8")

        assert FileSourceList(path).load() == ["https://a/rss", "https://b/rss"]

    def test_duplicates_kept(self, tmp_path) -> None:
        path = tmp_path / "feeds.txt"
        path.write_text("https://a/rss\nhttps://a/rss\n", encoding="utf-8")
        assert FileSourceList(path).load() == ["https://a/rss", "https://a/rss"]

    def test_crlf_line_endings(self) -> None:
        assert FileSourceList.parse("https://a/rss\r\nhttps://b/rss\r\n") == ["https://a/rss", "https://b/rss"]

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "feeds.txt"
        path.write_text("", encoding="utf-8")
        assert FileSourceList(path).load() == []

    def test_reread_on_every_load(self, tmp_path) -> None:
        path = tmp_path / "feeds.txt"
        path.write_text("https://a/rss\n", encoding="utf-8")
        source_list = FileSourceList(path)
        assert source_list.load() == ["https://a/rss"]

        path.write_text("https://b/rss\n", encoding="utf-8")
        assert source_list.load() == ["https://b/rss"]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(SourceListError, match="not found"):
            FileSourceList(tmp_path / "nope.txt").load()

    def test_directory_is_error(self, tmp_path) -> None:
        with pytest.raises(SourceListError):
            FileSourceList(tmp_path).load()

    def test_path_property(self, tmp_path) -> None:
        assert FileSourceList(str(tmp_path / "feeds.txt")).path == tmp_path / "feeds.txt"
