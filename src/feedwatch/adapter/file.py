"""File-based desired-source list.

The list of feeds to follow is a plain text file with one URL per line.
Blank lines, surrounding whitespace and ``#`` comment lines are ignored.
Duplicates are passed through; the reconciler treats the result as a set.

Example:
    >>> import tempfile
    >>> from pathlib import Path
    >>> from feedwatch.adapter.file import FileSourceList
    >>> with tempfile.TemporaryDirectory() as tmp:
    ...     path = Path(tmp) / "feeds.txt"
    ...     _ = path.write_text("https://a/rss\\n\\n  https://b/rss  \\n# off\\n")
    ...     FileSourceList(path).load()
    ['https://a/rss', 'https://b/rss']
"""

from __future__ import annotations

from pathlib import Path

from feedwatch.core.exceptions import SourceListError


class FileSourceList:
    """Reads desired feed URLs from a newline-delimited file.

    The file is re-read on every ``load()`` so edits take effect on the
    next scheduled run without a restart.

    Args:
        path: Path to the feeds file.
    """

    COMMENT_PREFIX = "#"

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[str]:
        """Return the URLs in file order.

        Raises:
            SourceListError: The file is missing or unreadable.
        """
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise SourceListError(f"feeds file not found: {self._path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise SourceListError(f"reading feeds file {self._path}: {e}") from e

        return self.parse(content)

    @classmethod
    def parse(cls, content: str) -> list[str]:
        """Parse file content into URLs.

        Example:
            >>> FileSourceList.parse("a\\r\\n b \\n\\n#c\\na")
            ['a', 'b', 'a']
        """
        urls: list[str] = []
        for line in content.splitlines():
            url = line.strip()
            if not url or url.startswith(cls.COMMENT_PREFIX):
                continue
            urls.append(url)
        return urls
