"""Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only wires
handlers for the process. Console output goes through rich, JSON output is
one object per line for log shippers.

Example:
    >>> import logging
    >>> from feedwatch.core.logging import configure_logging
    >>> configure_logging("WARNING", "json")
    >>> logging.getLogger("feedwatch").level == logging.WARNING
    True
"""

from __future__ import annotations

import logging

import structlog
from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "feedwatch"


def json_formatter() -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering stdlib records as one JSON object per line."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(level: str = "INFO", fmt: str = "console", console: Console | None = None) -> None:
    """Install a single handler on the ``feedwatch`` logger.

    Calling it again replaces the previous handler.

    Args:
        level: Logging level name.
        fmt: ``console`` (rich) or ``json``.
        console: Rich console for console output (stderr by default).
    """
    handler: logging.Handler
    if fmt == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(json_formatter())
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(ROOT_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(level.upper())

    # APScheduler is chatty at INFO about every job run
    logging.getLogger("apscheduler").setLevel(max(logging.WARNING, logger.level))
