"""FeedWatch configuration.

Application settings come from, highest priority first: explicit overrides,
the YAML config file, environment variables with the FEEDWATCH_ prefix, a
``.env`` file, and finally the defaults below. Settings are validated once,
at startup; any problem is a ConfigurationError.

Example:
    >>> from feedwatch.core.config import get_settings
    >>> settings = get_settings(
    ...     bot_token="token", channel_id="123", database_url="sqlite://"
    ... )
    >>> settings.cron_schedule
    '0 */6 * * *'
    >>> settings.notify_timeout
    10.0
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from apscheduler.triggers.cron import CronTrigger
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from feedwatch.core.exceptions import ConfigurationError
from feedwatch.protocols.notification import DEFAULT_NOTIFY_TIMEOUT

DEFAULT_CONFIG_PATH = Path("feedflow/config.yaml")
DEFAULT_FEEDS_PATH = Path("feedflow/feeds.txt")

# camelCase keys accepted in the YAML file
_YAML_KEYS = {
    "botToken": "bot_token",
    "channelID": "channel_id",
    "channelIDs": "extra_channel_ids",
    "dbURI": "database_url",
    "feedsPath": "feeds_path",
    "cronSchedule": "cron_schedule",
    "notifyTimeout": "notify_timeout",
    "fetchTimeout": "fetch_timeout",
    "logLevel": "log_level",
    "logFormat": "log_format",
}


class Settings(BaseSettings):
    """Application settings.

    Loads from environment variables with FEEDWATCH_ prefix.

    Example:
        >>> from feedwatch.core.config import Settings
        >>> s = Settings(bot_token="t", channel_id="1", database_url="sqlite:///feeds.db")
        >>> s.database_url
        'sqlite:///feeds.db'
        >>> s.channel_ids
        ['1']
    """

    model_config = SettingsConfigDict(
        env_prefix="FEEDWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Notifier (Discord bot)
    bot_token: str = Field(..., min_length=1, description="Discord bot token")
    channel_id: str = Field(..., min_length=1, description="Discord channel to post to")
    extra_channel_ids: list[str] = Field(default_factory=list, description="Additional channels")
    notify_timeout: float = Field(default=DEFAULT_NOTIFY_TIMEOUT, gt=0.0, description="Seconds per message")

    # Store
    database_url: str = Field(..., min_length=1, description="Database connection URL")

    # Sources and schedule
    feeds_path: Path = Field(default=DEFAULT_FEEDS_PATH, description="Newline-delimited feed URLs")
    cron_schedule: str = Field(default="0 */6 * * *", description="Crontab for check runs")
    timezone: str = Field(default="UTC", description="Timezone the crontab is read in")

    # Fetching
    fetch_timeout: float = Field(default=30.0, ge=1.0)
    user_agent: str = Field(default="FeedWatch/0.1.0")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format: json or console")

    @field_validator("channel_id", "extra_channel_ids", mode="before")
    @classmethod
    def _ids_as_str(cls, v: Any) -> Any:
        # YAML reads unquoted snowflake IDs as ints
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, list):
            return [str(c) if isinstance(c, int) and not isinstance(c, bool) else c for c in v]
        return v

    @field_validator("bot_token", "channel_id", "database_url")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("cron_schedule")
    @classmethod
    def _valid_crontab(cls, v: str) -> str:
        try:
            CronTrigger.from_crontab(v)
        except ValueError as e:
            raise ValueError(f"invalid crontab '{v}': {e}") from e
        return v

    @field_validator("log_level")
    @classmethod
    def _valid_level(cls, v: str) -> str:
        v = v.upper()
        if v not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level '{v}'")
        return v

    @field_validator("log_format")
    @classmethod
    def _valid_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("console", "json"):
            raise ValueError("log_format must be 'console' or 'json'")
        return v

    @property
    def channel_ids(self) -> list[str]:
        """Every channel notifications go to, primary first."""
        return [self.channel_id, *[c for c in self.extra_channel_ids if c != self.channel_id]]


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into settings keyword arguments.

    Raises:
        ConfigurationError: The file is missing, unreadable or not a mapping.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"config file not found: {path}") from e
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"reading config {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"config {path} must be a mapping, got {type(raw).__name__}")
    return {_YAML_KEYS.get(key, key): value for key, value in raw.items()}


def load_settings(config_path: Path | str | None = None, **overrides: Any) -> Settings:
    """Load and validate settings once.

    Args:
        config_path: Optional YAML file. Its values beat the environment.
        **overrides: Highest-priority values (CLI flags, tests).

    Raises:
        ConfigurationError: Missing or invalid configuration.

    Example:
        >>> from feedwatch.core.config import load_settings
        >>> load_settings(bot_token="t", channel_id="1", database_url="sqlite://").log_level
        'INFO'
    """
    data: dict[str, Any] = {}
    if config_path is not None:
        data.update(read_config_file(Path(config_path)))
    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings(**data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"invalid configuration: {problems}") from e


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides (no config file)."""
    return load_settings(None, **overrides)
