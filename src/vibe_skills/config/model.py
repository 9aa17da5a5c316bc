"""
Pydantic models for vibe-skills configuration.

Settings come from three places, lowest priority first: the optional
``config.yaml`` in the tool's home directory, ``VIBE_SKILLS_*`` environment
variables, and explicit overrides passed by the CLI.
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

CONFIG_FILE = "config.yaml"
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def normalize_log_level(level: str) -> str:
    level = level.upper()
    if level not in VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of {sorted(VALID_LOG_LEVELS)}")
    return level


class LogFormat(str, Enum):
    """Logging format options."""

    TEXT = "text"
    JSON = "json"


class LoggingConfig(BaseModel):
    """Logging configuration for the CLI."""

    level: str = Field("WARNING", description="Global log level")
    format: LogFormat = Field(LogFormat.TEXT, description="Log output format")
    colors: bool = Field(True, description="Enable colored console output")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return normalize_log_level(v)


class Settings(BaseSettings):
    """Runtime settings for the registry, cache and HTTP transport."""

    model_config = SettingsConfigDict(env_prefix="VIBE_SKILLS_", extra="ignore")

    registry_url: str = Field(
        "https://raw.githubusercontent.com/cuongtl1992/vibe-skills",
        description="Base URL of the remote registry; the ref is appended to it",
    )
    ref: str = Field("main", description="Registry reference: branch, tag or commit")
    home_dir: Path = Field(default_factory=lambda: Path.home() / ".vibe-skills")
    cache_ttl: int = Field(3600, description="Cache freshness window in seconds", ge=0)
    http_timeout: float = Field(30.0, description="HTTP timeout in seconds", gt=0)
    log_level: str = Field("WARNING")
    log_format: LogFormat = Field(LogFormat.TEXT)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return normalize_log_level(v)

    @field_validator("home_dir")
    @classmethod
    def expand_home(cls, v: Path) -> Path:
        return Path(v).expanduser()

    @property
    def cache_dir(self) -> Path:
        return self.home_dir / "cache"

    @property
    def cache_ttl_delta(self) -> timedelta:
        return timedelta(seconds=self.cache_ttl)

    @property
    def logging(self) -> LoggingConfig:
        return LoggingConfig(level=self.log_level, format=self.log_format)


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML settings file. Missing or malformed files yield an empty dict."""
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in config file, ignoring", path=str(path), error=str(e))
        return {}
    except OSError as e:
        logger.warning("Could not read config file, ignoring", path=str(path), error=str(e))
        return {}

    if not isinstance(data, dict):
        logger.warning("Config file must contain a mapping, ignoring", path=str(path))
        return {}
    return data


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the config file, the environment and ``overrides``."""
    overrides = {key: value for key, value in overrides.items() if value is not None}

    from_env = Settings(**{k: v for k, v in overrides.items() if k == "home_dir"})
    file_values = load_config_file(from_env.home_dir / CONFIG_FILE)
    known = set(Settings.model_fields)
    file_values = {key: value for key, value in file_values.items() if key in known}

    merged = {**file_values, **from_env.model_dump(exclude_unset=True), **overrides}
    return Settings(**merged)
