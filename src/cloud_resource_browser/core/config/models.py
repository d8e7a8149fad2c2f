"""Application configuration models with Pydantic validation.

One YAML file at ``~/.config/crb/config.yaml`` holds the tunables
(refresh interval, retries, extra catalog documents) and, under
``preferences:``, the remembered profile, region and last resource.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = structlog.get_logger()

CONFIG_DIR = Path.home() / ".config" / "crb"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_RESOURCE = "ec2-instances"
DEFAULT_REFRESH_INTERVAL = 5.0


class PluginsConfig(BaseModel):
    """Which catalog plugins to load.

    ``enabled`` of None loads every installed plugin. ``settings`` maps a
    plugin name to the mapping it receives on initialization.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: list[str] | None = None
    disabled: list[str] = Field(default_factory=list)
    settings: dict[str, dict[str, Any]] = Field(default_factory=dict)


class Preferences(BaseModel):
    """Values remembered between sessions."""

    model_config = ConfigDict(extra="forbid")

    profile: str | None = None
    region: str | None = None
    last_resource: str | None = None


class AppConfig(BaseModel):
    """Browser configuration.

    Attributes:
        preferences: Profile, region and resource from the last session.
        refresh_interval: Seconds between automatic refreshes while idle.
        retry_attempts: Extra attempts for transient connection errors.
        page_size: Rows moved by page up/down.
        key_sequence_window_ms: Window for two-key sequences such as `g g`.
        catalog_paths: Extra descriptor documents or directories.
    """

    model_config = ConfigDict(extra="forbid")

    preferences: Preferences = Field(default_factory=Preferences)
    initial_resource: str = DEFAULT_RESOURCE
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    retry_attempts: int = 2
    page_size: int = 10
    key_sequence_window_ms: int = 250
    catalog_paths: list[str] = Field(default_factory=list)
    log_file_enabled: bool = True
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @field_validator("refresh_interval")
    @classmethod
    def validate_refresh_interval(cls, v: float) -> float:
        """Validate refresh_interval is positive."""
        if v <= 0:
            raise ValueError("refresh_interval must be positive")
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry_attempts is non-negative."""
        if v < 0:
            raise ValueError("retry_attempts must be non-negative")
        return v

    @field_validator("page_size", "key_sequence_window_ms")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate integer tunables are positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("catalog_paths")
    @classmethod
    def validate_catalog_paths(cls, v: list[str]) -> list[str]:
        """Expand ~ in catalog paths."""
        return [str(Path(p).expanduser()) for p in v]

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> AppConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            CRB_REFRESH_INTERVAL: Auto-refresh interval in seconds
            CRB_RETRY_ATTEMPTS: Retries for transient connection errors
            CRB_CATALOG_PATH: Extra descriptor documents (os.pathsep separated)
        """
        config_dict = base_config.copy() if base_config else {}

        if interval := os.environ.get("CRB_REFRESH_INTERVAL"):
            config_dict["refresh_interval"] = float(interval)

        if retries := os.environ.get("CRB_RETRY_ATTEMPTS"):
            config_dict["retry_attempts"] = int(retries)

        if catalog_path := os.environ.get("CRB_CATALOG_PATH"):
            extra = [p for p in catalog_path.split(os.pathsep) if p]
            config_dict["catalog_paths"] = [*config_dict.get("catalog_paths", []), *extra]

        return cls.model_validate(config_dict)

    def to_yaml(self) -> str:
        """Serialize to YAML with a comment header."""
        header = "# Cloud Resource Browser Configuration\n# Generated by crb\n\n"
        body = yaml.safe_dump(
            self.model_dump(exclude_none=True),
            default_flow_style=False,
            sort_keys=False,
        )
        return header + body


def load_raw_config(path: Path | None = None) -> dict[str, Any]:
    """Load the config file as a plain dict.

    Returns an empty dict when the file is missing or unreadable.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return {}
    try:
        data = yaml.safe_load(config_path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to read config", path=str(config_path), error=str(e))
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Path | None = None) -> AppConfig | None:
    """Load and validate the config file.

    Args:
        path: Config file path. Defaults to CONFIG_FILE.

    Returns:
        The parsed configuration, or None if the file does not exist.

    Raises:
        ValueError: If the file is not valid YAML or fails validation.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return None
    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e
