"""Persistence of the profile, region and resource chosen in the browser."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from cloud_resource_browser.core.config.models import (
    CONFIG_FILE,
    AppConfig,
    Preferences,
    load_config,
)

logger = structlog.get_logger()

DEFAULT_PROFILE = "default"
DEFAULT_REGION = "us-east-1"


class PreferenceStore:
    """Reads and writes the ``preferences:`` section of the config file.

    Saving rewrites the whole file from the last loaded configuration, so
    the other settings survive. All writes are best-effort: a failure is
    logged and never raised, because it must not abort a profile or
    region switch.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or CONFIG_FILE
        self._config = AppConfig()

    @property
    def path(self) -> Path:
        """Return the config file path."""
        return self._path

    @property
    def preferences(self) -> Preferences:
        """Return the preferences from the last load or save."""
        return self._config.preferences

    def load(self) -> Preferences:
        """Load preferences, falling back to defaults.

        Returns:
            Stored preferences, or empty preferences when the file is
            missing or invalid.
        """
        try:
            config = load_config(self._path)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable config", path=str(self._path), error=str(e))
            config = None
        self._config = config or AppConfig()
        return self._config.preferences

    def save(self, preferences: Preferences) -> bool:
        """Write preferences to disk.

        Args:
            preferences: Preferences to store.

        Returns:
            True if the file was written.
        """
        config = self._config.model_copy(update={"preferences": preferences})
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(config.to_yaml())
        except OSError as e:
            logger.warning("Failed to save preferences", path=str(self._path), error=str(e))
            return False
        self._config = config
        logger.debug("Saved preferences", path=str(self._path))
        return True

    def _update(self, **changes: str) -> bool:
        return self.save(self.preferences.model_copy(update=changes))

    def set_profile(self, profile: str) -> bool:
        """Remember the active profile."""
        return self._update(profile=profile)

    def set_region(self, region: str) -> bool:
        """Remember the active region."""
        return self._update(region=region)

    def set_last_resource(self, resource_key: str) -> bool:
        """Remember the resource shown last."""
        return self._update(last_resource=resource_key)


def effective_profile(preferences: Preferences | None = None) -> str:
    """Resolve the profile to start with.

    Order: ``AWS_PROFILE``, the saved profile, then ``default``.
    """
    if profile := os.environ.get("AWS_PROFILE"):
        return profile
    if preferences and preferences.profile:
        return preferences.profile
    return DEFAULT_PROFILE


def effective_region(preferences: Preferences | None = None) -> str:
    """Resolve the region to start with.

    Order: ``AWS_REGION``, ``AWS_DEFAULT_REGION``, the saved region,
    then ``us-east-1``.
    """
    for var in ("AWS_REGION", "AWS_DEFAULT_REGION"):
        if region := os.environ.get(var):
            return region
    if preferences and preferences.region:
        return preferences.region
    return DEFAULT_REGION
