"""Configuration loading and preference persistence."""

from cloud_resource_browser.core.config.models import (
    CONFIG_DIR,
    CONFIG_FILE,
    AppConfig,
    PluginsConfig,
    Preferences,
    load_config,
    load_raw_config,
)
from cloud_resource_browser.core.config.preferences import (
    PreferenceStore,
    effective_profile,
    effective_region,
)

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "AppConfig",
    "PluginsConfig",
    "PreferenceStore",
    "Preferences",
    "effective_profile",
    "effective_region",
    "load_config",
    "load_raw_config",
]
