"""Base plugin interface and specifications using pluggy."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pluggy

# Define the plugin hookspec namespace
hookspec = pluggy.HookspecMarker("cloud_resource_browser")
hookimpl = pluggy.HookimplMarker("cloud_resource_browser")


class _PluginSpec:
    """Plugin hook specifications - defines the plugin contract."""

    @hookspec
    def initialize(self, config: dict[str, Any]) -> None:
        """Initialize the plugin with configuration.

        Args:
            config: Plugin-specific configuration dictionary.
        """

    @hookspec
    def catalog_documents(self) -> list[Path]:
        """Return descriptor documents to merge into the resource catalog.

        Documents are merged after the bundled ones; a resource key that
        is already defined fails catalog loading.
        """
        return []

    @hookspec
    def cleanup(self) -> None:
        """Cleanup plugin resources on shutdown."""

    @hookspec
    def get_name(self) -> str:
        """Return the plugin name."""
        return ""

    @hookspec
    def get_version(self) -> str:
        """Return the plugin version."""
        return ""


class Plugin:
    """Base class for catalog plugins.

    Subclasses set ``name`` and ``version`` and usually override
    ``catalog_documents``. ``document_dir`` is a shortcut for plugins that
    ship a directory of YAML documents.
    """

    name: str = "base"
    version: str = "0.0.0"
    description: str = ""
    document_dir: Path | None = None

    def __init__(self) -> None:
        """Initialize the plugin instance."""
        if self.name == "base":
            raise ValueError(f"{self.__class__.__name__} must define 'name' class attribute")
        if self.version == "0.0.0":
            raise ValueError(f"{self.__class__.__name__} must define 'version' class attribute")
        self._config: dict[str, Any] = {}
        self._initialized: bool = False

    @hookimpl
    def get_name(self) -> str:
        """Return the plugin name."""
        return self.name

    @hookimpl
    def get_version(self) -> str:
        """Return the plugin version."""
        return self.version

    @hookimpl
    def initialize(self, config: dict[str, Any]) -> None:
        """Initialize the plugin with configuration."""
        self._config = config
        self._initialized = True
        self.on_initialize()

    def on_initialize(self) -> None:
        """Hook for subclasses to perform initialization logic."""

    @hookimpl
    def catalog_documents(self) -> list[Path]:
        """Return the YAML documents in ``document_dir``, if set."""
        if self.document_dir is None or not self.document_dir.is_dir():
            return []
        return sorted(self.document_dir.glob("*.yaml"))

    @hookimpl
    def cleanup(self) -> None:
        """Cleanup resources. Override in subclasses."""
        self._initialized = False

    def get_config(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        return self._config.get(key, default)

    @property
    def is_initialized(self) -> bool:
        """Check if the plugin is initialized."""
        return self._initialized
