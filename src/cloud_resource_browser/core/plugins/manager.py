"""Plugin manager for loading catalog plugins."""

from __future__ import annotations

import importlib.metadata
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pluggy
import structlog

from cloud_resource_browser.core.plugins.base import Plugin, _PluginSpec

if TYPE_CHECKING:
    from cloud_resource_browser.core.config.models import PluginsConfig

logger = structlog.get_logger()


class PluginManager:
    """Manages plugin discovery, loading, and lifecycle."""

    NAMESPACE = "cloud_resource_browser.plugins"

    def __init__(self) -> None:
        """Initialize the plugin manager."""
        self._pm = pluggy.PluginManager("cloud_resource_browser")
        self._pm.add_hookspecs(_PluginSpec)
        self._plugins: dict[str, Plugin] = {}
        self._initialized = False

    def discover_plugins(self) -> list[str]:
        """Discover available plugins from entry points.

        Returns:
            List of discovered plugin names.
        """
        discovered = []
        try:
            eps = importlib.metadata.entry_points(group=self.NAMESPACE)
            for ep in eps:
                discovered.append(ep.name)
                logger.debug("Discovered plugin", name=ep.name, value=ep.value)
        except Exception as e:
            logger.warning("Error discovering plugins", error=str(e))
        return discovered

    def load_plugin(self, name: str) -> bool:
        """Load a plugin by name from entry points.

        Args:
            name: The plugin name to load.

        Returns:
            True if loaded successfully, False otherwise.
        """
        if name in self._plugins:
            logger.debug("Plugin already loaded", name=name)
            return True

        try:
            eps = importlib.metadata.entry_points(group=self.NAMESPACE)
            for ep in eps:
                if ep.name == name:
                    plugin_class = ep.load()
                    plugin = plugin_class() if callable(plugin_class) else plugin_class

                    self._pm.register(plugin, name=name)
                    self._plugins[name] = plugin
                    logger.info("Loaded plugin", name=name, version=plugin.version)
                    return True

            logger.warning("Plugin not found", name=name)
            return False
        except Exception as e:
            logger.error("Failed to load plugin", name=name, error=str(e))
            return False

    def load_configured(self, config: PluginsConfig) -> list[str]:
        """Load the plugins selected by configuration.

        Args:
            config: Plugin selection. ``enabled=None`` means every
                discovered plugin not listed in ``disabled``.

        Returns:
            Names of the plugins that loaded.
        """
        names = config.enabled if config.enabled is not None else self.discover_plugins()
        return [
            name for name in names if name not in config.disabled and self.load_plugin(name)
        ]

    def initialize_all(self, config: dict[str, Any]) -> None:
        """Initialize all loaded plugins with configuration.

        Args:
            config: Mapping of plugin name to plugin-specific settings.
        """
        for name, plugin in self._plugins.items():
            try:
                plugin.initialize(config.get(name, {}))
                logger.info("Initialized plugin", name=name)
            except Exception as e:
                logger.error("Failed to initialize plugin", name=name, error=str(e))

        self._initialized = True

    def catalog_documents(self) -> list[Path]:
        """Collect descriptor documents from all loaded plugins.

        Returns:
            Document paths in plugin registration order.
        """
        documents: list[Path] = []
        # pluggy calls the most recently registered plugin first
        for result in reversed(self._pm.hook.catalog_documents()):
            documents.extend(Path(path) for path in result or [])
        logger.debug("Collected plugin catalog documents", count=len(documents))
        return documents

    def cleanup_all(self) -> None:
        """Cleanup all loaded plugins."""
        try:
            self._pm.hook.cleanup()
        except Exception as e:
            logger.error("Error during plugin cleanup", error=str(e))
        self._initialized = False

    def get_plugin(self, name: str) -> Plugin | None:
        """Get a loaded plugin by name."""
        return self._plugins.get(name)

    def list_plugins(self) -> list[dict[str, Any]]:
        """List all loaded plugins with their info."""
        return [
            {
                "name": p.name,
                "version": p.version,
                "description": p.description,
                "initialized": p.is_initialized,
            }
            for p in self._plugins.values()
        ]
