"""Plugin system for cloud_resource_browser."""

from cloud_resource_browser.core.plugins.base import Plugin, hookimpl, hookspec
from cloud_resource_browser.core.plugins.manager import PluginManager

__all__ = ["Plugin", "PluginManager", "hookimpl", "hookspec"]
