"""Terminal User Interface for the resource browser.

Usage:
    from cloud_resource_browser.tui import BaseScreen, BaseWidget, Colors, Styles
    from cloud_resource_browser.tui.components import Modal
    from cloud_resource_browser.tui.apps.browser import BrowserApp
"""

from cloud_resource_browser.tui.base import BaseScreen, BaseWidget
from cloud_resource_browser.tui.theme import Colors, Styles

__all__ = [
    "BaseScreen",
    "BaseWidget",
    "Colors",
    "Styles",
]
