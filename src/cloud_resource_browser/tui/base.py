"""Base classes for TUI screens and widgets.

Usage:
    from cloud_resource_browser.tui import BaseScreen, BaseWidget

    class PickerPanel(BaseWidget):
        DEFAULT_CSS = '''
        PickerPanel { height: auto; }
        '''
"""

from __future__ import annotations

from typing import TypeVar

from textual.screen import Screen
from textual.widget import Widget

T = TypeVar("T")


class BaseWidget(Widget):
    """Base class for custom TUI widgets.

    Subclasses should define:
    - DEFAULT_CSS: Widget-specific styling
    - compose() or render(): Widget content
    """


class BaseScreen(Screen[T]):
    """Base class for TUI screens.

    Type Parameters:
        T: The type returned when the screen is dismissed.
    """

    @property
    def is_active(self) -> bool:
        """Return True if this screen is the one receiving input."""
        return self.is_attached and self.app.screen is self
