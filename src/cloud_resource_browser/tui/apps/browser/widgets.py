"""Widgets and render helpers for the resource browser.

Everything here is a projection of ``ViewState``; nothing mutates it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.text import Text

from cloud_resource_browser.catalog.values import extract
from cloud_resource_browser.tui.base import BaseWidget
from cloud_resource_browser.tui.theme import Colors, Styles

if TYPE_CHECKING:
    from cloud_resource_browser.catalog.catalog import Catalog
    from cloud_resource_browser.catalog.models import ResourceDescriptor
    from cloud_resource_browser.engine.state import ViewState

MAX_SUGGESTIONS = 8

HELP_LINES: list[tuple[str, str]] = [
    ("j / k / Up / Down", "Move selection"),
    ("g g / Home", "First row"),
    ("G / End", "Last row"),
    ("Ctrl+f / Ctrl+b / PgDn / PgUp", "Page down / up"),
    ("Ctrl+d / Ctrl+u", "Half page down / up"),
    ("d / Enter", "Describe selected item"),
    ("/", "Filter by name or id"),
    (":", "Command (resource key, profile, region, back, quit)"),
    ("Esc / Backspace", "Clear filter, then go back"),
    ("p / R", "Pick profile / region"),
    ("0-5", "Region shortcuts"),
    ("r", "Refresh"),
    ("?", "This help"),
    ("q", "Quit"),
]


def header_text(state: ViewState, breadcrumb: list[str]) -> str:
    """Return the header line markup."""
    parts = [
        f"Profile: {Styles.color(state.profile, Colors.PROFILE)}",
        f"Region: {Styles.color(state.region, Colors.REGION)}",
        Styles.color(" > ".join(breadcrumb), Colors.BREADCRUMB),
        Styles.muted(f"{len(state.filtered_items)}/{len(state.items)}"),
    ]
    if state.filter_text:
        parts.append(f"filter: {Styles.bold(state.filter_text)}")
    if state.loading:
        parts.append(Styles.color("loading...", Colors.LOADING))
    return " | ".join(parts)


def status_text(state: ViewState, descriptor: ResourceDescriptor | None) -> str:
    """Return the status line markup: error, then status, then key hints."""
    if state.last_error:
        return Styles.color(state.last_error, Colors.STATUS_ERROR)
    if state.status_message:
        return Styles.color(state.status_message, Colors.STATUS_OK)

    hints = []
    if descriptor is not None:
        hints.extend(
            f"{link.shortcut}:{link.display_name}"
            for link in descriptor.sub_resources
            if link.shortcut
        )
        hints.extend(
            f"{action.shortcut}:{action.display_name}"
            for action in descriptor.actions
            if action.shortcut
        )
    hints.append("?:help")
    return Styles.muted("  ".join(hints))


def row_cells(record: Any, descriptor: ResourceDescriptor, catalog: Catalog) -> list[Text]:
    """Render one record as table cells, coloring mapped columns."""
    cells = []
    for column in descriptor.columns:
        value = extract(record, column.path)
        color = catalog.color_for(column.color_map, value) if column.color_map else None
        cells.append(Styles.rgb(value, color))
    return cells


def describe_view(text: str, scroll: int) -> str:
    """Return the describe text starting at line ``scroll``."""
    return "\n".join(text.splitlines()[scroll:])


def help_text() -> Text:
    """Return the key binding help."""
    width = max(len(keys) for keys, _ in HELP_LINES)
    text = Text("Key bindings\n\n", style="bold")
    for keys, description in HELP_LINES:
        text.append(keys.ljust(width + 2), style="cyan")
        text.append(f"{description}\n")
    return text


class PickerPanel(BaseWidget):
    """Profile or region list with the highlighted entry marked."""

    DEFAULT_CSS = """
    PickerPanel {
        height: auto;
        max-height: 24;
        border: round $primary;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._title = ""
        self._options: list[str] = []
        self._index = 0
        self._current: str | None = None

    def show_options(
        self,
        title: str,
        options: list[str],
        index: int,
        current: str | None = None,
    ) -> None:
        """Replace the options and highlighted index."""
        self._title = title
        self._options = options
        self._index = index
        self._current = current
        self.refresh(layout=True)

    def render(self) -> Text:
        """Render the option list."""
        text = Text(f"{self._title}\n", style="bold")
        for i, option in enumerate(self._options):
            marker = "*" if option == self._current else " "
            style = "reverse" if i == self._index else ""
            text.append(f"{marker} {option}\n", style=style)
        return text


class SuggestionBar(BaseWidget):
    """Command suggestions around the highlighted one."""

    DEFAULT_CSS = """
    SuggestionBar {
        height: 1;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._suggestions: list[str] = []
        self._index = 0

    def show_suggestions(self, suggestions: list[str], index: int) -> None:
        """Replace the suggestions and highlighted index."""
        self._suggestions = suggestions
        self._index = index
        self.refresh()

    def render(self) -> Text:
        """Render a window of suggestions containing the highlighted one."""
        if not self._suggestions:
            return Text("no matches", style="dim")
        start = max(
            0,
            min(self._index - MAX_SUGGESTIONS // 2, len(self._suggestions) - MAX_SUGGESTIONS),
        )
        text = Text()
        for i, suggestion in enumerate(self._suggestions[start : start + MAX_SUGGESTIONS], start):
            text.append(suggestion, style="reverse" if i == self._index else "dim")
            text.append("  ")
        return text
