"""Main screen of the resource browser.

Key presses are decoded here and turned into controller and command
engine calls; after each one the widgets are redrawn from ViewState.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from textual import events, on
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import DataTable, Input, Static

from cloud_resource_browser.engine.state import Mode
from cloud_resource_browser.tui.apps.browser.widgets import (
    PickerPanel,
    SuggestionBar,
    describe_view,
    header_text,
    help_text,
    row_cells,
    status_text,
)
from cloud_resource_browser.tui.base import BaseScreen
from cloud_resource_browser.tui.components.modal import Modal

if TYPE_CHECKING:
    from cloud_resource_browser.engine.commands import CommandEngine
    from cloud_resource_browser.engine.controller import NavigationController
    from cloud_resource_browser.engine.keys import KeySequence

logger = structlog.get_logger()

# Keys handled in normal mode, mapped to screen actions
NORMAL_KEYS: dict[str, str] = {
    "j": "cursor_down",
    "down": "cursor_down",
    "k": "cursor_up",
    "up": "cursor_up",
    "G": "bottom",
    "end": "bottom",
    "home": "top",
    "ctrl+f": "page_down",
    "pagedown": "page_down",
    "ctrl+b": "page_up",
    "pageup": "page_up",
    "ctrl+d": "half_page_down",
    "ctrl+u": "half_page_up",
    "d": "describe",
    "enter": "describe",
    "/": "filter",
    ":": "command",
    "?": "help",
    "escape": "back",
    "backspace": "back",
    "p": "profiles",
    "R": "regions",
    "r": "refresh",
    "q": "quit",
}

# Keys shared by the profile and region pickers
PICKER_KEYS: dict[str, str] = {
    "j": "cursor_down",
    "down": "cursor_down",
    "k": "cursor_up",
    "up": "cursor_up",
    "g": "top",
    "home": "top",
    "G": "bottom",
    "end": "bottom",
    "ctrl+f": "page_down",
    "pagedown": "page_down",
    "ctrl+b": "page_up",
    "pageup": "page_up",
}

DESCRIBE_SCROLL: dict[str, int] = {
    "j": 1,
    "down": 1,
    "k": -1,
    "up": -1,
    "ctrl+d": 10,
    "ctrl+f": 20,
    "pagedown": 20,
    "ctrl+u": -10,
    "ctrl+b": -20,
    "pageup": -20,
    "G": 1_000_000,
    "end": 1_000_000,
    "g": -1_000_000,
    "home": -1_000_000,
}


def key_name(event: events.Key) -> str:
    """Return the printable character for a key, else its textual key name."""
    character = event.character
    if character and len(character) == 1 and character.isprintable():
        return character
    return event.key


class BrowserScreen(BaseScreen[None]):
    """Resource table with header, status line, and overlays.

    Overlays (describe, help, pickers, command line, filter) are shown
    according to the controller's mode. Confirmation uses a Modal.
    """

    # Inputs take focus only while filtering or typing a command
    AUTO_FOCUS = None

    DEFAULT_CSS = """
    BrowserScreen #header {
        height: 1;
        padding: 0 1;
        background: $surface;
    }

    BrowserScreen #resource-table {
        height: 1fr;
    }

    BrowserScreen #describe {
        height: 1fr;
        padding: 0 1;
        border: round $accent;
    }

    BrowserScreen #help {
        height: 1fr;
        padding: 1 2;
        border: round $primary;
    }

    BrowserScreen Input {
        height: 3;
    }

    BrowserScreen #status-bar {
        height: 1;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        controller: NavigationController,
        commands: CommandEngine,
        key_sequence: KeySequence,
    ) -> None:
        """Initialize the browser screen.

        Args:
            controller: Navigation controller owning the view state.
            commands: Command palette engine.
            key_sequence: Detector for ``g g``.
        """
        super().__init__()
        self._controller = controller
        self._commands = commands
        self._keys = key_sequence
        self._rendered_items: list[Any] | None = None
        self._rendered_resource: str | None = None
        self._confirm_open = False

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        with Vertical(id="browser"):
            yield Static("", id="header")
            yield DataTable(id="resource-table")
            yield Static("", id="describe")
            yield Static(help_text(), id="help")
            yield PickerPanel(id="picker")
            yield Input(placeholder="filter", id="filter-input")
            yield Input(placeholder="command", id="command-input")
            yield SuggestionBar(id="suggestions")
            yield Static("", id="status-bar")

    def on_mount(self) -> None:
        """Configure the table, start the refresh tick and fetch."""
        table = self.query_one("#resource-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        # Keys go to the screen so the controller owns the selection
        table.can_focus = False

        self.set_interval(1, self._tick)
        self._controller.refresh_current()
        self.refresh_view()

    def _tick(self) -> None:
        """Auto refresh when due and no dialog covers the screen."""
        if self.is_active and self._controller.auto_refresh():
            self.refresh_view()

    # =========================================================================
    # Rendering
    # =========================================================================

    def refresh_view(self) -> None:
        """Redraw every widget from the view state."""
        controller = self._controller
        state = controller.state
        kind = state.mode_kind
        descriptor = controller.current_descriptor

        self.query_one("#header", Static).update(header_text(state, controller.breadcrumb()))
        self.query_one("#status-bar", Static).update(status_text(state, descriptor))
        self._render_table()

        describe = self.query_one("#describe", Static)
        describe.display = kind is Mode.DESCRIBE
        if kind is Mode.DESCRIBE:
            describe.update(describe_view(controller.describe_text() or "", state.describe_scroll))

        self.query_one("#help", Static).display = kind is Mode.HELP

        picker = self.query_one("#picker", PickerPanel)
        picker.display = kind in (Mode.PROFILE_SELECT, Mode.REGION_SELECT)
        if kind is Mode.PROFILE_SELECT:
            picker.show_options("Profiles", state.profiles, state.profile_index, state.profile)
        elif kind is Mode.REGION_SELECT:
            picker.show_options("Regions", state.regions, state.region_index, state.region)

        self.query_one("#filter-input", Input).display = state.filter_active
        self.query_one("#command-input", Input).display = kind is Mode.COMMAND
        suggestions = self.query_one("#suggestions", SuggestionBar)
        suggestions.display = kind is Mode.COMMAND
        if kind is Mode.COMMAND:
            suggestions.show_suggestions(state.suggestions, state.suggestion_index)

        if kind is Mode.CONFIRM and not self._confirm_open:
            self._open_confirm()

    def _render_table(self) -> None:
        controller = self._controller
        state = controller.state
        table = self.query_one("#resource-table", DataTable)
        descriptor = controller.current_descriptor

        if (
            self._rendered_items is not state.filtered_items
            or self._rendered_resource != state.current_resource_key
        ):
            table.clear(columns=True)
            if descriptor is not None:
                for column in descriptor.columns:
                    table.add_column(column.header, width=column.width)
                for record in state.filtered_items:
                    table.add_row(*row_cells(record, descriptor, controller.catalog))
            self._rendered_items = state.filtered_items
            self._rendered_resource = state.current_resource_key

        if state.filtered_items:
            table.move_cursor(row=min(state.selected_index, len(state.filtered_items) - 1))

    def _open_confirm(self) -> None:
        pending = self._controller.state.pending_action
        if pending is None:
            return
        self._confirm_open = True
        self.app.push_screen(
            Modal(
                title=pending.message,
                body=f"{pending.display_label} ({pending.resource_id})",
                buttons=[
                    ("Yes", "yes", "error" if pending.destructive else "primary"),
                    ("No", "no", "default"),
                ],
                default="yes" if pending.default_yes else "no",
                destructive=pending.destructive,
            ),
            callback=self._handle_confirm_result,
        )

    def _handle_confirm_result(self, result: str | None) -> None:
        """Answer the pending confirmation; Escape counts as no."""
        self._confirm_open = False
        self._controller.confirm(result == "yes")
        self.refresh_view()

    # =========================================================================
    # Key Dispatch
    # =========================================================================

    def on_key(self, event: events.Key) -> None:
        """Route a key press according to the current mode."""
        key = key_name(event)
        state = self._controller.state
        kind = state.mode_kind

        if kind is Mode.COMMAND:
            handled = self._command_key(key)
        elif state.filter_active:
            handled = self._filter_key(key)
        elif kind is Mode.DESCRIBE:
            handled = self._describe_key(key)
        elif kind is Mode.HELP:
            handled = key in ("escape", "q", "?", "backspace")
            if handled:
                self._controller.exit_mode()
        elif kind in (Mode.PROFILE_SELECT, Mode.REGION_SELECT):
            handled = self._picker_key(key)
        elif kind is Mode.NORMAL:
            handled = self._normal_key(key)
        else:
            handled = False

        if handled:
            event.stop()
            event.prevent_default()
            self.refresh_view()

    def _normal_key(self, key: str) -> bool:
        controller = self._controller
        if key == "g":
            if self._keys.feed(key):
                controller.go_to_top()
            return True
        self._keys.reset()

        if controller.request_action_by_shortcut(key) or controller.navigate_by_shortcut(key):
            return True
        if key.isdigit():
            return controller.switch_region_shortcut(key)

        action = NORMAL_KEYS.get(key)
        if action is None:
            return False
        getattr(self, f"action_{action}")()
        return True

    def _describe_key(self, key: str) -> bool:
        if key in ("escape", "backspace", "q", "d"):
            self._controller.exit_mode()
            return True
        delta = DESCRIBE_SCROLL.get(key)
        if delta is None:
            return False
        self._controller.scroll_describe(delta)
        return True

    def _picker_key(self, key: str) -> bool:
        controller = self._controller
        if key == "enter":
            controller.select_current()
            return True
        if key in ("escape", "q"):
            controller.exit_mode()
            return True
        action = PICKER_KEYS.get(key)
        if action is None:
            return False
        getattr(self, f"action_{action}")()
        return True

    def _filter_key(self, key: str) -> bool:
        controller = self._controller
        if key == "enter":
            controller.toggle_filter()
            self.set_focus(None)
            return True
        if key == "escape":
            controller.clear_filter()
            self.query_one("#filter-input", Input).value = ""
            self.set_focus(None)
            return True
        return False

    def _command_key(self, key: str) -> bool:
        commands = self._commands
        if key == "enter":
            command_input = self.query_one("#command-input", Input)
            with command_input.prevent(Input.Changed):
                command_input.value = ""
            self.set_focus(None)
            if commands.execute():
                self.app.exit()
            return True
        if key == "escape":
            self._controller.exit_mode()
            self.set_focus(None)
            return True
        if key in ("down", "ctrl+n"):
            commands.next_suggestion()
            return True
        if key in ("up", "ctrl+p"):
            commands.prev_suggestion()
            return True
        if key in ("tab", "right"):
            commands.apply_suggestion()
            command_input = self.query_one("#command-input", Input)
            command_input.value = self._controller.state.command_text
            command_input.cursor_position = len(command_input.value)
            return True
        return False

    @on(Input.Changed, "#filter-input")
    def handle_filter_changed(self, event: Input.Changed) -> None:
        """Re-filter as the user types."""
        self._controller.apply_filter(event.value)
        self.refresh_view()

    @on(Input.Changed, "#command-input")
    def handle_command_changed(self, event: Input.Changed) -> None:
        """Update suggestions as the user types."""
        if self._controller.state.mode_kind is Mode.COMMAND:
            self._commands.update_suggestions(event.value)
            self.refresh_view()

    # =========================================================================
    # Keyboard Actions
    # =========================================================================

    def action_cursor_down(self) -> None:
        """Move the selection down."""
        self._controller.next()

    def action_cursor_up(self) -> None:
        """Move the selection up."""
        self._controller.previous()

    def action_top(self) -> None:
        """Jump to the first row."""
        self._controller.go_to_top()

    def action_bottom(self) -> None:
        """Jump to the last row."""
        self._controller.go_to_bottom()

    def action_page_down(self) -> None:
        """Move one page down."""
        self._controller.page_down()

    def action_page_up(self) -> None:
        """Move one page up."""
        self._controller.page_up()

    def action_half_page_down(self) -> None:
        """Move half a page down."""
        self._controller.page_down(max(1, self._controller.page_size // 2))

    def action_half_page_up(self) -> None:
        """Move half a page up."""
        self._controller.page_up(max(1, self._controller.page_size // 2))

    def action_describe(self) -> None:
        """Show the selected record."""
        self._controller.enter_describe()

    def action_filter(self) -> None:
        """Start typing a filter."""
        self._controller.start_filter()
        filter_input = self.query_one("#filter-input", Input)
        filter_input.display = True
        filter_input.value = self._controller.state.filter_text
        filter_input.focus()

    def action_command(self) -> None:
        """Open the command line."""
        self._commands.enter_command_mode()
        command_input = self.query_one("#command-input", Input)
        command_input.display = True
        with command_input.prevent(Input.Changed):
            command_input.value = ""
        command_input.focus()

    def action_help(self) -> None:
        """Show key bindings."""
        self._controller.enter_help()

    def action_back(self) -> None:
        """Clear an active filter, otherwise go to the parent resource."""
        if self._controller.state.filter_text:
            self._controller.clear_filter()
        else:
            self._controller.navigate_back()

    def action_profiles(self) -> None:
        """Open the profile picker."""
        self._controller.enter_profiles()

    def action_regions(self) -> None:
        """Open the region picker."""
        self._controller.enter_regions()

    def action_refresh(self) -> None:
        """Refetch the current resource."""
        self._controller.refresh_current()

    def action_quit(self) -> None:
        """Quit the application."""
        self.app.exit()
