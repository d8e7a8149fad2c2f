"""Confirmation modal for TUI applications.

Usage:
    from cloud_resource_browser.tui.components import Modal

    def handle_result(result: str | None) -> None:
        if result == "yes":
            run_action()

    app.push_screen(
        Modal(
            title="Terminate Instance",
            body="Terminate web-1?",
            buttons=[("Yes", "yes", "error"), ("No", "no", "default")],
            default="no",
        ),
        handle_result,
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

if TYPE_CHECKING:
    from textual.widget import Widget

ButtonVariant = Literal["default", "primary", "success", "warning", "error"]


class Modal(ModalScreen[str | None]):
    """A centered dialog that dismisses with the id of the pressed button.

    Keyboard Navigation:
    - Tab / Shift+Tab: Move between buttons
    - Enter: Press the focused button (the default button starts focused)
    - A button's first letter: Press that button
    - Escape: Dismiss with None
    """

    DEFAULT_CSS = """
    Modal {
        align: center middle;
    }

    Modal > Container {
        width: auto;
        max-width: 80%;
        min-width: 40;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    Modal.destructive > Container {
        border: thick $error;
    }

    Modal .modal-title {
        text-style: bold;
        text-align: center;
        width: 100%;
        margin-bottom: 1;
    }

    Modal .modal-body {
        width: 100%;
        height: auto;
        padding: 0 1;
    }

    Modal .modal-buttons {
        width: 100%;
        height: auto;
        align: center middle;
        margin-top: 1;
    }

    Modal .modal-buttons Button {
        margin: 0 1;
        min-width: 8;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("tab", "focus_next", "Next", show=False),
        Binding("shift+tab", "focus_previous", "Previous", show=False),
    ]

    def __init__(
        self,
        title: str,
        body: str | Widget,
        buttons: list[tuple[str, str, ButtonVariant]] | None = None,
        *,
        default: str | None = None,
        destructive: bool = False,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the modal dialog.

        Args:
            title: Title displayed at the top of the modal.
            body: Text or widget shown under the title.
            buttons: ``(label, id, variant)`` tuples. Defaults to Yes/No.
            default: Id of the button focused on open. Defaults to the last.
            destructive: Draw the dialog with an error border.
            name: Widget name.
            id: Widget ID.
            classes: CSS classes.
        """
        super().__init__(name=name, id=id, classes=classes)
        self._title = title
        self._body = body
        self._buttons = buttons or [("Yes", "yes", "primary"), ("No", "no", "default")]
        self._default = default or self._buttons[-1][1]
        if destructive:
            self.add_class("destructive")

    def compose(self) -> ComposeResult:
        """Compose the modal layout."""
        with Container():
            yield Label(self._title, classes="modal-title")
            with Vertical(classes="modal-body"):
                if isinstance(self._body, str):
                    yield Static(self._body)
                else:
                    yield self._body
            with Horizontal(classes="modal-buttons"):
                for label, button_id, variant in self._buttons:
                    yield Button(label, id=f"modal-btn-{button_id}", variant=variant)

    def on_mount(self) -> None:
        """Focus the default button."""
        self.query_one(f"#modal-btn-{self._default}", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Dismiss with the pressed button's id."""
        button_id = (event.button.id or "").removeprefix("modal-btn-")
        self.dismiss(button_id or None)

    def on_key(self, event: events.Key) -> None:
        """Press the button whose label starts with the typed letter."""
        character = event.character
        if not character or not character.isalpha():
            return
        for label, button_id, _variant in self._buttons:
            if label[:1].lower() == character.lower():
                event.stop()
                self.dismiss(button_id)
                return

    def action_cancel(self) -> None:
        """Dismiss without an answer."""
        self.dismiss(None)
