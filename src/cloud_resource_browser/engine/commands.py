"""Command palette: autocomplete and verb dispatch."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cloud_resource_browser.engine.state import Mode

if TYPE_CHECKING:
    from cloud_resource_browser.engine.controller import NavigationController
    from cloud_resource_browser.engine.state import ViewState

logger = structlog.get_logger()

PSEUDO_COMMANDS = ("profiles", "regions")
QUIT_COMMANDS = frozenset({"q", "quit"})


class CommandEngine:
    """Suggestions and execution for the ``:`` command line.

    Suggestions are substring matches, so typing ``users`` offers both
    ``iam-users`` and ``iam-group-users``. The highlighted
    suggestion is the preview; executing a partial command snaps to it.
    """

    def __init__(self, controller: NavigationController) -> None:
        self._controller = controller

    @property
    def state(self) -> ViewState:
        """Return the controller's view state."""
        return self._controller.state

    def available_commands(self) -> list[str]:
        """Return every resource key plus the pseudo-commands, sorted."""
        return sorted([*self._controller.catalog.all_keys(), *PSEUDO_COMMANDS])

    def enter_command_mode(self) -> None:
        """Open the command line with every command suggested."""
        state = self.state
        state.mode = Mode.COMMAND
        state.command_text = ""
        state.suggestions = self.available_commands()
        state.suggestion_index = 0

    def update_suggestions(self, text: str | None = None) -> None:
        """Filter suggestions to those containing the typed text.

        Args:
            text: New command text. None reuses the current text.
        """
        state = self.state
        if text is not None:
            state.command_text = text
        typed = state.command_text.lower()
        commands = self.available_commands()
        state.suggestions = [cmd for cmd in commands if typed in cmd] if typed else commands
        if state.suggestion_index >= len(state.suggestions):
            state.suggestion_index = 0

    def next_suggestion(self) -> None:
        """Highlight the next suggestion, wrapping around."""
        state = self.state
        if state.suggestions:
            state.suggestion_index = (state.suggestion_index + 1) % len(state.suggestions)

    def prev_suggestion(self) -> None:
        """Highlight the previous suggestion, wrapping around."""
        state = self.state
        if state.suggestions:
            state.suggestion_index = (state.suggestion_index - 1) % len(state.suggestions)

    def apply_suggestion(self) -> None:
        """Copy the preview into the command text."""
        preview = self.state.command_preview
        if preview is not None:
            self.update_suggestions(preview)

    def resolve(self) -> str:
        """Return the command line that ``execute`` would run."""
        state = self.state
        typed = state.command_text
        preview = state.command_preview
        if not typed:
            return preview or ""
        if preview is not None and typed in preview:
            return preview
        return typed

    def execute(self) -> bool:
        """Run the command line and leave command mode.

        Returns:
            True if the user asked to quit.
        """
        controller = self._controller
        state = self.state
        parts = self.resolve().split()
        state.command_text = ""
        if state.mode_kind is Mode.COMMAND:
            controller.exit_mode()
        if not parts:
            return False

        verb, args = parts[0], parts[1:]
        logger.debug("Executing command", command=verb, args=args)

        if verb in QUIT_COMMANDS:
            return True
        if verb == "back":
            controller.navigate_back()
        elif verb == "profiles":
            controller.enter_profiles()
        elif verb == "regions":
            controller.enter_regions()
        elif verb == "region" and args:
            controller.switch_region(args[0])
        elif verb == "profile" and args:
            controller.switch_profile(args[0])
        elif verb in controller.catalog:
            descriptor = controller.current_descriptor
            if (
                descriptor is not None
                and descriptor.sub_resource(verb) is not None
                and state.selected_item is not None
            ):
                controller.navigate_to_sub_resource(verb)
            else:
                controller.navigate_to_resource(verb)
        else:
            state.last_error = f"Unknown command: {verb}"
        return False
