"""Unit tests for the command palette engine."""

from __future__ import annotations

from typing import Any

import pytest

from cloud_resource_browser.catalog.loader import load_catalog
from cloud_resource_browser.engine.commands import CommandEngine
from cloud_resource_browser.engine.controller import NavigationController
from cloud_resource_browser.engine.state import Mode


@pytest.fixture
def commands(loaded_controller: NavigationController) -> CommandEngine:
    """Create a command engine over the loaded sample controller."""
    return CommandEngine(loaded_controller)


def _run(commands: CommandEngine, text: str) -> bool:
    commands.enter_command_mode()
    commands.update_suggestions(text)
    return commands.execute()


# ============================================================================
# Suggestions
# ============================================================================


@pytest.mark.unit
class TestSuggestions:
    """Tests for autocomplete."""

    def test_enter_command_mode_seeds_everything(self, commands: CommandEngine) -> None:
        """All resource keys and pseudo-commands are offered, sorted."""
        commands.enter_command_mode()
        state = commands.state
        assert state.mode_kind is Mode.COMMAND
        assert state.suggestions == [
            "disks",
            "profiles",
            "regions",
            "servers",
            "snapshots",
            "users",
        ]
        assert state.command_preview == "disks"

    def test_substring_match(self, commands: CommandEngine) -> None:
        """Suggestions contain the typed text anywhere."""
        commands.enter_command_mode()
        commands.update_suggestions("er")
        assert commands.state.suggestions == ["servers", "users"]

    def test_match_is_case_insensitive(self, commands: CommandEngine) -> None:
        """Typed text is lowercased before matching."""
        commands.enter_command_mode()
        commands.update_suggestions("SNAP")
        assert commands.state.suggestions == ["snapshots"]

    def test_substring_match_on_bundled_catalog(
        self, fake_dispatcher: Any, fake_session: Any
    ) -> None:
        """A partial name offers every resource containing it."""
        controller = NavigationController(load_catalog(), fake_dispatcher, fake_session)
        commands = CommandEngine(controller)
        commands.enter_command_mode()
        commands.update_suggestions("users")
        assert "iam-users" in commands.state.suggestions
        assert "iam-group-users" in commands.state.suggestions

    def test_index_reset_when_out_of_range(self, commands: CommandEngine) -> None:
        """The highlight resets when the list shrinks below it."""
        commands.enter_command_mode()
        commands.state.suggestion_index = 4
        commands.update_suggestions("sn")
        assert commands.state.suggestion_index == 0
        assert commands.state.command_preview == "snapshots"

    def test_index_kept_when_in_range(self, commands: CommandEngine) -> None:
        """The highlight stays when still valid."""
        commands.enter_command_mode()
        commands.state.suggestion_index = 1
        commands.update_suggestions("er")
        assert commands.state.command_preview == "users"

    def test_next_and_prev_wrap(self, commands: CommandEngine) -> None:
        """Cycling wraps around both ends."""
        commands.enter_command_mode()
        commands.update_suggestions("er")
        commands.next_suggestion()
        assert commands.state.command_preview == "users"
        commands.next_suggestion()
        assert commands.state.command_preview == "servers"
        commands.prev_suggestion()
        assert commands.state.command_preview == "users"

    def test_cycling_without_suggestions(self, commands: CommandEngine) -> None:
        """Cycling an empty list is a no-op."""
        commands.enter_command_mode()
        commands.update_suggestions("zzz")
        commands.next_suggestion()
        assert commands.state.suggestion_index == 0
        assert commands.state.command_preview is None

    def test_apply_suggestion(self, commands: CommandEngine) -> None:
        """Applying copies the preview into the command text."""
        commands.enter_command_mode()
        commands.update_suggestions("snap")
        commands.apply_suggestion()
        assert commands.state.command_text == "snapshots"
        assert commands.state.suggestions == ["snapshots"]


# ============================================================================
# Resolution
# ============================================================================


@pytest.mark.unit
class TestResolve:
    """Tests for command line resolution."""

    def test_empty_uses_preview(self, commands: CommandEngine) -> None:
        """An empty line runs the highlighted suggestion."""
        commands.enter_command_mode()
        commands.next_suggestion()
        assert commands.resolve() == "profiles"

    def test_partial_snaps_to_preview(self, commands: CommandEngine) -> None:
        """Partial text resolves to the preview containing it."""
        commands.enter_command_mode()
        commands.update_suggestions("serv")
        assert commands.resolve() == "servers"

    def test_unmatched_text_kept(self, commands: CommandEngine) -> None:
        """Text no suggestion contains is used as typed."""
        commands.enter_command_mode()
        commands.update_suggestions("region eu-west-1")
        assert commands.resolve() == "region eu-west-1"


# ============================================================================
# Execution
# ============================================================================


@pytest.mark.unit
class TestExecute:
    """Tests for verb dispatch."""

    def test_quit(self, commands: CommandEngine) -> None:
        """q and quit request exit."""
        assert _run(commands, "q") is True
        assert _run(commands, "quit") is True

    def test_execute_leaves_command_mode(self, commands: CommandEngine) -> None:
        """Running a command returns to normal mode and clears the line."""
        _run(commands, "users")
        assert commands.state.mode_kind is Mode.NORMAL
        assert commands.state.command_text == ""

    def test_top_level_navigation(self, commands: CommandEngine, fake_dispatcher: Any) -> None:
        """A resource key navigates to it."""
        assert _run(commands, "users") is False
        assert commands.state.current_resource_key == "users"
        assert fake_dispatcher.invocations[-1][0] == "list_users"

    def test_partial_key_navigates(self, commands: CommandEngine) -> None:
        """Partial keys snap to the highlighted suggestion."""
        _run(commands, "snap")
        assert commands.state.current_resource_key == "snapshots"
        assert commands.state.current_parent is None

    def test_sub_resource_drills_down(self, commands: CommandEngine) -> None:
        """A declared sub-resource with a selection drills down."""
        _run(commands, "disks")
        state = commands.state
        assert state.current_resource_key == "disks"
        assert state.current_parent is not None
        assert state.current_parent.resource_key == "servers"

    def test_non_child_navigates_top_level(self, commands: CommandEngine) -> None:
        """A key that is not a child of the current resource jumps to it."""
        _run(commands, "snapshots")
        assert commands.state.current_parent is None

    def test_back(self, commands: CommandEngine) -> None:
        """back returns to the parent."""
        _run(commands, "disks")
        _run(commands, "back")
        assert commands.state.current_resource_key == "servers"

    def test_region_and_profile(self, commands: CommandEngine, fake_session: Any) -> None:
        """region and profile switch the session."""
        _run(commands, "region eu-west-1")
        assert fake_session.region == "eu-west-1"
        _run(commands, "profile prod")
        assert commands.state.profile == "prod"

    def test_pickers(self, commands: CommandEngine) -> None:
        """profiles and regions open the pickers."""
        _run(commands, "profiles")
        assert commands.state.mode_kind is Mode.PROFILE_SELECT
        commands.state.mode = Mode.NORMAL
        _run(commands, "regions")
        assert commands.state.mode_kind is Mode.REGION_SELECT

    def test_unknown_command(self, commands: CommandEngine) -> None:
        """Unknown verbs are soft errors."""
        assert _run(commands, "bogus") is False
        assert commands.state.last_error == "Unknown command: bogus"
        assert commands.state.current_resource_key == "servers"
