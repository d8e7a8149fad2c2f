"""View state owned by the navigation controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar


class Mode(StrEnum):
    """Input mode of the browser."""

    NORMAL = "normal"
    COMMAND = "command"
    HELP = "help"
    CONFIRM = "confirm"
    PROFILE_SELECT = "profile_select"
    REGION_SELECT = "region_select"
    DESCRIBE = "describe"


@dataclass(frozen=True)
class NavigationFrame:
    """A parent selection the user drilled down from.

    Attributes:
        resource_key: Resource the parent record belongs to.
        record: The parent record as fetched.
        display_label: Name (or id) of the parent shown in the breadcrumb.
    """

    resource_key: str
    record: Any
    display_label: str


@dataclass(frozen=True)
class PendingAction:
    """An action waiting for the user to confirm it."""

    action_key: str
    resource_key: str
    resource_id: str
    display_label: str
    message: str
    default_yes: bool = False
    destructive: bool = False
    record_params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Confirm:
    """Confirmation mode carrying the action it confirms."""

    action: PendingAction
    kind: ClassVar[Mode] = Mode.CONFIRM


ModeState = Mode | Confirm


@dataclass
class ViewState:
    """Everything the view layer renders.

    Only the navigation controller and command engine mutate it.
    """

    current_resource_key: str
    items: list[Any] = field(default_factory=list)
    filtered_items: list[Any] = field(default_factory=list)
    selected_index: int = 0
    filter_text: str = ""
    filter_active: bool = False
    current_parent: NavigationFrame | None = None
    navigation_stack: list[NavigationFrame] = field(default_factory=list)
    mode: ModeState = Mode.NORMAL
    loading: bool = False
    last_error: str | None = None
    status_message: str | None = None

    # Session
    profile: str = "default"
    region: str = "us-east-1"

    # Pickers
    profiles: list[str] = field(default_factory=list)
    profile_index: int = 0
    regions: list[str] = field(default_factory=list)
    region_index: int = 0

    # Command palette
    command_text: str = ""
    suggestions: list[str] = field(default_factory=list)
    suggestion_index: int = 0

    describe_scroll: int = 0

    @property
    def mode_kind(self) -> Mode:
        """Return the mode without its payload."""
        if isinstance(self.mode, Confirm):
            return self.mode.kind
        return self.mode

    @property
    def pending_action(self) -> PendingAction | None:
        """Return the action awaiting confirmation, if any."""
        if isinstance(self.mode, Confirm):
            return self.mode.action
        return None

    @property
    def selected_item(self) -> Any | None:
        """Return the selected record of the filtered list."""
        if 0 <= self.selected_index < len(self.filtered_items):
            return self.filtered_items[self.selected_index]
        return None

    @property
    def command_preview(self) -> str | None:
        """Return the highlighted suggestion shown as ghost text."""
        if 0 <= self.suggestion_index < len(self.suggestions):
            return self.suggestions[self.suggestion_index]
        return None
