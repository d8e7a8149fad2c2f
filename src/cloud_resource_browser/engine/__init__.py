"""Navigation engine: view state, controller, commands and timers."""

from cloud_resource_browser.engine.commands import CommandEngine
from cloud_resource_browser.engine.controller import (
    Executor,
    NavigationController,
    SessionProvider,
    run_inline,
)
from cloud_resource_browser.engine.filters import ResourceFilter, build_filters, merge_params
from cloud_resource_browser.engine.keys import KeySequence
from cloud_resource_browser.engine.scheduler import RefreshScheduler
from cloud_resource_browser.engine.state import (
    Confirm,
    Mode,
    NavigationFrame,
    PendingAction,
    ViewState,
)

__all__ = [
    "CommandEngine",
    "Confirm",
    "Executor",
    "KeySequence",
    "Mode",
    "NavigationController",
    "NavigationFrame",
    "PendingAction",
    "RefreshScheduler",
    "ResourceFilter",
    "SessionProvider",
    "ViewState",
    "build_filters",
    "merge_params",
    "run_inline",
]
