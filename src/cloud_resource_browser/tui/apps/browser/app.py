"""Main Textual application for browsing cloud resources."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog
from textual import work
from textual.app import App

from cloud_resource_browser.engine.commands import CommandEngine
from cloud_resource_browser.engine.keys import KeySequence
from cloud_resource_browser.tui.apps.browser.screens import BrowserScreen

if TYPE_CHECKING:
    from cloud_resource_browser.engine.controller import NavigationController

logger = structlog.get_logger()


class BrowserApp(App[None]):
    """TUI application for hierarchical resource browsing.

    Fetches and actions run on worker threads; their results are applied
    back on the UI thread, which is the only place ViewState changes.

    Args:
        controller: Navigation controller for the session.
        key_sequence_window_ms: Window for two-key sequences.
        threaded: Run remote calls on worker threads. Tests pass False to
            run them inline.
    """

    TITLE = "Cloud Resource Browser"

    def __init__(
        self,
        controller: NavigationController,
        *,
        key_sequence_window_ms: int = 250,
        threaded: bool = True,
    ) -> None:
        super().__init__()
        self.controller = controller
        self.commands = CommandEngine(controller)
        self._key_window = key_sequence_window_ms
        self._threaded = threaded
        self._browser: BrowserScreen | None = None

    def on_mount(self) -> None:
        """Push the browser screen on mount."""
        if self._threaded:
            self.controller.set_executor(self._run_remote)
        self._browser = BrowserScreen(
            self.controller,
            self.commands,
            KeySequence(self._key_window),
        )
        self.push_screen(self._browser)

    def _run_remote(
        self,
        work_fn: Callable[[], Any],
        done: Callable[[Any], None],
    ) -> None:
        self._remote_worker(work_fn, done)

    @work(thread=True, group="remote")
    def _remote_worker(
        self,
        work_fn: Callable[[], Any],
        done: Callable[[Any], None],
    ) -> None:
        """Run a remote call in a background thread."""
        result = work_fn()
        self.call_from_thread(self._deliver, done, result)

    def _deliver(self, done: Callable[[Any], None], result: Any) -> None:
        done(result)
        if self._browser is not None and self._browser.is_attached:
            self._browser.refresh_view()
