"""Navigation controller: the only writer of ViewState.

Owns the current resource, the parent stack, selection, filtering and
mode transitions, and drives fetches and actions through the dispatcher.
Remote calls go through an executor so the UI can run them on a worker
thread; the default executor runs them inline.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from cloud_resource_browser.catalog.values import MISSING, extract
from cloud_resource_browser.engine.filters import build_filters, merge_params
from cloud_resource_browser.engine.scheduler import RefreshScheduler
from cloud_resource_browser.engine.state import (
    Confirm,
    Mode,
    NavigationFrame,
    PendingAction,
    ViewState,
)
from cloud_resource_browser.integrations.aws.dispatcher import project_records
from cloud_resource_browser.integrations.aws.exceptions import (
    RemoteError,
    format_error,
    translate_client_error,
)
from cloud_resource_browser.integrations.aws.profiles import (
    REGION_SHORTCUTS,
    list_profiles,
    list_regions,
)

if TYPE_CHECKING:
    from cloud_resource_browser.catalog.catalog import Catalog
    from cloud_resource_browser.catalog.models import ResourceDescriptor
    from cloud_resource_browser.core.config.preferences import PreferenceStore
    from cloud_resource_browser.integrations.aws.dispatcher import Dispatcher

logger = structlog.get_logger()

MAX_NAVIGATION_DEPTH = 16

Executor = Callable[[Callable[[], Any], Callable[[Any], None]], None]


def run_inline(work: Callable[[], Any], done: Callable[[Any], None]) -> None:
    """Run ``work`` and hand its result to ``done`` on the calling thread."""
    done(work())


class SessionProvider(Protocol):
    """Active profile and region, and switching between them."""

    @property
    def profile(self) -> str: ...

    @property
    def region(self) -> str: ...

    def switch_profile(self, profile: str) -> str:
        """Switch profile and return the effective region."""
        ...

    def switch_region(self, region: str) -> str:
        """Switch region and return the effective region."""
        ...


@dataclass(frozen=True)
class FetchRequest:
    """A fetch prepared on the owning thread."""

    generation: int
    resource_key: str
    descriptor: ResourceDescriptor
    params: dict[str, Any]


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a fetch: records on success, a short message on failure."""

    request: FetchRequest
    records: list[Any] | None = None
    error: str | None = None


class NavigationController:
    """Hierarchical resource navigation over a catalog.

    Example:
        ```python
        controller = NavigationController(catalog, dispatcher, session)
        controller.navigate_to_resource("vpcs")
        controller.navigate_to_sub_resource("vpc-subnets")
        controller.navigate_back()
        ```
    """

    def __init__(
        self,
        catalog: Catalog,
        dispatcher: Dispatcher,
        session: SessionProvider,
        *,
        initial_resource: str = "ec2-instances",
        preferences: PreferenceStore | None = None,
        page_size: int = 10,
        scheduler: RefreshScheduler | None = None,
        profiles_provider: Callable[[], list[str]] = list_profiles,
        regions_provider: Callable[[], list[str]] = list_regions,
        executor: Executor = run_inline,
    ) -> None:
        """Initialize the controller.

        Nothing is fetched until ``refresh_current`` or a navigation runs.

        Args:
            catalog: Resource catalog.
            dispatcher: Backend capability used for fetches and actions.
            session: Profile and region provider.
            initial_resource: Resource shown first.
            preferences: Store remembering profile, region and resource.
            page_size: Rows moved by page up/down.
            scheduler: Auto refresh timer.
            profiles_provider: Lists selectable profiles.
            regions_provider: Lists selectable regions.
            executor: Runs remote calls and delivers their results.
        """
        self._catalog = catalog
        self._dispatcher = dispatcher
        self._session = session
        self._preferences = preferences
        self._page_size = page_size
        self._scheduler = scheduler or RefreshScheduler()
        self._profiles_provider = profiles_provider
        self._regions_provider = regions_provider
        self._executor = executor
        self._generation = 0

        self.state = ViewState(
            current_resource_key=initial_resource,
            profile=session.profile,
            region=session.region,
        )

    @property
    def catalog(self) -> Catalog:
        """Return the resource catalog."""
        return self._catalog

    @property
    def scheduler(self) -> RefreshScheduler:
        """Return the auto refresh scheduler."""
        return self._scheduler

    @property
    def page_size(self) -> int:
        """Return the page size used by page movement."""
        return self._page_size

    def set_executor(self, executor: Executor) -> None:
        """Change how remote calls are run."""
        self._executor = executor

    @property
    def current_descriptor(self) -> ResourceDescriptor | None:
        """Return the descriptor of the current resource, if known."""
        return self._catalog.lookup(self.state.current_resource_key)

    # =========================================================================
    # Fetching
    # =========================================================================

    def refresh_current(self) -> None:
        """Fetch the current resource again.

        On success the selection is kept when still in range. On failure
        the item lists are emptied so stale records never show under the
        current resource.
        """
        request = self._begin_fetch()
        if request is None:
            return
        self._executor(lambda: self._perform_fetch(request), self._complete_fetch)

    def auto_refresh(self) -> bool:
        """Refresh when due, idle and in normal mode.

        Returns:
            True if a refresh was started.
        """
        state = self.state
        if state.mode_kind is not Mode.NORMAL or state.loading:
            return False
        if not self._scheduler.needs_refresh():
            return False
        self.refresh_current()
        return True

    def _begin_fetch(self) -> FetchRequest | None:
        state = self.state
        descriptor = self.current_descriptor
        if descriptor is None:
            state.last_error = f"Unknown resource: {state.current_resource_key}"
            return None

        state.loading = True
        state.last_error = None
        self._generation += 1
        self._scheduler.mark_refreshed()

        filters = build_filters(state, self._catalog)
        params = merge_params(descriptor.operation.params, filters)
        logger.debug(
            "Fetching resource",
            resource=descriptor.key,
            filters=[f.name for f in filters],
            generation=self._generation,
        )
        return FetchRequest(
            generation=self._generation,
            resource_key=descriptor.key,
            descriptor=descriptor,
            params=params,
        )

    def _perform_fetch(self, request: FetchRequest) -> FetchResult:
        descriptor = request.descriptor
        try:
            raw = self._dispatcher.invoke(
                descriptor.operation, request.params, is_global=descriptor.is_global
            )
            records = project_records(raw, descriptor.response_path)
        except Exception as e:
            error = translate_client_error(
                e, service=descriptor.service, operation=descriptor.operation.method
            )
            logger.warning("Fetch failed", resource=request.resource_key, error=str(error))
            return FetchResult(request=request, error=format_error(error))
        return FetchResult(request=request, records=records)

    def _complete_fetch(self, result: FetchResult) -> None:
        state = self.state
        request = result.request
        if (
            request.generation != self._generation
            or request.resource_key != state.current_resource_key
        ):
            logger.debug("Discarding stale fetch", resource=request.resource_key)
            return

        state.loading = False
        self._scheduler.mark_refreshed()
        if result.error is not None:
            state.last_error = result.error
            state.items = []
            state.filtered_items = []
            state.selected_index = 0
            return

        previous = state.selected_index
        state.items = list(result.records or [])
        self.apply_filter()
        if previous < len(state.filtered_items):
            state.selected_index = previous
        logger.info("Fetched resource", resource=request.resource_key, count=len(state.items))

    # =========================================================================
    # Filtering
    # =========================================================================

    def apply_filter(self, text: str | None = None) -> None:
        """Recompute the filtered list.

        Matches are case-insensitive substrings of the name or id of each
        record. Without a descriptor the whole record is searched.

        Args:
            text: New filter text. None reuses the current text.
        """
        state = self.state
        if text is not None:
            state.filter_text = text

        needle = state.filter_text.lower()
        if not needle:
            state.filtered_items = list(state.items)
        else:
            descriptor = self.current_descriptor
            state.filtered_items = [
                item for item in state.items if self._matches(item, needle, descriptor)
            ]

        if state.selected_index >= len(state.filtered_items) and state.filtered_items:
            state.selected_index = len(state.filtered_items) - 1

    @staticmethod
    def _matches(item: Any, needle: str, descriptor: ResourceDescriptor | None) -> bool:
        if descriptor is None:
            return needle in json.dumps(item, default=str, sort_keys=True).lower()
        name = extract(item, descriptor.name_field).lower()
        resource_id = extract(item, descriptor.id_field).lower()
        return needle in name or needle in resource_id

    def start_filter(self) -> None:
        """Begin typing filter text."""
        self.state.filter_active = True

    def toggle_filter(self) -> None:
        """Toggle filter input."""
        self.state.filter_active = not self.state.filter_active

    def clear_filter(self) -> None:
        """Drop the filter and show every item."""
        self.state.filter_text = ""
        self.state.filter_active = False
        self.apply_filter()

    # =========================================================================
    # Navigation
    # =========================================================================

    def _reset_view(self) -> None:
        state = self.state
        state.items = []
        state.filtered_items = []
        state.selected_index = 0
        state.filter_text = ""
        state.filter_active = False
        state.describe_scroll = 0
        state.status_message = None

    def navigate_to_resource(self, key: str) -> None:
        """Show a top-level resource, discarding any parent context."""
        state = self.state
        if key not in self._catalog:
            state.last_error = f"Unknown resource: {key}"
            return

        state.current_parent = None
        state.navigation_stack = []
        state.current_resource_key = key
        state.mode = Mode.NORMAL
        self._reset_view()
        self._remember("set_last_resource", key)
        logger.debug("Navigated to resource", resource=key)
        self.refresh_current()

    def navigate_to_sub_resource(self, child_key: str) -> None:
        """Drill into a sub-resource of the selected record."""
        state = self.state
        record = state.selected_item
        descriptor = self.current_descriptor
        if record is None or descriptor is None:
            return

        if descriptor.sub_resource(child_key) is None:
            state.last_error = f"{child_key} is not a sub-resource of {descriptor.key}"
            return
        if child_key not in self._catalog:
            state.last_error = f"Unknown resource: {child_key}"
            return
        depth = len(state.navigation_stack) + (state.current_parent is not None)
        if depth >= MAX_NAVIGATION_DEPTH:
            state.last_error = "Navigation too deep - go back first"
            return

        frame = NavigationFrame(
            resource_key=descriptor.key,
            record=record,
            display_label=self._label(record, descriptor),
        )
        if state.current_parent is not None:
            state.navigation_stack.append(state.current_parent)
        state.current_parent = frame
        state.current_resource_key = child_key
        state.mode = Mode.NORMAL
        self._reset_view()
        logger.debug("Navigated to sub-resource", parent=descriptor.key, resource=child_key)
        self.refresh_current()

    def navigate_by_shortcut(self, char: str) -> bool:
        """Drill into the sub-resource bound to ``char``.

        Returns:
            True if the current resource declares that shortcut.
        """
        descriptor = self.current_descriptor
        if descriptor is None:
            return False
        for link in descriptor.sub_resources:
            if link.shortcut == char:
                self.navigate_to_sub_resource(link.child_key)
                return True
        return False

    def navigate_back(self) -> None:
        """Return to the parent resource."""
        state = self.state
        parent = state.current_parent
        if parent is None:
            return

        state.current_parent = state.navigation_stack.pop() if state.navigation_stack else None
        state.current_resource_key = parent.resource_key
        state.mode = Mode.NORMAL
        self._reset_view()
        logger.debug("Navigated back", resource=parent.resource_key)
        self.refresh_current()

    def breadcrumb(self) -> list[str]:
        """Return ``key:label`` for each ancestor followed by the current key."""
        state = self.state
        frames = list(state.navigation_stack)
        if state.current_parent is not None:
            frames.append(state.current_parent)
        return [
            *(f"{frame.resource_key}:{frame.display_label}" for frame in frames),
            state.current_resource_key,
        ]

    @staticmethod
    def _label(record: Any, descriptor: ResourceDescriptor) -> str:
        label = extract(record, descriptor.name_field)
        if label == MISSING:
            label = extract(record, descriptor.id_field)
        return label

    # =========================================================================
    # Selection Movement
    # =========================================================================

    def _move(self, target: Callable[[int, int], int]) -> None:
        state = self.state
        kind = state.mode_kind
        if kind is Mode.PROFILE_SELECT:
            current, length = state.profile_index, len(state.profiles)
        elif kind is Mode.REGION_SELECT:
            current, length = state.region_index, len(state.regions)
        else:
            current, length = state.selected_index, len(state.filtered_items)

        if length == 0:
            return
        index = max(0, min(target(current, length), length - 1))

        if kind is Mode.PROFILE_SELECT:
            state.profile_index = index
        elif kind is Mode.REGION_SELECT:
            state.region_index = index
        else:
            if index != state.selected_index:
                state.describe_scroll = 0
            state.selected_index = index

    def next(self) -> None:
        """Move the cursor down one row."""
        self._move(lambda i, _: i + 1)

    def previous(self) -> None:
        """Move the cursor up one row."""
        self._move(lambda i, _: i - 1)

    def page_down(self, size: int | None = None) -> None:
        """Move the cursor down one page."""
        step = self._page_size if size is None else size
        self._move(lambda i, _: i + step)

    def page_up(self, size: int | None = None) -> None:
        """Move the cursor up one page."""
        step = self._page_size if size is None else size
        self._move(lambda i, _: i - step)

    def go_to_top(self) -> None:
        """Move the cursor to the first row."""
        self._move(lambda _i, _n: 0)

    def go_to_bottom(self) -> None:
        """Move the cursor to the last row."""
        self._move(lambda _i, n: n - 1)

    # =========================================================================
    # Modes
    # =========================================================================

    def exit_mode(self) -> None:
        """Return to normal mode, dropping any pending confirmation."""
        self.state.mode = Mode.NORMAL
        self.state.describe_scroll = 0

    def enter_help(self) -> None:
        """Show the key binding help."""
        self.state.mode = Mode.HELP

    def enter_describe(self) -> None:
        """Show the selected record in full."""
        if self.state.filtered_items:
            self.state.mode = Mode.DESCRIBE
            self.state.describe_scroll = 0

    def describe_text(self) -> str | None:
        """Return the selected record as indented, key-sorted JSON."""
        record = self.state.selected_item
        if record is None:
            return None
        return json.dumps(record, indent=2, sort_keys=True, default=str)

    def scroll_describe(self, delta: int) -> None:
        """Scroll the describe view, staying within its lines."""
        text = self.describe_text() or ""
        last_line = max(0, text.count("\n"))
        self.state.describe_scroll = max(0, min(self.state.describe_scroll + delta, last_line))

    def enter_profiles(self) -> None:
        """Open the profile picker on the active profile."""
        state = self.state
        state.profiles = list(self._profiles_provider())
        state.profile_index = (
            state.profiles.index(state.profile) if state.profile in state.profiles else 0
        )
        state.mode = Mode.PROFILE_SELECT

    def enter_regions(self) -> None:
        """Open the region picker on the active region."""
        state = self.state
        state.regions = list(self._regions_provider())
        state.region_index = (
            state.regions.index(state.region) if state.region in state.regions else 0
        )
        state.mode = Mode.REGION_SELECT

    def select_current(self) -> None:
        """Apply the highlighted entry of the open picker."""
        state = self.state
        kind = state.mode_kind
        if kind is Mode.PROFILE_SELECT and 0 <= state.profile_index < len(state.profiles):
            self.switch_profile(state.profiles[state.profile_index])
        elif kind is Mode.REGION_SELECT and 0 <= state.region_index < len(state.regions):
            self.switch_region(state.regions[state.region_index])
        else:
            self.exit_mode()

    # =========================================================================
    # Profile / Region Switching
    # =========================================================================

    def _remember(self, method: str, value: str) -> None:
        if self._preferences is not None:
            getattr(self._preferences, method)(value)

    def switch_profile(self, profile: str) -> bool:
        """Switch to another profile and refetch the current resource.

        Returns:
            True if the switch succeeded.
        """
        state = self.state
        self.exit_mode()
        try:
            region = self._session.switch_profile(profile)
        except RemoteError as e:
            logger.warning("Profile switch failed", profile=profile, error=str(e))
            state.last_error = format_error(e)
            return False

        state.profile = profile
        state.region = region
        self._remember("set_profile", profile)
        self._remember("set_region", region)
        state.status_message = f"Profile: {profile}"
        self.refresh_current()
        return True

    def switch_region(self, region: str) -> bool:
        """Switch to another region.

        The current resource is refetched unless the effective region did
        not change or the resource is global.

        Returns:
            True if the switch succeeded.
        """
        state = self.state
        previous = state.region
        self.exit_mode()
        try:
            effective = self._session.switch_region(region)
        except RemoteError as e:
            logger.warning("Region switch failed", region=region, error=str(e))
            state.last_error = format_error(e)
            return False

        state.region = effective
        self._remember("set_region", effective)
        state.status_message = f"Region: {effective}"

        descriptor = self.current_descriptor
        if effective == previous or (descriptor is not None and descriptor.is_global):
            logger.debug("Skipping refetch after region switch", region=effective)
            return True
        self.refresh_current()
        return True

    def switch_region_shortcut(self, digit: str) -> bool:
        """Switch to the region bound to a digit key.

        Returns:
            True if ``digit`` is a region shortcut.
        """
        region = REGION_SHORTCUTS.get(digit)
        if region is None:
            return False
        self.switch_region(region)
        return True

    # =========================================================================
    # Actions
    # =========================================================================

    def request_action(self, key: str) -> None:
        """Run an action on the selected record, confirming first if required."""
        state = self.state
        descriptor = self.current_descriptor
        if descriptor is None:
            return
        action = descriptor.action(key)
        if action is None:
            state.last_error = f"{key} is not available for {descriptor.key}"
            return
        record = state.selected_item
        if record is None:
            return

        resource_id = extract(record, descriptor.id_field)
        if resource_id == MISSING:
            state.last_error = "Selected item has no id"
            return

        record_params = {
            param: value
            for param, path in action.record_params.items()
            if (value := extract(record, path)) != MISSING
        }
        policy = action.confirm_policy
        pending = PendingAction(
            action_key=action.key,
            resource_key=descriptor.key,
            resource_id=resource_id,
            display_label=self._label(record, descriptor),
            message=policy.message if policy else action.display_name,
            default_yes=policy.default_yes if policy else False,
            destructive=policy.destructive if policy else False,
            record_params=record_params,
        )
        if policy is None:
            self.execute_action(pending)
        else:
            state.mode = Confirm(pending)

    def request_action_by_shortcut(self, key: str) -> bool:
        """Request the action bound to ``key`` on the current resource.

        Returns:
            True if the current resource declares that shortcut.
        """
        descriptor = self.current_descriptor
        if descriptor is None:
            return False
        for action in descriptor.actions:
            if action.shortcut == key:
                self.request_action(action.key)
                return True
        return False

    def start_instance(self) -> None:
        """Start the selected instance."""
        self.request_action("start_instance")

    def stop_instance(self) -> None:
        """Stop the selected instance."""
        self.request_action("stop_instance")

    def terminate_instance(self) -> None:
        """Terminate the selected instance."""
        self.request_action("terminate_instance")

    def confirm(self, yes: bool | None = None) -> None:
        """Answer the pending confirmation.

        Args:
            yes: The answer. None takes the action's default.
        """
        pending = self.state.pending_action
        if pending is None:
            return
        answer = pending.default_yes if yes is None else yes
        self.exit_mode()
        if answer:
            self.execute_action(pending)
        else:
            logger.debug("Action cancelled", action=pending.action_key)

    def execute_action(self, pending: PendingAction) -> None:
        """Invoke an action and refresh on success."""
        state = self.state
        descriptor = self._catalog.lookup(pending.resource_key)
        action = descriptor.action(pending.action_key) if descriptor else None
        if descriptor is None or action is None:
            state.last_error = f"Unknown action: {pending.action_key}"
            return

        def work() -> str | None:
            try:
                self._dispatcher.execute_action(
                    action,
                    pending.resource_id,
                    record_params=pending.record_params,
                    is_global=descriptor.is_global,
                )
            except Exception as e:
                error = translate_client_error(
                    e, service=action.operation.service, operation=action.operation.method
                )
                logger.warning("Action failed", action=action.key, error=str(error))
                return format_error(error)
            return None

        def done(error: str | None) -> None:
            if error is not None:
                state.last_error = error
                return
            state.status_message = f"{action.display_name}: {pending.display_label}"
            if state.current_resource_key == pending.resource_key:
                self.refresh_current()

        self._executor(work, done)
