"""Shared pytest fixtures for cloud_resource_browser tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Generator, Mapping
from pathlib import Path
from typing import Any

import pytest
import typer
from typer.testing import CliRunner

from cloud_resource_browser.catalog.catalog import Catalog
from cloud_resource_browser.catalog.loader import parse_document
from cloud_resource_browser.cli.main import app
from cloud_resource_browser.core.config import models as config_models
from cloud_resource_browser.core.config import preferences
from cloud_resource_browser.logging import config as logging_config
from cloud_resource_browser.engine.controller import NavigationController
from cloud_resource_browser.engine.scheduler import RefreshScheduler
from cloud_resource_browser.integrations.aws.exceptions import RemoteError

# ============================================================================
# Synthetic catalog
# ============================================================================

SAMPLE_DOCUMENT: dict[str, Any] = {
    "resources": [
        {
            "key": "servers",
            "display_name": "Servers",
            "id_field": "ServerId",
            "name_field": "Name",
            "response_path": "Servers",
            "operation": {"service": "compute", "method": "list_servers"},
            "columns": [
                {"header": "Name", "path": "Name"},
                {"header": "ID", "path": "ServerId"},
                {"header": "State", "path": "State", "color_map": "state"},
            ],
            "sub_resources": [
                {
                    "child_key": "disks",
                    "display_name": "Disks",
                    "shortcut": "v",
                    "parent_id_field": "ServerId",
                    "filter_param": "Filters.server-id",
                },
            ],
            "actions": [
                {
                    "key": "start_instance",
                    "display_name": "Start Server",
                    "shortcut": "s",
                    "operation": {"service": "compute", "method": "start_servers"},
                    "id_param": "ServerIds",
                    "id_is_list": True,
                    "confirm": {"message": "Start this server?", "default_yes": True},
                },
                {
                    "key": "stop_instance",
                    "display_name": "Stop Server",
                    "shortcut": "S",
                    "operation": {"service": "compute", "method": "stop_servers"},
                    "id_param": "ServerIds",
                    "id_is_list": True,
                    "confirm": {"message": "Stop this server?"},
                },
                {
                    "key": "terminate_instance",
                    "display_name": "Terminate Server",
                    "shortcut": "ctrl+d",
                    "operation": {"service": "compute", "method": "terminate_servers"},
                    "id_param": "ServerIds",
                    "id_is_list": True,
                    "confirm": {"message": "Terminate?", "destructive": True},
                },
                {
                    "key": "reboot",
                    "display_name": "Reboot",
                    "shortcut": "b",
                    "operation": {"service": "compute", "method": "reboot_server"},
                    "id_param": "ServerId",
                    "record_params": {"Zone": "Zone"},
                },
            ],
        },
        {
            "key": "disks",
            "display_name": "Disks",
            "id_field": "DiskId",
            "name_field": "Name",
            "response_path": "Disks",
            "operation": {
                "service": "compute",
                "method": "list_disks",
                "params": {"Owner": ["self"]},
            },
            "columns": [
                {"header": "Name", "path": "Name"},
                {"header": "ID", "path": "DiskId"},
            ],
            "sub_resources": [
                {
                    "child_key": "snapshots",
                    "display_name": "Snapshots",
                    "shortcut": "n",
                    "parent_id_field": "DiskId",
                    "filter_param": "Filters.disk-id",
                },
            ],
        },
        {
            "key": "snapshots",
            "display_name": "Snapshots",
            "id_field": "SnapshotId",
            "name_field": "Name",
            "response_path": "Snapshots",
            "operation": {"service": "compute", "method": "list_snapshots"},
            "columns": [{"header": "ID", "path": "SnapshotId"}],
        },
        {
            "key": "users",
            "display_name": "Users",
            "is_global": True,
            "id_field": "UserName",
            "name_field": "UserName",
            "response_path": "Users",
            "operation": {"service": "identity", "method": "list_users"},
            "columns": [{"header": "User", "path": "UserName"}],
        },
    ],
    "color_maps": {
        "state": [
            {"value": "running", "color": [0, 255, 0]},
            {"value": "stopped", "color": [255, 0, 0]},
        ],
    },
}


SERVERS: list[dict[str, Any]] = [
    {"ServerId": "srv-1", "Name": "web-1", "State": "running", "Zone": "a"},
    {"ServerId": "srv-2", "Name": "web-2", "State": "stopped", "Zone": "b"},
    {"ServerId": "srv-3", "Name": "db-1", "State": "running", "Zone": "a"},
]


class FakeDispatcher:
    """Dispatcher returning canned responses keyed by method name."""

    def __init__(self, responses: Mapping[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.invocations: list[tuple[str, dict[str, Any], bool]] = []
        self.actions: list[tuple[str, str, dict[str, Any], bool]] = []
        self.fail_with: Exception | None = None
        self.action_error: Exception | None = None

    def invoke(self, operation: Any, params: Mapping[str, Any], is_global: bool = False) -> Any:
        self.invocations.append((operation.method, dict(params), is_global))
        if self.fail_with is not None:
            raise self.fail_with
        return self.responses.get(operation.method, {})

    def execute_action(
        self,
        action: Any,
        resource_id: str,
        record_params: Mapping[str, Any] | None = None,
        is_global: bool = False,
    ) -> Any:
        self.actions.append((action.key, resource_id, dict(record_params or {}), is_global))
        if self.action_error is not None:
            raise self.action_error
        return {}


class FakeSession:
    """Session provider recording profile and region switches."""

    def __init__(self, profile: str = "default", region: str = "us-east-1") -> None:
        self._profile = profile
        self._region = region
        self.fail_with: RemoteError | None = None

    @property
    def profile(self) -> str:
        return self._profile

    @property
    def region(self) -> str:
        return self._region

    def switch_profile(self, profile: str) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self._profile = profile
        return self._region

    def switch_region(self, region: str) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self._region = region
        return region


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def sample_catalog() -> Catalog:
    """Create a small catalog with a three-level hierarchy."""
    return Catalog.from_documents([("sample", parse_document(SAMPLE_DOCUMENT, "sample"))])


@pytest.fixture
def fake_dispatcher() -> FakeDispatcher:
    """Create a dispatcher serving the sample servers, disks and snapshots."""
    return FakeDispatcher(
        {
            "list_servers": {"Servers": [dict(s) for s in SERVERS]},
            "list_disks": {"Disks": [{"DiskId": "disk-1", "Name": "root"}]},
            "list_snapshots": {"Snapshots": [{"SnapshotId": "snap-1"}]},
            "list_users": {"Users": [{"UserName": "alice"}]},
        }
    )


@pytest.fixture
def fake_session() -> FakeSession:
    """Create a session provider in us-east-1."""
    return FakeSession()


@pytest.fixture
def fake_clock() -> FakeClock:
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture
def controller(
    sample_catalog: Catalog,
    fake_dispatcher: FakeDispatcher,
    fake_session: FakeSession,
    fake_clock: FakeClock,
) -> NavigationController:
    """Create a controller over the sample catalog, not yet fetched."""
    return NavigationController(
        sample_catalog,
        fake_dispatcher,
        fake_session,
        initial_resource="servers",
        page_size=2,
        scheduler=RefreshScheduler(5.0, clock=fake_clock),
        profiles_provider=lambda: ["default", "dev", "prod"],
        regions_provider=lambda: ["us-east-1", "us-west-2", "eu-west-1"],
    )


@pytest.fixture
def loaded_controller(controller: NavigationController) -> NavigationController:
    """Create a controller with the servers already fetched."""
    controller.refresh_current()
    return controller


# ============================================================================
# General fixtures
# ============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Reset environment variables and isolate AWS files for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("CRB_") or key in (
            "AWS_PROFILE",
            "AWS_REGION",
            "AWS_DEFAULT_REGION",
        ):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws-credentials"))
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws-config"))

    # Keep config and log files out of the real home directory
    config_file = tmp_path / "crb" / "config.yaml"
    monkeypatch.setattr(config_models, "CONFIG_FILE", config_file)
    monkeypatch.setattr(preferences, "CONFIG_FILE", config_file)
    monkeypatch.setattr(logging_config, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(logging_config, "LOG_FILE", tmp_path / "logs" / "crb.log")


@pytest.fixture
def capture_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Fixture to capture log output."""
    import logging

    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app
