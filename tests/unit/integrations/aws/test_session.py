"""Unit tests for AwsSession."""

from __future__ import annotations

import threading
import time
from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ProfileNotFound, UnknownServiceError

from cloud_resource_browser.integrations.aws.exceptions import RemoteAuthError, RemoteError
from cloud_resource_browser.integrations.aws.session import GLOBAL_REGION, AwsSession


@pytest.fixture
def session_factory() -> MagicMock:
    """Create a factory standing in for boto3.session.Session."""
    factory = MagicMock()
    factory.return_value.region_name = None
    return factory


class TestAwsSessionInit:
    """Tests for AwsSession construction."""

    @pytest.mark.unit
    def test_default_profile_left_implicit(self, session_factory: MagicMock) -> None:
        """The default profile is not passed to boto3."""
        session = AwsSession(region="eu-west-1", session_factory=session_factory)
        session_factory.assert_called_once_with(profile_name=None, region_name="eu-west-1")
        assert session.profile == "default"
        assert session.region == "eu-west-1"

    @pytest.mark.unit
    def test_named_profile(self, session_factory: MagicMock) -> None:
        """Named profiles are passed through."""
        AwsSession(profile="prod", region="us-east-1", session_factory=session_factory)
        session_factory.assert_called_once_with(profile_name="prod", region_name="us-east-1")

    @pytest.mark.unit
    def test_unknown_profile(self, session_factory: MagicMock) -> None:
        """A missing profile raises RemoteAuthError."""
        session_factory.side_effect = ProfileNotFound(profile="ghost")
        with pytest.raises(RemoteAuthError):
            AwsSession(profile="ghost", session_factory=session_factory)


class TestAwsSessionClients:
    """Tests for client creation and caching."""

    @pytest.mark.unit
    def test_client_cached(self, session_factory: MagicMock) -> None:
        """Clients are created once per service and region."""
        session = AwsSession(region="eu-west-1", session_factory=session_factory)
        first = session.client("ec2")
        second = session.client("ec2")
        assert first is second
        session_factory.return_value.client.assert_called_once_with(
            "ec2", region_name="eu-west-1"
        )

    @pytest.mark.unit
    def test_global_client_pinned(self, session_factory: MagicMock) -> None:
        """Global clients use the global region."""
        session = AwsSession(region="eu-west-1", session_factory=session_factory)
        session.client("iam", is_global=True)
        session_factory.return_value.client.assert_called_once_with(
            "iam", region_name=GLOBAL_REGION
        )

    @pytest.mark.unit
    def test_unknown_service(self, session_factory: MagicMock) -> None:
        """Unknown services raise RemoteError."""
        session_factory.return_value.client.side_effect = UnknownServiceError(
            service_name="nope", known_service_names="ec2"
        )
        session = AwsSession(session_factory=session_factory)
        with pytest.raises(RemoteError):
            session.client("nope")


class TestAwsSessionSwitching:
    """Tests for profile and region switching."""

    @pytest.mark.unit
    def test_switch_region(self, session_factory: MagicMock) -> None:
        """Switching region rebuilds the session and drops cached clients."""
        session = AwsSession(region="us-east-1", session_factory=session_factory)
        session.client("ec2")

        assert session.switch_region("eu-west-1") == "eu-west-1"
        session.client("ec2")

        assert session.region == "eu-west-1"
        assert session_factory.call_count == 2
        assert session_factory.return_value.client.call_count == 2

    @pytest.mark.unit
    def test_switch_profile_keeps_region(self, session_factory: MagicMock) -> None:
        """A profile without its own region keeps the current one."""
        session = AwsSession(region="eu-west-1", session_factory=session_factory)
        assert session.switch_profile("dev") == "eu-west-1"
        assert session.profile == "dev"
        session_factory.assert_called_with(profile_name="dev", region_name="eu-west-1")

    @pytest.mark.unit
    def test_switch_profile_resolves_region(self, session_factory: MagicMock) -> None:
        """The region resolved by the new session becomes active."""
        session = AwsSession(region="eu-west-1", session_factory=session_factory)
        session_factory.return_value.region_name = "ap-southeast-2"
        assert session.switch_profile("sydney") == "ap-southeast-2"
        assert session.region == "ap-southeast-2"

    @pytest.mark.unit
    def test_failed_switch_keeps_profile(self, session_factory: MagicMock) -> None:
        """A failed switch leaves the session untouched."""
        session = AwsSession(profile="dev", session_factory=session_factory)
        session_factory.side_effect = ProfileNotFound(profile="ghost")
        with pytest.raises(RemoteAuthError):
            session.switch_profile("ghost")
        assert session.profile == "dev"


class TestAwsSessionThreads:
    """Tests for sharing one session between worker threads."""

    @pytest.mark.unit
    def test_concurrent_clients_created_once(self, session_factory: MagicMock) -> None:
        """Workers asking for the same client at once share one boto3 call."""
        active = 0
        peak = 0
        counter = threading.Lock()

        def slow_client(service: str, region_name: str) -> Any:
            nonlocal active, peak
            with counter:
                active += 1
                peak = max(peak, active)
            time.sleep(0.01)
            with counter:
                active -= 1
            return MagicMock(name=f"{service}-{region_name}")

        session_factory.return_value.client.side_effect = slow_client
        session = AwsSession(session_factory=session_factory)
        barrier = threading.Barrier(8)
        results: list[Any] = []

        def worker() -> None:
            barrier.wait()
            results.append(session.client("ec2"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert peak == 1
        assert session_factory.return_value.client.call_count == 1
        assert len({id(client) for client in results}) == 1

    @pytest.mark.unit
    def test_client_and_switch_hold_lock(self, session_factory: MagicMock) -> None:
        """Client creation and session rebuilds happen under the session lock."""
        session = AwsSession(session_factory=session_factory)
        seen: list[bool] = []

        def record_client(service: str, region_name: str) -> MagicMock:
            seen.append(session._lock.locked())
            return MagicMock()

        def record_build(**kwargs: Any) -> MagicMock:
            seen.append(session._lock.locked())
            built = MagicMock()
            built.region_name = None
            built.client.side_effect = record_client
            return built

        session_factory.return_value.client.side_effect = record_client
        session_factory.side_effect = record_build

        session.client("ec2")
        session.switch_region("eu-west-1")
        session.switch_profile("prod")

        assert seen == [True, True, True]
        assert session._lock.locked() is False
