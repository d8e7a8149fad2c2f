"""boto3 session wrapper with per-region client caching.

Holds the active profile and region, hands out cached service clients,
and rebuilds itself when the profile or region changes.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError

from cloud_resource_browser.integrations.aws.exceptions import translate_client_error

logger = structlog.get_logger()

# Region used for services that are not regional (IAM, Route53, CloudFront, ...)
GLOBAL_REGION = "us-east-1"
DEFAULT_PROFILE = "default"


class AwsSession:
    """Active AWS credentials context.

    Wraps ``boto3.session.Session`` with:
    - Lazy, cached client creation per (service, region)
    - Pinning of global services to us-east-1
    - Profile and region switching
    - Consistent error translation
    - Serialized client creation and switching for worker threads

    Example:
        ```python
        session = AwsSession(profile="default", region="eu-west-1")
        ec2 = session.client("ec2")
        iam = session.client("iam", is_global=True)
        ```
    """

    def __init__(
        self,
        profile: str = DEFAULT_PROFILE,
        region: str = GLOBAL_REGION,
        session_factory: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            profile: Named profile from the shared AWS config files.
            region: Region for regional services.
            session_factory: Factory creating the underlying boto3 session.
                Defaults to ``boto3.session.Session``.

        Raises:
            RemoteAuthError: If the profile does not exist.
        """
        self._session_factory = session_factory or boto3.session.Session
        self._profile = profile
        self._region = region
        self._clients: dict[tuple[str, str], Any] = {}
        # boto3 sessions are not thread-safe; guards _session and _clients
        self._lock = threading.Lock()
        self._session = self._build_session(profile, region)

        logger.info("AWS session initialized", profile=profile, region=region)

    def _build_session(self, profile: str, region: str) -> Any:
        """Create the underlying boto3 session."""
        # The default profile is left implicit so environment credentials work
        profile_name = None if profile == DEFAULT_PROFILE else profile
        try:
            return self._session_factory(profile_name=profile_name, region_name=region)
        except BotoCoreError as e:
            raise translate_client_error(e) from e

    @property
    def profile(self) -> str:
        """Return the active profile name."""
        return self._profile

    @property
    def region(self) -> str:
        """Return the active region."""
        return self._region

    def client(self, service: str, is_global: bool = False) -> Any:
        """Return a cached client for ``service``.

        Args:
            service: boto3 service name (e.g. "ec2").
            is_global: Pin the client to the global region.

        Returns:
            A boto3 client.

        Raises:
            RemoteError: If boto3 does not know the service.
        """
        with self._lock:
            region = GLOBAL_REGION if is_global else self._region
            key = (service, region)
            client = self._clients.get(key)
            if client is None:
                try:
                    client = self._session.client(service, region_name=region)
                except BotoCoreError as e:
                    raise translate_client_error(e, service=service) from e
                self._clients[key] = client
                logger.debug("Created client", service=service, region=region)
            return client

    def switch_profile(self, profile: str) -> str:
        """Rebuild the session for another profile, keeping the region.

        Args:
            profile: Profile to switch to.

        Returns:
            The region the new session resolved.

        Raises:
            RemoteAuthError: If the profile does not exist.
        """
        with self._lock:
            session = self._build_session(profile, self._region)
            self._session = session
            self._profile = profile
            self._clients.clear()
            resolved = getattr(session, "region_name", None)
            if isinstance(resolved, str) and resolved:
                self._region = resolved
        logger.info("Switched profile", profile=profile, region=self._region)
        return self._region

    def switch_region(self, region: str) -> str:
        """Point regional clients at another region.

        Args:
            region: Region to switch to.

        Returns:
            The new active region.
        """
        with self._lock:
            self._session = self._build_session(self._profile, region)
            self._region = region
            self._clients.clear()
        logger.info("Switched region", profile=self._profile, region=region)
        return region
