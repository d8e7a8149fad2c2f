"""AWS integration - session, dispatcher, providers and error handling."""

from cloud_resource_browser.integrations.aws.dispatcher import (
    BotoDispatcher,
    Dispatcher,
    project_records,
)
from cloud_resource_browser.integrations.aws.exceptions import (
    ExtractionError,
    RemoteAccessDeniedError,
    RemoteAuthError,
    RemoteConnectionError,
    RemoteError,
    RemoteTimeoutError,
    format_error,
    translate_client_error,
)
from cloud_resource_browser.integrations.aws.profiles import (
    REGION_SHORTCUTS,
    list_profiles,
    list_regions,
)
from cloud_resource_browser.integrations.aws.session import GLOBAL_REGION, AwsSession

__all__ = [
    "GLOBAL_REGION",
    "REGION_SHORTCUTS",
    "AwsSession",
    "BotoDispatcher",
    "Dispatcher",
    "ExtractionError",
    "RemoteAccessDeniedError",
    "RemoteAuthError",
    "RemoteConnectionError",
    "RemoteError",
    "RemoteTimeoutError",
    "format_error",
    "list_profiles",
    "list_regions",
    "project_records",
    "translate_client_error",
]
