"""Generic boto3 dispatcher.

Invokes any client method named by an operation descriptor and returns
a JSON-like response, so no per-service code is needed to browse a new
resource type.
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from botocore.exceptions import BotoCoreError, ClientError
from botocore.response import StreamingBody
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cloud_resource_browser.integrations.aws.exceptions import (
    ExtractionError,
    RemoteConnectionError,
    RemoteError,
    translate_client_error,
)

if TYPE_CHECKING:
    from cloud_resource_browser.catalog.models import (
        ActionDescriptor,
        OperationDescriptor,
    )
    from cloud_resource_browser.integrations.aws.session import AwsSession

logger = structlog.get_logger()

# Parameter name prefix that maps onto EC2-style Filters=[{Name, Values}]
FILTER_PREFIX = "Filters."
TAG_LIST_KEYS = frozenset({"Tags", "TagList", "TagSet"})


class Dispatcher(Protocol):
    """Capability the navigation engine uses to talk to the backend."""

    def invoke(
        self,
        operation: OperationDescriptor,
        params: Mapping[str, Any],
        is_global: bool = False,
    ) -> Any:
        """Invoke a read operation and return the normalized raw response."""
        ...

    def execute_action(
        self,
        action: ActionDescriptor,
        resource_id: str,
        record_params: Mapping[str, Any] | None = None,
        is_global: bool = False,
    ) -> Any:
        """Invoke an action's write operation on one resource."""
        ...


# =============================================================================
# Response Normalization
# =============================================================================


def _tags_to_map(tags: list[Any]) -> dict[str, Any] | list[Any]:
    """Turn ``[{"Key": k, "Value": v}, ...]`` into ``{k: v}``."""
    if not all(isinstance(tag, dict) and "Key" in tag for tag in tags):
        return tags
    return {tag["Key"]: tag.get("Value") for tag in tags}


def normalize(value: Any) -> Any:
    """Convert a boto3 response into plain JSON-compatible data.

    Drops ``ResponseMetadata``, renders datetimes as ISO-8601 strings,
    decodes bytes, skips streaming bodies, and turns AWS tag lists into
    maps so ``Tags.Name`` style paths resolve.
    """
    if isinstance(value, dict):
        result: dict[str, Any] = {}
        for key, item in value.items():
            if key == "ResponseMetadata" or isinstance(item, StreamingBody):
                continue
            if key in TAG_LIST_KEYS and isinstance(item, list):
                result[key] = _tags_to_map([normalize(tag) for tag in item])
            else:
                result[key] = normalize(item)
        return result
    if isinstance(value, list | tuple):
        return [normalize(item) for item in value]
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(value).decode("ascii")
    return value


def _fill_missing_lists(value: Any, shape: Any) -> Any:
    """Insert empty lists for list members absent from a response.

    Several services omit empty list members entirely, which would make
    an empty collection look like a malformed response.
    """
    if shape is None or getattr(shape, "type_name", None) != "structure":
        return value
    if not isinstance(value, dict):
        return value
    for name, member in shape.members.items():
        member_type = getattr(member, "type_name", None)
        if name not in value and member_type == "list":
            value[name] = []
        elif name in value and member_type == "structure":
            _fill_missing_lists(value[name], member)
    return value


def convert_params(
    params: Mapping[str, Any],
    list_params: frozenset[str] | set[str] = frozenset(),
) -> dict[str, Any]:
    """Convert descriptor parameters into boto3 keyword arguments.

    ``Filters.<name>`` entries are gathered into an EC2-style ``Filters``
    list. Other single-element lists are unwrapped to scalars unless the
    parameter is declared in ``list_params``.

    Args:
        params: Merged default and filter parameters.
        list_params: Parameters that must remain lists.

    Returns:
        Keyword arguments for the client method.
    """
    api_params: dict[str, Any] = {}
    filters: list[dict[str, Any]] = []
    for name, value in params.items():
        if name.startswith(FILTER_PREFIX):
            values = value if isinstance(value, list) else [value]
            filters.append({"Name": name[len(FILTER_PREFIX) :], "Values": [str(v) for v in values]})
        elif isinstance(value, list) and len(value) == 1 and name not in list_params:
            api_params[name] = value[0]
        else:
            api_params[name] = value
    if filters:
        api_params["Filters"] = [*api_params.get("Filters", []), *filters]
    return api_params


# =============================================================================
# Record Projection
# =============================================================================


def project_records(raw: Any, response_path: str) -> list[Any]:
    """Locate the record list inside a raw response.

    Each dot segment selects a key. A segment applied to a list selects
    the key from every element and flattens the results, so
    ``"Reservations.Instances"`` yields every instance of every reservation.
    Scalar elements are wrapped as ``{"Value": element}``.

    Args:
        raw: Normalized response.
        response_path: Dot-path to the record list. Empty means ``raw`` itself.

    Returns:
        The records.

    Raises:
        ExtractionError: If the path is missing or does not end on a list.
    """
    current = raw
    for segment in [part for part in response_path.split(".") if part]:
        if isinstance(current, dict):
            if segment not in current:
                raise ExtractionError(
                    f"Path '{response_path}' not found in response", response_path
                )
            current = current[segment]
        elif isinstance(current, list):
            flattened: list[Any] = []
            for element in current:
                child = element.get(segment) if isinstance(element, dict) else None
                if isinstance(child, list):
                    flattened.extend(child)
                elif child is not None:
                    flattened.append(child)
            current = flattened
        else:
            raise ExtractionError(
                f"Path '{response_path}' not found in response", response_path
            )

    if not isinstance(current, list):
        raise ExtractionError(
            f"Expected array at path '{response_path}', got {type(current).__name__}",
            response_path,
        )
    return [item if isinstance(item, dict) else {"Value": item} for item in current]


# =============================================================================
# Dispatcher
# =============================================================================


class BotoDispatcher:
    """Dispatcher backed by boto3 clients from an AwsSession.

    Example:
        ```python
        dispatcher = BotoDispatcher(AwsSession(region="eu-west-1"))
        raw = dispatcher.invoke(descriptor.operation, {})
        records = project_records(raw, descriptor.response_path)
        ```
    """

    def __init__(self, session: AwsSession, retry_attempts: int = 2) -> None:
        """Initialize the dispatcher.

        Args:
            session: Session providing service clients.
            retry_attempts: Extra attempts for transient connection errors.
        """
        self._session = session
        self._retries = retry_attempts + 1

    @property
    def session(self) -> AwsSession:
        """Return the underlying session."""
        return self._session

    def make_retry_decorator(self) -> Any:
        """Create a retry decorator for transient connection errors.

        Returns:
            A tenacity retry decorator configured with exponential backoff.
        """
        return retry(
            retry=retry_if_exception_type(RemoteConnectionError),
            stop=stop_after_attempt(self._retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )

    def _call(
        self,
        service: str,
        method: str,
        api_params: Mapping[str, Any],
        is_global: bool,
    ) -> Any:
        """Call one client method with retry and error translation."""
        client = self._session.client(service, is_global=is_global)
        func = getattr(client, method, None)
        if func is None or not callable(func):
            raise RemoteError(
                f"Unknown operation {service}.{method}", service=service, operation=method
            )

        @self.make_retry_decorator()
        def _invoke() -> Any:
            try:
                return func(**api_params)
            except (ClientError, BotoCoreError) as e:
                raise translate_client_error(e, service=service, operation=method) from e

        logger.debug("Invoking", service=service, method=method, params=sorted(api_params))
        response = _invoke()
        if isinstance(response, dict):
            response = _fill_missing_lists(response, self._output_shape(client, method))
        return normalize(response)

    @staticmethod
    def _output_shape(client: Any, method: str) -> Any:
        """Return the botocore output shape for a client method, if known."""
        meta = getattr(client, "meta", None)
        mapping = getattr(meta, "method_to_api_mapping", None)
        if not isinstance(mapping, dict) or method not in mapping:
            return None
        try:
            return meta.service_model.operation_model(mapping[method]).output_shape
        except BotoCoreError:
            return None

    def invoke(
        self,
        operation: OperationDescriptor,
        params: Mapping[str, Any],
        is_global: bool = False,
    ) -> Any:
        """Invoke a read operation.

        When the operation declares a detail call, identifiers from the
        list response are expanded with batched describe calls and the
        records are returned under the detail's ``items_key``. Operations
        answering with a single record declare ``wrap_as`` and get it back
        as a one-element list under that key.

        Args:
            operation: Operation descriptor.
            params: Merged default and filter parameters.
            is_global: Use the global region client.

        Returns:
            The normalized response.

        Raises:
            RemoteError: On any failed call.
        """
        api_params = convert_params(params, set(operation.list_params))
        response = self._call(operation.service, operation.method, api_params, is_global)
        if operation.wrap_as is not None:
            return {operation.wrap_as: [response]}

        detail = operation.detail
        if detail is None:
            return response

        ids = response.get(detail.ids_path, []) if isinstance(response, dict) else []
        carried = {name: api_params[name] for name in detail.carry_params if name in api_params}
        records: list[Any] = []
        for start in range(0, len(ids), detail.batch_size):
            batch = ids[start : start + detail.batch_size]
            detail_response = self._call(
                operation.service,
                detail.method,
                {**carried, detail.ids_param: batch},
                is_global,
            )
            if isinstance(detail_response, dict):
                records.extend(detail_response.get(detail.items_key, []))
        return {detail.items_key: records}

    def execute_action(
        self,
        action: ActionDescriptor,
        resource_id: str,
        record_params: Mapping[str, Any] | None = None,
        is_global: bool = False,
    ) -> Any:
        """Invoke an action's write operation on one resource.

        Args:
            action: Action descriptor.
            resource_id: Identifier of the selected record.
            record_params: Additional values read from the selected record.
            is_global: Use the global region client.

        Returns:
            The normalized response.

        Raises:
            RemoteError: On a failed call.
        """
        operation = action.operation
        api_params: dict[str, Any] = dict(operation.params)
        api_params.update(record_params or {})
        api_params[action.id_param] = [resource_id] if action.id_is_list else resource_id
        logger.info(
            "Executing action",
            action=action.key,
            service=operation.service,
            method=operation.method,
            resource_id=resource_id,
        )
        return self._call(operation.service, operation.method, api_params, is_global)
