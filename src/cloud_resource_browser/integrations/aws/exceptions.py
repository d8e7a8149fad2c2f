"""AWS integration custom exceptions and error message normalization."""

from __future__ import annotations

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
    ProfileNotFound,
    ReadTimeoutError,
)

# ClientError codes that mean the caller's credentials are unusable
AUTH_ERROR_CODES = frozenset({
    "AuthFailure",
    "ExpiredToken",
    "ExpiredTokenException",
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
    "UnrecognizedClientException",
})

# Substrings of ClientError codes that mean the call was not permitted
ACCESS_DENIED_MARKERS = ("AccessDenied", "UnauthorizedOperation", "UnauthorizedAccess")

MAX_MESSAGE_LENGTH = 60


class RemoteError(Exception):
    """Base exception for remote AWS calls.

    Attributes:
        message: Human-readable error message.
        service: Service the call was made against.
        operation: Operation (client method) that failed.
        code: AWS error code, when the service returned one.
    """

    def __init__(
        self,
        message: str,
        service: str | None = None,
        operation: str | None = None,
        code: str | None = None,
    ) -> None:
        """Initialize RemoteError.

        Args:
            message: Human-readable error message.
            service: Service the call was made against.
            operation: Operation that failed.
            code: AWS error code.
        """
        super().__init__(message)
        self.message = message
        self.service = service
        self.operation = operation
        self.code = code

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.code and not self.message.startswith(self.code):
            return f"{self.code}: {self.message}"
        return self.message


class RemoteConnectionError(RemoteError):
    """Exception raised when the service endpoint cannot be reached.

    These are the only remote errors retried automatically.
    """

    def __init__(
        self,
        message: str = "Could not connect to the endpoint",
        original_error: Exception | None = None,
        service: str | None = None,
        operation: str | None = None,
    ) -> None:
        """Initialize RemoteConnectionError.

        Args:
            message: Human-readable error message.
            original_error: The original exception that caused this error.
            service: Service the call was made against.
            operation: Operation that failed.
        """
        super().__init__(message=message, service=service, operation=operation)
        self.original_error = original_error


class RemoteAuthError(RemoteError):
    """Exception raised when credentials are missing, invalid or expired."""


class RemoteAccessDeniedError(RemoteError):
    """Exception raised when the credentials lack permission for the call."""


class RemoteTimeoutError(RemoteError):
    """Exception raised when a call times out."""


class ExtractionError(RemoteError):
    """Exception raised when a response does not contain a record list.

    Attributes:
        response_path: The path that failed to resolve to a list.
    """

    def __init__(self, message: str, response_path: str) -> None:
        """Initialize ExtractionError.

        Args:
            message: Human-readable error message.
            response_path: The dot-path that was being projected.
        """
        super().__init__(message=message)
        self.response_path = response_path


def translate_client_error(
    e: Exception,
    service: str | None = None,
    operation: str | None = None,
) -> RemoteError:
    """Translate a botocore exception to a RemoteError subclass.

    Args:
        e: The original exception.
        service: Service the call was made against.
        operation: Operation that failed.

    Returns:
        An appropriate RemoteError subclass.
    """
    if isinstance(e, RemoteError):
        return e

    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        code = str(error.get("Code", "Unknown"))
        message = str(error.get("Message", "")) or str(e)
        if code in AUTH_ERROR_CODES:
            return RemoteAuthError(message, service=service, operation=operation, code=code)
        if any(marker in code for marker in ACCESS_DENIED_MARKERS):
            return RemoteAccessDeniedError(
                message, service=service, operation=operation, code=code
            )
        return RemoteError(message, service=service, operation=operation, code=code)

    if isinstance(e, ConnectTimeoutError | ReadTimeoutError):
        return RemoteTimeoutError(str(e), service=service, operation=operation)

    if isinstance(e, EndpointConnectionError | ConnectionClosedError):
        return RemoteConnectionError(
            str(e), original_error=e, service=service, operation=operation
        )

    if isinstance(e, NoCredentialsError | PartialCredentialsError | ProfileNotFound):
        return RemoteAuthError(str(e), service=service, operation=operation)

    if isinstance(e, NoRegionError):
        return RemoteError(str(e), service=service, operation=operation)

    if isinstance(e, BotoCoreError):
        return RemoteError(str(e), service=service, operation=operation)

    return RemoteError(str(e) or type(e).__name__, service=service, operation=operation)


def format_error(error: Exception | str) -> str:
    """Normalize an error into a short message for the status line.

    Args:
        error: Exception or raw message.

    Returns:
        A known category message, or the message truncated to 60 characters.
    """
    text = str(error)

    if "dispatch failure" in text or "Could not connect" in text:
        return "Connection failed - check internet/credentials"
    if "InvalidClientTokenId" in text or "SignatureDoesNotMatch" in text:
        return "Invalid credentials - run 'aws configure'"
    if "ExpiredToken" in text:
        return "Credentials expired - refresh or reconfigure"
    if any(marker in text for marker in ACCESS_DENIED_MARKERS):
        return "Access denied - check IAM permissions"
    if (
        "NoCredentialProviders" in text
        or "Unable to locate credentials" in text
        or "no credentials" in text
    ):
        return "No credentials - run 'aws configure'"
    if "timeout" in text or "Timeout" in text or "timed out" in text:
        return "Request timed out - check connection"
    if "region" in text:
        return "Region error - check AWS_REGION"

    if len(text) > MAX_MESSAGE_LENGTH:
        return f"{text[:MAX_MESSAGE_LENGTH]}..."
    return text
