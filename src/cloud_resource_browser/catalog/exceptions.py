"""Resource catalog custom exceptions."""

from __future__ import annotations


class CatalogError(Exception):
    """Base exception for catalog loading failures.

    Raised only while the catalog is being assembled at startup. A catalog
    that fails to load cannot be used, so callers treat this as fatal.

    Attributes:
        message: Human-readable error message.
        source: Document the error originated from (if known).
        resource_key: Resource key involved (if known).
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        resource_key: str | None = None,
    ) -> None:
        """Initialize CatalogError.

        Args:
            message: Human-readable error message.
            source: Document path or name the error originated from.
            resource_key: Resource key involved.
        """
        super().__init__(message)
        self.message = message
        self.source = source
        self.resource_key = resource_key

    def __str__(self) -> str:
        """Return string representation of the error."""
        parts = [self.message]
        if self.resource_key:
            parts.append(f"[resource: {self.resource_key}]")
        if self.source:
            parts.append(f"(in {self.source})")
        return " ".join(parts)


class DuplicateResourceError(CatalogError):
    """Exception raised when two documents declare the same resource key."""

    def __init__(
        self,
        resource_key: str,
        source: str | None = None,
        first_source: str | None = None,
    ) -> None:
        """Initialize DuplicateResourceError.

        Args:
            resource_key: The colliding resource key.
            source: Document that declared the key a second time.
            first_source: Document that declared the key first.
        """
        message = "Duplicate resource key"
        if first_source:
            message += f" (first declared in {first_source})"
        super().__init__(message=message, source=source, resource_key=resource_key)
        self.first_source = first_source


class UnknownResourceError(Exception):
    """Exception raised when a resource key does not resolve in the catalog.

    Unlike CatalogError this is a soft failure: the controller surfaces it
    as a status message and stays usable.
    """

    def __init__(self, resource_key: str) -> None:
        """Initialize UnknownResourceError.

        Args:
            resource_key: The key that failed to resolve.
        """
        super().__init__(f"Unknown resource: {resource_key}")
        self.resource_key = resource_key
