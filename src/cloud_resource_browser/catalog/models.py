"""Declarative resource descriptor models.

Descriptors describe how a resource collection is fetched, displayed,
filtered, linked to child collections and acted upon. They are loaded
from YAML documents and are immutable once the catalog is built.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DetailCall(BaseModel):
    """Follow-up call that expands identifiers returned by a list call.

    Some services only list identifiers and need a second "describe" call
    for the full records. The identifiers found at ``ids_path`` in the list
    response are passed as ``ids_param`` to ``method`` in batches, and the
    records under ``items_key`` of each batch response are concatenated.

    Attributes:
        method: Describe method on the same service.
        ids_path: Key of the identifier list in the list response.
        ids_param: Parameter of the describe method receiving identifiers.
        items_key: Key of the record list in the describe response.
        carry_params: List-call parameters also passed to the describe call.
        batch_size: Maximum identifiers per describe call.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    method: str
    ids_path: str
    ids_param: str
    items_key: str
    carry_params: list[str] = Field(default_factory=list)
    batch_size: int = 100

    @field_validator("batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        """Validate batch_size is positive."""
        if v <= 0:
            raise ValueError("batch_size must be positive")
        return v


class OperationDescriptor(BaseModel):
    """A remote call identifier: service, method and default parameters.

    Attributes:
        service: Backend service name (e.g. "ec2").
        method: Operation name on that service (e.g. "describe_instances").
        params: Default parameters passed on every invocation.
        list_params: Parameters that must stay lists even with one value.
        detail: Optional follow-up call expanding listed identifiers.
        wrap_as: Key under which a single-record response is returned as
            a one-element list.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    service: str
    method: str
    params: dict[str, Any] = Field(default_factory=dict)
    list_params: list[str] = Field(default_factory=list)
    detail: DetailCall | None = None
    wrap_as: str | None = None

    @field_validator("service", "method")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate service and method are non-empty."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class ColumnDescriptor(BaseModel):
    """A table column: header text, value path and display width."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    header: str
    path: str
    width: int = 20
    color_map: str | None = None

    @field_validator("width")
    @classmethod
    def validate_width(cls, v: int) -> int:
        """Validate width is positive."""
        if v <= 0:
            raise ValueError("width must be positive")
        return v


class SubResourceLink(BaseModel):
    """Link from a parent resource to a child collection.

    The child is fetched with ``filter_param`` set to the value found at
    ``parent_id_field`` in the selected parent record.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    child_key: str
    display_name: str
    shortcut: str | None = None
    parent_id_field: str
    filter_param: str

    @field_validator("shortcut")
    @classmethod
    def validate_shortcut(cls, v: str | None) -> str | None:
        """Validate shortcut is a single character."""
        if v is not None and len(v) != 1:
            raise ValueError("shortcut must be a single character")
        return v


class ConfirmPolicy(BaseModel):
    """Confirmation prompt shown before an action runs."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    message: str
    default_yes: bool = False
    destructive: bool = False


class ActionDescriptor(BaseModel):
    """A state-changing operation that can be run on the selected record.

    Attributes:
        key: Action identifier, unique within its resource.
        display_name: Label shown to the user.
        operation: Remote write call.
        shortcut: Optional key binding in the list view.
        id_param: Parameter name that receives the selected record's id.
        id_is_list: Pass the id wrapped in a one-element list.
        record_params: Extra parameters read from the selected record,
            as parameter name to value path.
        confirm: Confirmation policy. None executes immediately.
        needs_confirm: Shorthand for a generic confirmation prompt.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    display_name: str
    operation: OperationDescriptor
    shortcut: str | None = None
    id_param: str
    id_is_list: bool = False
    record_params: dict[str, str] = Field(default_factory=dict)
    confirm: ConfirmPolicy | None = None
    needs_confirm: bool = False

    @property
    def confirm_policy(self) -> ConfirmPolicy | None:
        """Return the effective confirmation policy, if any."""
        if self.confirm is not None:
            return self.confirm
        if self.needs_confirm:
            return ConfirmPolicy(message=f"{self.display_name}?")
        return None


class ResourceDescriptor(BaseModel):
    """Everything needed to browse one resource collection."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    display_name: str
    is_global: bool = False
    id_field: str
    name_field: str
    columns: list[ColumnDescriptor] = Field(min_length=1)
    response_path: str
    operation: OperationDescriptor
    sub_resources: list[SubResourceLink] = Field(default_factory=list)
    actions: list[ActionDescriptor] = Field(default_factory=list)

    @field_validator("key", "id_field", "name_field")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate identifying fields are non-empty."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @property
    def service(self) -> str:
        """Return the backend service this resource is fetched from."""
        return self.operation.service

    def sub_resource(self, child_key: str) -> SubResourceLink | None:
        """Return the link to ``child_key`` if declared."""
        for link in self.sub_resources:
            if link.child_key == child_key:
                return link
        return None

    def action(self, key: str) -> ActionDescriptor | None:
        """Return the action named ``key`` if declared."""
        for action in self.actions:
            if action.key == key:
                return action
        return None


class ColorRule(BaseModel):
    """Maps a display value to an RGB color."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: str
    color: tuple[int, int, int]

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: tuple[int, int, int]) -> tuple[int, int, int]:
        """Validate each channel is within 0-255."""
        if any(channel < 0 or channel > 255 for channel in v):
            raise ValueError("color channels must be between 0 and 255")
        return v


class CatalogDocument(BaseModel):
    """One descriptor document as authored on disk."""

    model_config = ConfigDict(extra="forbid")

    resources: list[ResourceDescriptor] = Field(default_factory=list)
    color_maps: dict[str, list[ColorRule]] = Field(default_factory=dict)
