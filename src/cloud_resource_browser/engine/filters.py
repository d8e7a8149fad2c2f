"""Derive fetch filters from the navigation context."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from cloud_resource_browser.catalog.values import MISSING, extract

if TYPE_CHECKING:
    from cloud_resource_browser.catalog.catalog import Catalog
    from cloud_resource_browser.engine.state import ViewState


@dataclass(frozen=True)
class ResourceFilter:
    """A named parameter restricting a fetch to a parent's children."""

    name: str
    values: tuple[str, ...]


def build_filters(state: ViewState, catalog: Catalog) -> list[ResourceFilter]:
    """Build the filters for fetching the current resource.

    The parent's descriptor is searched for the sub-resource link to the
    current resource; the link's ``parent_id_field`` is read from the
    parent record and passed under ``filter_param``.

    Args:
        state: Current view state.
        catalog: Resource catalog.

    Returns:
        At most one filter. Empty at the top level, when the parent does
        not link to the current resource, or when the join value is missing.
    """
    parent = state.current_parent
    if parent is None:
        return []

    parent_descriptor = catalog.lookup(parent.resource_key)
    if parent_descriptor is None:
        return []

    link = parent_descriptor.sub_resource(state.current_resource_key)
    if link is None:
        return []

    value = extract(parent.record, link.parent_id_field)
    if value == MISSING:
        return []
    return [ResourceFilter(name=link.filter_param, values=(value,))]


def merge_params(
    defaults: Mapping[str, Any],
    filters: Iterable[ResourceFilter],
) -> dict[str, Any]:
    """Merge descriptor default parameters with filter values.

    A filter replaces a default of the same name.
    """
    params = dict(defaults)
    for resource_filter in filters:
        params[resource_filter.name] = list(resource_filter.values)
    return params
