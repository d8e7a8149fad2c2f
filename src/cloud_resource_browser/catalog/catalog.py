"""Read-only resource catalog assembled from descriptor documents."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

import structlog

from cloud_resource_browser.catalog.exceptions import (
    CatalogError,
    DuplicateResourceError,
    UnknownResourceError,
)
from cloud_resource_browser.catalog.models import (
    CatalogDocument,
    ColorRule,
    ResourceDescriptor,
)

logger = structlog.get_logger()

RGB = tuple[int, int, int]


class Catalog:
    """Immutable mapping from resource key to descriptor plus color maps.

    Built once at startup and passed explicitly to the components that
    need it, so tests can construct small synthetic catalogs.

    Example:
        ```python
        catalog = Catalog.from_documents([("inline", CatalogDocument(resources=[...]))])
        descriptor = catalog.lookup("ec2-instances")
        ```
    """

    def __init__(
        self,
        resources: Mapping[str, ResourceDescriptor],
        color_maps: Mapping[str, list[ColorRule]] | None = None,
    ) -> None:
        """Initialize the catalog.

        Args:
            resources: Descriptors keyed by resource key.
            color_maps: Named value to color rules.
        """
        self._resources = MappingProxyType(dict(resources))
        self._color_maps: Mapping[str, dict[str, RGB]] = MappingProxyType(
            {
                name: {rule.value: rule.color for rule in rules}
                for name, rules in (color_maps or {}).items()
            }
        )

    @classmethod
    def from_documents(cls, documents: Iterable[tuple[str, CatalogDocument]]) -> Catalog:
        """Merge documents into one catalog.

        Args:
            documents: ``(source, document)`` pairs in merge order.

        Returns:
            The merged catalog.

        Raises:
            DuplicateResourceError: If a resource key is declared twice.
            CatalogError: If a color map name is declared twice.
        """
        resources: dict[str, ResourceDescriptor] = {}
        resource_sources: dict[str, str] = {}
        color_maps: dict[str, list[ColorRule]] = {}
        color_sources: dict[str, str] = {}

        for source, document in documents:
            for descriptor in document.resources:
                if descriptor.key in resources:
                    raise DuplicateResourceError(
                        descriptor.key,
                        source=source,
                        first_source=resource_sources[descriptor.key],
                    )
                resources[descriptor.key] = descriptor
                resource_sources[descriptor.key] = source

            for name, rules in document.color_maps.items():
                if name in color_maps:
                    raise CatalogError(
                        f"Duplicate color map '{name}' (first declared in {color_sources[name]})",
                        source=source,
                    )
                color_maps[name] = rules
                color_sources[name] = source

        logger.debug(
            "Catalog assembled",
            resources=len(resources),
            color_maps=len(color_maps),
        )
        return cls(resources, color_maps)

    def lookup(self, key: str) -> ResourceDescriptor | None:
        """Return the descriptor for ``key``, or None."""
        return self._resources.get(key)

    def get(self, key: str) -> ResourceDescriptor:
        """Return the descriptor for ``key``.

        Raises:
            UnknownResourceError: If ``key`` is not in the catalog.
        """
        descriptor = self._resources.get(key)
        if descriptor is None:
            raise UnknownResourceError(key)
        return descriptor

    def all_keys(self) -> list[str]:
        """Return all resource keys, sorted."""
        return sorted(self._resources)

    def descriptors(self) -> list[ResourceDescriptor]:
        """Return all descriptors ordered by key."""
        return [self._resources[key] for key in self.all_keys()]

    def color_for(self, map_name: str, value: str) -> RGB | None:
        """Return the color for ``value`` in color map ``map_name``."""
        rules = self._color_maps.get(map_name)
        if rules is None:
            return None
        return rules.get(value)

    def unresolved_links(self) -> list[tuple[str, str]]:
        """Return ``(parent_key, child_key)`` pairs whose child is missing."""
        return [
            (descriptor.key, link.child_key)
            for descriptor in self.descriptors()
            for link in descriptor.sub_resources
            if link.child_key not in self._resources
        ]

    def unresolved_color_maps(self) -> list[tuple[str, str]]:
        """Return ``(resource_key, color_map)`` pairs naming an undeclared map."""
        return [
            (descriptor.key, column.color_map)
            for descriptor in self.descriptors()
            for column in descriptor.columns
            if column.color_map and column.color_map not in self._color_maps
        ]

    def __contains__(self, key: object) -> bool:
        return key in self._resources

    def __iter__(self) -> Iterator[str]:
        return iter(self.all_keys())

    def __len__(self) -> int:
        return len(self._resources)
