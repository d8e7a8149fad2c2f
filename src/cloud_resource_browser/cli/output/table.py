"""Table output for CLI commands.

Wraps Rich's Table so long values (ARNs, parameter lists) wrap instead of
being cut off, and builds the descriptor listing shown by
``crb resources list``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from rich.table import Table as RichTable

if TYPE_CHECKING:
    from cloud_resource_browser.catalog.models import ResourceDescriptor


class Table(RichTable):
    """Rich Table whose columns fold overflowing text by default.

    Usage:
        from cloud_resource_browser.cli.output import Table

        table = Table(title="Profiles")
        table.add_column("Profile")
        table.add_row("default")
    """

    def add_column(self, *args: Any, overflow: Any = "fold", **kwargs: Any) -> None:
        """Add a column with overflow="fold" unless overridden."""
        super().add_column(*args, overflow=overflow, **kwargs)


def descriptor_table(
    descriptors: Iterable[ResourceDescriptor],
    title: str = "Resources",
) -> Table:
    """Build a table summarizing resource descriptors.

    Args:
        descriptors: Descriptors to list.
        title: Table title.

    Returns:
        A table with one row per descriptor.
    """
    table = Table(title=title)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Service", style="magenta")
    table.add_column("Method", style="dim")
    table.add_column("Global", justify="center")
    table.add_column("Sub-resources")
    table.add_column("Actions")

    for descriptor in descriptors:
        table.add_row(
            descriptor.key,
            descriptor.display_name,
            descriptor.service,
            descriptor.operation.method,
            "yes" if descriptor.is_global else "",
            ", ".join(link.child_key for link in descriptor.sub_resources),
            ", ".join(action.key for action in descriptor.actions),
        )
    return table
