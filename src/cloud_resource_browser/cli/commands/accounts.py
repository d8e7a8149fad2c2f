"""List the profiles and regions the browser can switch between."""

from __future__ import annotations

from rich.console import Console

from cloud_resource_browser.cli.output import Table
from cloud_resource_browser.core.config.preferences import (
    PreferenceStore,
    effective_profile,
    effective_region,
)
from cloud_resource_browser.integrations.aws.profiles import (
    REGION_SHORTCUTS,
    list_profiles,
    list_regions,
)

console = Console()


def profiles() -> None:
    """List configured profiles, marking the active one."""
    active = effective_profile(PreferenceStore().load())
    table = Table(title="Profiles")
    table.add_column("", width=1)
    table.add_column("Profile", style="cyan")
    for name in list_profiles():
        table.add_row("*" if name == active else "", name)
    console.print(table)


def regions() -> None:
    """List selectable regions, marking the active one."""
    active = effective_region(PreferenceStore().load())
    shortcuts = {region: key for key, region in REGION_SHORTCUTS.items()}
    table = Table(title="Regions")
    table.add_column("", width=1)
    table.add_column("Region", style="cyan")
    table.add_column("Key", justify="center", style="dim")
    for name in list_regions():
        table.add_row("*" if name == active else "", name, shortcuts.get(name, ""))
    console.print(table)
