"""CLI output utilities.

Usage:
    from cloud_resource_browser.cli.output import Table

    table = Table(title="Regions")
    table.add_column("Region", style="cyan")
    table.add_row("eu-west-1")
    console.print(table)
"""

from cloud_resource_browser.cli.output.table import Table, descriptor_table

__all__ = ["Table", "descriptor_table"]
