"""Inspect the resource catalog."""

from __future__ import annotations

import structlog
import typer
import yaml
from rich.console import Console

from cloud_resource_browser.cli.context import load_app_config, load_catalog_or_exit
from cloud_resource_browser.cli.output import Table, descriptor_table
from cloud_resource_browser.core.plugins import PluginManager

app = typer.Typer(help="Inspect the resource catalog.")
console = Console()
logger = structlog.get_logger()


@app.command("list")
def list_resources(
    service: str | None = typer.Option(
        None,
        "--service",
        "-s",
        help="Only show resources of this service.",
    ),
) -> None:
    """List every browsable resource."""
    catalog = load_catalog_or_exit(load_app_config())
    descriptors = [
        d for d in catalog.descriptors() if service is None or d.service == service
    ]
    if not descriptors:
        console.print(f"[yellow]No resources for service '{service}'[/yellow]")
        raise typer.Exit(code=1)
    console.print(descriptor_table(descriptors, title=f"Resources ({len(descriptors)})"))


@app.command("show")
def show_resource(
    key: str = typer.Argument(..., help="Resource key, e.g. ec2-instances."),
) -> None:
    """Print one resource descriptor as YAML."""
    catalog = load_catalog_or_exit(load_app_config())
    descriptor = catalog.lookup(key)
    if descriptor is None:
        console.print(f"[red]Unknown resource:[/red] {key}")
        raise typer.Exit(code=1)
    data = descriptor.model_dump(mode="json", exclude_defaults=True)
    console.print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), markup=False)


@app.command("validate")
def validate_resources() -> None:
    """Check that sub-resource links and color maps resolve."""
    catalog = load_catalog_or_exit(load_app_config())
    links = catalog.unresolved_links()
    color_maps = catalog.unresolved_color_maps()

    for parent, child in links:
        console.print(f"[red]Unresolved sub-resource[/red] {parent} -> {child}")
    for resource, color_map in color_maps:
        console.print(f"[red]Unknown color map[/red] {color_map} (in {resource})")

    if links or color_maps:
        logger.warning(
            "Catalog validation failed", links=len(links), color_maps=len(color_maps)
        )
        raise typer.Exit(code=1)
    console.print(f"[green]Catalog OK:[/green] {len(catalog)} resources")


@app.command("plugins")
def list_plugins() -> None:
    """List the catalog plugins selected by configuration."""
    config = load_app_config()
    manager = PluginManager()
    manager.load_configured(config.plugins)
    manager.initialize_all(config.plugins.settings)
    try:
        plugins = manager.list_plugins()
        documents = manager.catalog_documents()
    finally:
        manager.cleanup_all()

    if not plugins:
        console.print("[dim]No catalog plugins loaded[/dim]")
        return

    table = Table(title=f"Plugins ({len(plugins)})")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Version")
    table.add_column("Description")
    for plugin in plugins:
        table.add_row(plugin["name"], plugin["version"], plugin["description"])
    console.print(table)
    console.print(f"{len(documents)} catalog documents")
