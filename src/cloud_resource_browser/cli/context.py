"""Shared loading of configuration and catalog for CLI commands."""

from __future__ import annotations

import typer
from rich.console import Console

from cloud_resource_browser.catalog.catalog import Catalog
from cloud_resource_browser.catalog.exceptions import CatalogError
from cloud_resource_browser.catalog.loader import load_configured_catalog
from cloud_resource_browser.core.config.models import AppConfig, load_raw_config

console = Console()


def load_app_config() -> AppConfig:
    """Load the config file with environment overrides.

    Raises:
        typer.Exit: If the configuration is invalid.
    """
    try:
        return AppConfig.from_env(load_raw_config())
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1) from None


def load_catalog_or_exit(config: AppConfig) -> Catalog:
    """Load the catalog for ``config``.

    Raises:
        typer.Exit: If any descriptor document is malformed or collides.
    """
    try:
        return load_configured_catalog(config)
    except CatalogError as e:
        console.print(f"[red]Catalog error:[/red] {e}")
        raise typer.Exit(code=1) from None
