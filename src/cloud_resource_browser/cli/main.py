"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer
from rich.console import Console

from cloud_resource_browser import __version__
from cloud_resource_browser.cli.commands import accounts, browse, resources
from cloud_resource_browser.logging.config import configure_logging

app = typer.Typer(
    name="crb",
    help="Terminal browser for cloud resources.",
    add_completion=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"crb version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
) -> None:
    """Cloud Resource Browser - browse and act on cloud resources from the terminal."""
    ctx.obj = {"verbose": verbose, "debug": debug}
    configure_logging(verbose=verbose, debug=debug)


# Register subcommands
app.add_typer(resources.app, name="resources")
app.command()(browse.browse)
app.command()(accounts.profiles)
app.command()(accounts.regions)


if __name__ == "__main__":
    app()
