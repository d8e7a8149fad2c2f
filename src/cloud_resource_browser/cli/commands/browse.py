"""Launch the interactive resource browser."""

from __future__ import annotations

import structlog
import typer
from rich.console import Console

from cloud_resource_browser.cli.context import load_app_config, load_catalog_or_exit
from cloud_resource_browser.core.config.preferences import (
    PreferenceStore,
    effective_profile,
    effective_region,
)
from cloud_resource_browser.engine.controller import NavigationController
from cloud_resource_browser.engine.scheduler import RefreshScheduler
from cloud_resource_browser.integrations.aws.dispatcher import BotoDispatcher
from cloud_resource_browser.integrations.aws.exceptions import RemoteError, format_error
from cloud_resource_browser.integrations.aws.session import AwsSession
from cloud_resource_browser.logging.config import configure_logging

console = Console()
logger = structlog.get_logger()


def browse(
    ctx: typer.Context,
    profile: str | None = typer.Option(
        None,
        "--profile",
        "-p",
        help="Profile to start with (default: AWS_PROFILE, then the saved profile).",
    ),
    region: str | None = typer.Option(
        None,
        "--region",
        "-r",
        help="Region to start with (default: AWS_REGION, then the saved region).",
    ),
    resource: str | None = typer.Option(
        None,
        "--resource",
        help="Resource key to show first.",
    ),
    refresh_interval: float | None = typer.Option(
        None,
        "--refresh-interval",
        min=0.1,
        help="Seconds between automatic refreshes.",
    ),
) -> None:
    """Browse resources in the terminal.

    Examples:
        crb browse
        crb browse --profile prod --region eu-west-1
        crb browse --resource s3-buckets
    """
    options = ctx.obj or {}
    config = load_app_config()

    # The terminal belongs to the TUI from here on
    configure_logging(
        verbose=options.get("verbose", False),
        debug=options.get("debug", False),
        console=False,
        log_file=config.log_file_enabled,
    )

    catalog = load_catalog_or_exit(config)
    store = PreferenceStore()
    preferences = store.load()

    if resource is not None:
        if resource not in catalog:
            console.print(f"[red]Unknown resource:[/red] {resource}")
            raise typer.Exit(code=1)
        initial_resource = resource
    elif preferences.last_resource and preferences.last_resource in catalog:
        initial_resource = preferences.last_resource
    else:
        initial_resource = config.initial_resource

    try:
        session = AwsSession(
            profile=profile or effective_profile(preferences),
            region=region or effective_region(preferences),
        )
    except RemoteError as e:
        console.print(f"[red]{format_error(e)}[/red]")
        raise typer.Exit(code=1) from None

    controller = NavigationController(
        catalog,
        BotoDispatcher(session, retry_attempts=config.retry_attempts),
        session,
        initial_resource=initial_resource,
        preferences=store,
        page_size=config.page_size,
        scheduler=RefreshScheduler(refresh_interval or config.refresh_interval),
    )

    logger.info(
        "Starting browser",
        profile=session.profile,
        region=session.region,
        resource=initial_resource,
    )

    # Imported late so CLI-only commands do not load textual
    from cloud_resource_browser.tui.apps.browser import BrowserApp

    BrowserApp(controller, key_sequence_window_ms=config.key_sequence_window_ms).run()
