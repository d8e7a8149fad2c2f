"""Theme constants and style utilities for TUI components.

Usage:
    from cloud_resource_browser.tui.theme import Colors, Styles

    header = f"Region: {Styles.color('eu-west-1', Colors.REGION)}"
    cell = Styles.rgb("running", (0, 200, 0))
"""

from __future__ import annotations

from rich.markup import escape
from rich.text import Text


class Colors:
    """Hex colors for Rich markup in the header and status line."""

    PROFILE = "#f59e0b"
    REGION = "#22d3ee"
    BREADCRUMB = "#a78bfa"
    LOADING = "#eab308"
    STATUS_ERROR = "#ef4444"
    STATUS_OK = "#22c55e"


class Styles:
    """Helpers wrapping text in Rich markup for consistent styling.

    Text is escaped, so values such as filter input may contain brackets.
    """

    @staticmethod
    def muted(text: str) -> str:
        """Style text as muted (dim)."""
        return f"[dim]{escape(text)}[/dim]"

    @staticmethod
    def bold(text: str) -> str:
        """Style text as bold."""
        return f"[bold]{escape(text)}[/bold]"

    @staticmethod
    def color(text: str, hex_color: str) -> str:
        """Style text with a hex color."""
        return f"[{hex_color}]{escape(text)}[/{hex_color}]"

    @staticmethod
    def rgb(text: str, color: tuple[int, int, int] | None) -> Text:
        """Return a Rich Text cell, colored when ``color`` is given."""
        if color is None:
            return Text(text)
        r, g, b = color
        return Text(text, style=f"rgb({r},{g},{b})")
