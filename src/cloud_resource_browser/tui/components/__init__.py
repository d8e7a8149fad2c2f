"""Reusable TUI components.

Usage:
    from cloud_resource_browser.tui.components import Modal

    modal = Modal(
        title="Stop Instance",
        body="Stop web-1 (i-0abc)?",
        buttons=[("Yes", "yes", "warning"), ("No", "no", "default")],
        default="no",
    )
"""

from cloud_resource_browser.tui.components.modal import Modal

__all__ = ["Modal"]
