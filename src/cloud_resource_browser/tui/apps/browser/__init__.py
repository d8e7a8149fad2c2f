"""Cloud resource browser TUI application.

Usage:
    from cloud_resource_browser.tui.apps.browser import BrowserApp

    app = BrowserApp(controller)
    app.run()
"""

from cloud_resource_browser.tui.apps.browser.app import BrowserApp

__all__ = ["BrowserApp"]
