"""TUI applications package.

Available applications:
- browser: Hierarchical cloud resource browser
"""
