"""Path-based value extraction over semi-structured records.

``extract`` is the single normalization primitive used for table cells,
text filtering and breadcrumb labels. It never raises.
"""

from __future__ import annotations

from typing import Any

MISSING = "-"


def _step(node: Any, segment: str) -> tuple[Any, str | None]:
    """Advance one path segment.

    Returns:
        The next node, and a final rendered string when the segment
        short-circuits traversal.
    """
    if isinstance(node, dict):
        if segment == "Name":
            tags = node.get("Tags")
            if isinstance(tags, dict) and isinstance(tags.get("Name"), str):
                return None, tags["Name"]
        return node.get(segment), None

    if isinstance(node, list):
        if segment == "length":
            return None, str(len(node))
        if segment.isascii() and segment.isdigit():
            index = int(segment)
            return (node[index] if index < len(node) else None), None
        return None, None

    return None, None


def render(value: Any) -> str:
    """Render a terminal value to its display string."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return str(value)
    return MISSING


def extract(record: Any, path: str) -> str:
    """Extract a display string from ``record`` at dot-separated ``path``.

    A ``Name`` segment on a map carrying a ``Tags`` map resolves to the
    ``Name`` tag. Numeric segments index lists and ``length`` yields a
    list's size. Missing values, nulls and non-scalar terminals render
    as ``"-"``.

    Args:
        record: Record to read from.
        path: Dot-separated path, e.g. ``"State.Name"`` or ``"Volumes.0.Id"``.

    Returns:
        The rendered value, or ``"-"`` when the path does not resolve.
    """
    node = record
    for segment in path.split("."):
        node, final = _step(node, segment)
        if final is not None:
            return final
        if node is None:
            return MISSING
    return render(node)
