"""Profile and region discovery."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

logger = structlog.get_logger()

REGIONS: tuple[str, ...] = (
    "us-east-1",
    "us-east-2",
    "us-west-1",
    "us-west-2",
    "af-south-1",
    "ap-east-1",
    "ap-south-1",
    "ap-south-2",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-southeast-3",
    "ap-southeast-4",
    "ap-northeast-1",
    "ap-northeast-2",
    "ap-northeast-3",
    "ca-central-1",
    "eu-central-1",
    "eu-central-2",
    "eu-west-1",
    "eu-west-2",
    "eu-west-3",
    "eu-south-1",
    "eu-south-2",
    "eu-north-1",
    "me-south-1",
    "me-central-1",
    "sa-east-1",
)

# Digit keys in the list view jump straight to these regions
REGION_SHORTCUTS: dict[str, str] = {
    "0": "us-east-1",
    "1": "us-west-2",
    "2": "eu-west-1",
    "3": "eu-central-1",
    "4": "ap-northeast-1",
    "5": "ap-southeast-1",
}


def credentials_path() -> Path:
    """Return the shared credentials file path."""
    if path := os.environ.get("AWS_SHARED_CREDENTIALS_FILE"):
        return Path(path).expanduser()
    return Path.home() / ".aws" / "credentials"


def config_path() -> Path:
    """Return the shared config file path."""
    if path := os.environ.get("AWS_CONFIG_FILE"):
        return Path(path).expanduser()
    return Path.home() / ".aws" / "config"


def _section_names(path: Path) -> list[str]:
    """Return the ``[section]`` header names of an INI-style file."""
    try:
        content = path.read_text()
    except OSError:
        return []
    names = []
    for line in content.splitlines():
        line = line.strip()
        if line.startswith("[") and line.endswith("]"):
            names.append(line[1:-1].strip())
    return names


def list_profiles() -> list[str]:
    """List profiles from the shared credentials and config files.

    The config file names profiles ``[profile <name>]``; the prefix is
    stripped. ``default`` is always included.

    Returns:
        Sorted, de-duplicated profile names.
    """
    profiles = {"default"}
    profiles.update(_section_names(credentials_path()))
    for section in _section_names(config_path()):
        if section.startswith("profile "):
            section = section.removeprefix("profile ").strip()
        profiles.add(section)
    logger.debug("Discovered profiles", count=len(profiles))
    return sorted(profiles)


def list_regions() -> list[str]:
    """Return the selectable regions."""
    return list(REGIONS)
