"""Load descriptor documents from YAML and merge them into a Catalog."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
import yaml
from pydantic import ValidationError

from cloud_resource_browser.catalog.catalog import Catalog
from cloud_resource_browser.catalog.exceptions import CatalogError
from cloud_resource_browser.catalog.models import CatalogDocument

if TYPE_CHECKING:
    from cloud_resource_browser.core.config.models import AppConfig
    from cloud_resource_browser.core.plugins.manager import PluginManager

logger = structlog.get_logger()

BUNDLED_DIR = Path(__file__).parent / "resources"


def bundled_documents() -> list[Path]:
    """Return the descriptor documents shipped with the package."""
    return sorted(BUNDLED_DIR.glob("*.yaml"))


def parse_document(data: Any, source: str) -> CatalogDocument:
    """Validate already-parsed document data.

    Args:
        data: Parsed YAML content.
        source: Name used in error messages.

    Returns:
        The validated document.

    Raises:
        CatalogError: If the data does not match the descriptor schema.
    """
    if data is None:
        return CatalogDocument()
    if not isinstance(data, dict):
        raise CatalogError("Descriptor document must be a mapping", source=source)
    try:
        return CatalogDocument.model_validate(data)
    except ValidationError as e:
        raise CatalogError(f"Invalid descriptor document: {e}", source=source) from e


def load_document(path: Path) -> CatalogDocument:
    """Read and validate one YAML descriptor document.

    Raises:
        CatalogError: If the file cannot be read, parsed or validated.
    """
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as e:
        raise CatalogError(f"Cannot read descriptor document: {e}", source=str(path)) from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Malformed YAML: {e}", source=str(path)) from e
    return parse_document(data, str(path))


def load_catalog(
    extra_paths: Iterable[Path] = (),
    include_bundled: bool = True,
) -> Catalog:
    """Build the catalog from bundled and additional documents.

    Bundled documents are merged first, then ``extra_paths`` in order.
    A directory in ``extra_paths`` contributes every ``*.yaml`` inside it.

    Args:
        extra_paths: Additional document files or directories.
        include_bundled: Include the documents shipped with the package.

    Returns:
        The merged catalog.

    Raises:
        CatalogError: On any unreadable, malformed or colliding document.
    """
    paths: list[Path] = bundled_documents() if include_bundled else []
    for extra in extra_paths:
        extra = Path(extra).expanduser()
        if extra.is_dir():
            paths.extend(sorted(extra.glob("*.yaml")))
        else:
            paths.append(extra)

    documents = [(str(path), load_document(path)) for path in paths]
    catalog = Catalog.from_documents(documents)
    logger.info("Catalog loaded", documents=len(paths), resources=len(catalog))
    return catalog


def load_configured_catalog(
    config: AppConfig,
    plugin_manager: PluginManager | None = None,
) -> Catalog:
    """Build the catalog for an application configuration.

    Merge order is bundled documents, plugin documents, then
    ``config.catalog_paths``.

    Args:
        config: Application configuration.
        plugin_manager: Manager with plugins already loaded and initialized.
            When omitted, plugins are loaded from ``config.plugins`` and
            cleaned up once their documents are collected.

    Raises:
        CatalogError: On any unreadable, malformed or colliding document.
    """
    owned = plugin_manager is None
    if plugin_manager is None:
        from cloud_resource_browser.core.plugins import PluginManager

        plugin_manager = PluginManager()
        plugin_manager.load_configured(config.plugins)
        plugin_manager.initialize_all(config.plugins.settings)

    try:
        plugin_paths = plugin_manager.catalog_documents()
    finally:
        if owned:
            plugin_manager.cleanup_all()

    return load_catalog([*plugin_paths, *(Path(p) for p in config.catalog_paths)])
