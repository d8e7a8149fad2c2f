"""Declarative resource catalog: descriptors, loading and value extraction."""

from cloud_resource_browser.catalog.catalog import Catalog
from cloud_resource_browser.catalog.exceptions import (
    CatalogError,
    DuplicateResourceError,
    UnknownResourceError,
)
from cloud_resource_browser.catalog.loader import load_catalog, load_configured_catalog
from cloud_resource_browser.catalog.models import (
    ActionDescriptor,
    CatalogDocument,
    ColorRule,
    ColumnDescriptor,
    ConfirmPolicy,
    DetailCall,
    OperationDescriptor,
    ResourceDescriptor,
    SubResourceLink,
)
from cloud_resource_browser.catalog.values import MISSING, extract

__all__ = [
    "MISSING",
    "ActionDescriptor",
    "Catalog",
    "CatalogDocument",
    "CatalogError",
    "ColorRule",
    "ColumnDescriptor",
    "ConfirmPolicy",
    "DetailCall",
    "DuplicateResourceError",
    "OperationDescriptor",
    "ResourceDescriptor",
    "SubResourceLink",
    "UnknownResourceError",
    "extract",
    "load_catalog",
    "load_configured_catalog",
]
