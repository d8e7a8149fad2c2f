"""Logging configuration for cloud_resource_browser."""

from cloud_resource_browser.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
