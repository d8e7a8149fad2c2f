"""Terminal dashboard for browsing AWS resources from a declarative catalog."""

from cloud_resource_browser.__version__ import __version__

__all__ = ["__version__"]
