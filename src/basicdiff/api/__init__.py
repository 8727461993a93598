"""HTTP API for the basic diff tool."""

from .. import __version__

__all__ = ["__version__"]
