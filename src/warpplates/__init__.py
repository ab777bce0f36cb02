"""Automatic warpplates: named zones that teleport players after a countdown."""

from warpplates.plugin import WarpplatesPlugin

__version__ = "0.1.0"

__all__ = ["WarpplatesPlugin", "__version__"]
