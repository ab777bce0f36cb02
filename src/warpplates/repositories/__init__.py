"""Data access layer for warpplates."""

from warpplates.repositories.protocol import WarpplateStore
from warpplates.repositories.warpplate import WarpplateRepository

__all__ = [
    "WarpplateRepository",
    "WarpplateStore",
]
