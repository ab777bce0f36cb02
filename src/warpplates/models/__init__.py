"""SQLAlchemy models for the warpplate tables."""

from warpplates.models.warpplate import WarpplateAllowedUser, WarpplateRow

__all__ = [
    "WarpplateAllowedUser",
    "WarpplateRow",
]
