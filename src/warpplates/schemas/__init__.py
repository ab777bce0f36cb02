"""Pydantic schemas for warpplates."""

from warpplates.schemas.warpplate import Area, Warpplate, WarpplateCreate, WarpplateUpdate

__all__ = [
    "Area",
    "Warpplate",
    "WarpplateCreate",
    "WarpplateUpdate",
]
