"""Warpplate schema - a named rectangular area that warps players to another warpplate."""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class Area(BaseModel):
    """An axis-aligned rectangle in tile coordinates.

    The right and bottom edges sit at ``x + width`` and ``y + height`` and are
    part of the area, like the left and top edges.
    """

    x: int
    y: int
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, x: int, y: int) -> bool:
        """Return ``True`` if the point lies inside the area or on its edge."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom


class Warpplate(BaseModel):
    """A warpplate in a world.

    ``world_id``, ``name`` and the origin point are fixed at creation. The
    origin is where the warpplate was defined and where players arriving from
    another warpplate are placed; it need not lie inside ``area`` after a resize.
    """

    model_config = {"validate_assignment": True}

    world_id: int = Field(..., frozen=True)
    name: str = Field(..., min_length=1, frozen=True)
    x: int = Field(..., frozen=True)
    y: int = Field(..., frozen=True)
    area: Area
    tag: str = ""
    delay: int = Field(default=0, ge=0, description="Seconds a player must stand here before warping")
    destination: str | None = Field(default=None, description="Name of the destination warpplate")
    is_public: bool = True
    allowed_users: set[int] = Field(default_factory=set)

    @model_validator(mode="before")
    @classmethod
    def default_tag_to_name(cls, data: Any) -> Any:
        """A warpplate without a tag is displayed by its name."""
        if isinstance(data, dict) and "name" in data and not data.get("tag"):
            data = {**data, "tag": data["name"]}
        return data

    def contains(self, x: int, y: int) -> bool:
        """Determine whether the given tile coordinates are part of the warpplate's area."""
        return self.area.contains(x, y)

    def can_use(self, user_id: int | None) -> bool:
        """Public warpplates admit everyone; private ones only allow-listed users."""
        return self.is_public or (user_id is not None and user_id in self.allowed_users)


class WarpplateCreate(BaseModel):
    """Request model for defining a warpplate at a position."""

    name: str = Field(..., min_length=1, max_length=255)
    x: int = Field(..., description="Tile X coordinate")
    y: int = Field(..., description="Tile Y coordinate")


class WarpplateUpdate(BaseModel):
    """Request model for editing a warpplate. Omitted fields are left unchanged."""

    tag: str | None = Field(default=None, min_length=1, max_length=255)
    delay: int | None = Field(default=None, ge=0)
    destination: str | None = Field(default=None, min_length=1)
    is_public: bool | None = None
    width: int | None = None
    height: int | None = None
