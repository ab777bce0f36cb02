"""Warpplate and allow-list tables."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from warpplates.database import Base


class WarpplateRow(Base):
    """A persisted warpplate, keyed by world and name."""

    __tablename__ = "Warpplates"

    world_id: Mapped[int] = mapped_column("WorldId", Integer, primary_key=True)
    name: Mapped[str] = mapped_column("Name", String(255), primary_key=True)
    x: Mapped[int] = mapped_column("X", Integer, nullable=False)
    y: Mapped[int] = mapped_column("Y", Integer, nullable=False)
    width: Mapped[int] = mapped_column("Width", Integer, nullable=False)
    height: Mapped[int] = mapped_column("Height", Integer, nullable=False)
    tag: Mapped[str] = mapped_column("Tag", String(255), nullable=False)
    delay: Mapped[int] = mapped_column("Delay", Integer, nullable=False, default=0)
    destination: Mapped[str | None] = mapped_column("Destination", String(255), nullable=True)
    is_public: Mapped[bool] = mapped_column("IsPublic", Boolean, nullable=False, default=True)


class WarpplateAllowedUser(Base):
    """A user permitted to use a non-public warpplate."""

    __tablename__ = "WarpplateIsAllowed"

    world_id: Mapped[int] = mapped_column("WorldId", Integer, primary_key=True)
    warpplate: Mapped[str] = mapped_column("Warpplate", String(255), primary_key=True)
    user_id: Mapped[int] = mapped_column("UserId", Integer, primary_key=True)
