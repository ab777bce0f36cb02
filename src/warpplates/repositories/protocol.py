"""Storage protocol for swappable warpplate backends."""

from typing import Protocol

from warpplates.schemas import Warpplate


class WarpplateStore(Protocol):
    """Durable warpplate storage. Implementations raise ``WarpplateStorageError`` on failure."""

    async def create_warpplate(self, warpplate: Warpplate) -> None:
        """Insert a new warpplate. Its allow-list is not written."""
        ...

    async def load_warpplates(self, world_id: int) -> list[Warpplate]:
        """Read every warpplate of a world, allow-lists included."""
        ...

    async def delete_warpplate(self, warpplate: Warpplate) -> None:
        """Delete a warpplate and its allow-list. Missing warpplates are ignored."""
        ...

    async def update_warpplate(self, warpplate: Warpplate) -> None:
        """Persist mutable attributes and replace the allow-list atomically."""
        ...
