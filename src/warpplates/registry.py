"""Warpplate registry - the in-memory cache of the active world's warpplates."""

import asyncio
import logging
from collections.abc import Callable

from warpplates.errors import WarpplateNotFoundError
from warpplates.repositories import WarpplateStore
from warpplates.schemas import Warpplate

logger = logging.getLogger(__name__)


class WarpplateRegistry:
    """Answers "which warpplate is here?" and "which warpplate is called N?".

    Every change goes through the store before the cache reflects it. Lookups
    are linear scans; worlds hold tens of warpplates, not thousands.

    Mutations are serialised by an ``asyncio.Lock`` and replace cache entries
    instead of editing them, so the synchronous tick sweep always sees whole
    records.
    """

    def __init__(self, store: WarpplateStore):
        self._store = store
        self._warpplates: list[Warpplate] = []
        self._lock = asyncio.Lock()
        self.world_id: int | None = None

    async def load(self, world_id: int) -> None:
        """Replace the cache with the warpplates stored for ``world_id``."""
        async with self._lock:
            warpplates = await self._store.load_warpplates(world_id)
            self._warpplates, self.world_id = warpplates, world_id
        logger.info("Loaded %d warpplates for world %s", len(self._warpplates), world_id)

    def all(self) -> list[Warpplate]:
        """Snapshot of the cached warpplates."""
        return list(self._warpplates)

    def get(self, name: str) -> Warpplate | None:
        """Find a warpplate by exact, case-sensitive name."""
        return next((w for w in self._warpplates if w.name == name), None)

    def get_at(self, x: int, y: int) -> Warpplate | None:
        """Find the first warpplate whose area contains the given tile."""
        return next((w for w in self._warpplates if w.contains(x, y)), None)

    async def add(self, warpplate: Warpplate) -> None:
        """Store a new warpplate, then cache it."""
        async with self._lock:
            await self._store.create_warpplate(warpplate)
            self._warpplates = [*self._warpplates, warpplate]
        logger.info("Added warpplate '%s' in world %s", warpplate.name, warpplate.world_id)

    async def remove(self, warpplate: Warpplate) -> None:
        """Delete a warpplate from storage, then drop it from the cache."""
        async with self._lock:
            await self._store.delete_warpplate(warpplate)
            self._warpplates = [
                w
                for w in self._warpplates
                if not (w.x == warpplate.x and w.y == warpplate.y and w.name == warpplate.name)
            ]
        logger.info("Removed warpplate '%s' from world %s", warpplate.name, warpplate.world_id)

    async def update(self, name: str, mutate: Callable[[Warpplate], None]) -> Warpplate:
        """Apply ``mutate`` to a copy of warpplate ``name``, persist it, then cache it.

        If ``mutate`` raises, nothing is written. If the store raises, the cached
        warpplate is left as it was and the error propagates.
        """
        async with self._lock:
            current = self.get(name)
            if current is None:
                raise WarpplateNotFoundError(f"Invalid warpplate '{name}'.")

            updated = current.model_copy(deep=True)
            mutate(updated)
            await self._store.update_warpplate(updated)

            self._warpplates = [updated if w is current else w for w in self._warpplates]
        logger.info("Updated warpplate '%s'", name)
        return updated
