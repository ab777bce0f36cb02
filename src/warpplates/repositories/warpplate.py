"""Warpplate repository - data access for warpplates and their allow-lists."""

import logging
from collections import defaultdict

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warpplates.database import Base, get_session_factory
from warpplates.errors import WarpplateStorageError
from warpplates.models import WarpplateAllowedUser, WarpplateRow
from warpplates.schemas import Area, Warpplate

logger = logging.getLogger(__name__)


class WarpplateRepository:
    """SQL-backed warpplate store.

    Every method opens its own session so that callers never share
    transactional state with the tick loop.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self._session_factory = session_factory or get_session_factory()

    async def ensure_schema(self) -> None:
        """Create the warpplate tables if they don't exist yet."""
        async with self._session_factory() as session:
            connection = await session.connection()
            await connection.run_sync(Base.metadata.create_all)
            await session.commit()

    async def create_warpplate(self, warpplate: Warpplate) -> None:
        """Insert the warpplate row. New warpplates start with an empty allow-list."""
        async with self._session_factory() as session:
            session.add(
                WarpplateRow(
                    world_id=warpplate.world_id,
                    name=warpplate.name,
                    x=warpplate.x,
                    y=warpplate.y,
                    width=warpplate.area.width,
                    height=warpplate.area.height,
                    tag=warpplate.tag,
                    delay=warpplate.delay,
                    destination=warpplate.destination,
                    is_public=warpplate.is_public,
                )
            )
            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Failed to create warpplate '%s': %s", warpplate.name, e)
                raise WarpplateStorageError(
                    f"Could not create warpplate '{warpplate.name}'"
                ) from e

    async def load_warpplates(self, world_id: int) -> list[Warpplate]:
        """Load all warpplates of a world together with their allow-lists."""
        try:
            async with self._session_factory() as session:
                rows = (
                    await session.execute(
                        select(WarpplateRow).where(WarpplateRow.world_id == world_id)
                    )
                ).scalars().all()
                allowed = (
                    await session.execute(
                        select(WarpplateAllowedUser).where(
                            WarpplateAllowedUser.world_id == world_id
                        )
                    )
                ).scalars().all()
        except SQLAlchemyError as e:
            logger.error("Failed to load warpplates for world %s: %s", world_id, e)
            raise WarpplateStorageError(f"Could not load warpplates for world {world_id}") from e

        allowed_by_name: dict[str, set[int]] = defaultdict(set)
        for entry in allowed:
            allowed_by_name[entry.warpplate].add(entry.user_id)

        return [_to_schema(row, allowed_by_name[row.name]) for row in rows]

    async def delete_warpplate(self, warpplate: Warpplate) -> None:
        """Delete the warpplate row and all of its allow-list rows."""
        async with self._session_factory() as session:
            try:
                await session.execute(
                    delete(WarpplateRow).where(
                        WarpplateRow.world_id == warpplate.world_id,
                        WarpplateRow.name == warpplate.name,
                    )
                )
                await session.execute(
                    delete(WarpplateAllowedUser).where(
                        WarpplateAllowedUser.world_id == warpplate.world_id,
                        WarpplateAllowedUser.warpplate == warpplate.name,
                    )
                )
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Failed to delete warpplate '%s': %s", warpplate.name, e)
                raise WarpplateStorageError(
                    f"Could not delete warpplate '{warpplate.name}'"
                ) from e

    async def update_warpplate(self, warpplate: Warpplate) -> None:
        """Persist the mutable attributes and replace the allow-list.

        The row update, the allow-list delete and the re-insert share one
        transaction. On failure the transaction is rolled back, so storage keeps
        the previous allow-list, and the error is re-raised. A failing rollback
        is only logged.
        """
        async with self._session_factory() as session:
            try:
                await session.execute(
                    update(WarpplateRow)
                    .where(
                        WarpplateRow.world_id == warpplate.world_id,
                        WarpplateRow.name == warpplate.name,
                    )
                    .values(
                        width=warpplate.area.width,
                        height=warpplate.area.height,
                        tag=warpplate.tag,
                        delay=warpplate.delay,
                        destination=warpplate.destination,
                        is_public=warpplate.is_public,
                    )
                )
                await session.execute(
                    delete(WarpplateAllowedUser).where(
                        WarpplateAllowedUser.world_id == warpplate.world_id,
                        WarpplateAllowedUser.warpplate == warpplate.name,
                    )
                )
                session.add_all(_allowed_rows(warpplate))
                await session.commit()
            except SQLAlchemyError as e:
                try:
                    await session.rollback()
                except SQLAlchemyError as rollback_error:
                    logger.error(
                        "An exception has occurred during database rollback: %s", rollback_error
                    )
                logger.error("Failed to update warpplate '%s': %s", warpplate.name, e)
                raise WarpplateStorageError(
                    f"Could not update warpplate '{warpplate.name}'"
                ) from e


def _allowed_rows(warpplate: Warpplate) -> list[WarpplateAllowedUser]:
    """Build one allow-list row per allowed user."""
    return [
        WarpplateAllowedUser(
            world_id=warpplate.world_id,
            warpplate=warpplate.name,
            user_id=user_id,
        )
        for user_id in sorted(warpplate.allowed_users)
    ]


def _to_schema(row: WarpplateRow, allowed_users: set[int]) -> Warpplate:
    """Convert SQLAlchemy model to Pydantic schema."""
    return Warpplate(
        world_id=row.world_id,
        name=row.name,
        x=row.x,
        y=row.y,
        area=Area(x=row.x, y=row.y, width=row.width, height=row.height),
        tag=row.tag,
        delay=row.delay,
        destination=row.destination,
        is_public=bool(row.is_public),
        allowed_users=set(allowed_users),
    )
