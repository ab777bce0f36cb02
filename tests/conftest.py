"""Pytest configuration and fixtures for warpplate tests."""

from collections.abc import AsyncGenerator
from dataclasses import replace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from warpplates.config import Settings, WarpplatesConfig
from warpplates.database import Base
from warpplates.host import MessageKind, Player
from warpplates.plugin import WarpplatesPlugin
from warpplates.registry import WarpplateRegistry
from warpplates.repositories import WarpplateRepository
from warpplates.routes import create_app
from warpplates.scheduler import PlayerStateTable
from warpplates.schemas import Area, Warpplate
from warpplates.service import Permissions, WarpplateService

TEST_WORLD_ID = 1
OTHER_WORLD_ID = 2

ALICE_ID = 100
BOB_ID = 200

ALL_PERMISSIONS = {
    Permissions.DEFINE,
    Permissions.SET,
    Permissions.RESIZE,
    Permissions.DELETE,
    Permissions.SET_TAG,
    Permissions.SET_DELAY,
    Permissions.SET_DESTINATION,
    Permissions.TOGGLE_PUBLIC,
}


class FakeHost:
    """In-memory host that records teleports and messages."""

    def __init__(self, world_id: int = TEST_WORLD_ID):
        self._world_id = world_id
        self.connected: list[Player] = []
        self.teleports: list[tuple[str, int, int]] = []
        self.messages: list[tuple[str, MessageKind, str]] = []
        self.permissions: dict[str, set[str]] = {}
        self.users: dict[str, int] = {"alice": ALICE_ID, "bob": BOB_ID}

    @property
    def world_id(self) -> int:
        return self._world_id

    def players(self) -> list[Player]:
        return list(self.connected)

    def teleport(self, player: Player, x: int, y: int) -> None:
        self.teleports.append((player.name, x, y))

    def send_message(self, player: Player, kind: MessageKind, text: str) -> None:
        self.messages.append((player.name, kind, text))

    def has_permission(self, player: Player, permission: str) -> bool:
        return permission in self.permissions.get(player.name, set())

    def find_user_id(self, username: str) -> int | None:
        return self.users.get(username)

    def user_name(self, user_id: int) -> str | None:
        return next((name for name, uid in self.users.items() if uid == user_id), None)

    # Test helpers

    def grant(self, player: Player, *permissions: str) -> None:
        self.permissions.setdefault(player.name, set()).update(permissions or ALL_PERMISSIONS)

    def join(self, player: Player) -> Player:
        self.connected.append(player)
        return player

    def move(self, player: Player, tile_x: int, tile_y: int) -> Player:
        """Replace a connected player with a copy standing on another tile."""
        moved = replace(player, tile_x=tile_x, tile_y=tile_y)
        self.connected = [moved if p.index == player.index else p for p in self.connected]
        return moved

    def texts(self, player: Player | None = None) -> list[str]:
        return [text for name, _, text in self.messages if player is None or name == player.name]

    def last_message(self) -> tuple[MessageKind, str]:
        _, kind, text = self.messages[-1]
        return kind, text


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1.0) -> None:
        self.now += seconds


def make_warpplate(
    name: str,
    x: int = 0,
    y: int = 0,
    width: int = 3,
    height: int = 3,
    world_id: int = TEST_WORLD_ID,
    **kwargs,
) -> Warpplate:
    return Warpplate(
        world_id=world_id,
        name=name,
        x=x,
        y=y,
        area=Area(x=x, y=y, width=width, height=height),
        **kwargs,
    )


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory SQLite database per test."""
    # SQLite in-memory requires StaticPool to keep connection alive
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def repository(session_factory) -> WarpplateRepository:
    return WarpplateRepository(session_factory)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> WarpplatesConfig:
    return WarpplatesConfig(warpplate_cooldown=3)


@pytest_asyncio.fixture
async def registry(repository) -> WarpplateRegistry:
    registry = WarpplateRegistry(repository)
    await registry.load(TEST_WORLD_ID)
    return registry


@pytest.fixture
def states() -> PlayerStateTable:
    return PlayerStateTable()


@pytest.fixture
def service(host, registry, config, states) -> WarpplateService:
    return WarpplateService(host, registry, config, states)


@pytest.fixture
def admin(host) -> Player:
    player = Player(index=0, name="admin", user_id=1)
    host.grant(player)
    return player


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        config_path=str(tmp_path / "warpplates.json"),
    )


@pytest_asyncio.fixture
async def plugin(host, settings, repository, clock) -> WarpplatesPlugin:
    plugin = WarpplatesPlugin(host, settings=settings, store=repository, clock=clock)
    await plugin.initialize()
    return plugin


@pytest_asyncio.fixture
async def client(plugin) -> AsyncGenerator[AsyncClient, None]:
    """Async test client for the REST app."""
    async with AsyncClient(
        transport=ASGITransport(app=create_app(plugin)),
        base_url="http://test",
    ) as ac:
        yield ac
