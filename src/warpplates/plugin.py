"""Plugin wiring: connects the host's hooks to the registry, scheduler and commands."""

import logging
import time
from collections.abc import Callable

from warpplates.commands import WarpplateCommands
from warpplates.config import Settings, WarpplatesConfig, settings as default_settings
from warpplates.host import Host, Player
from warpplates.registry import WarpplateRegistry
from warpplates.repositories import WarpplateRepository, WarpplateStore
from warpplates.scheduler import PlayerStateTable, WarpScheduler
from warpplates.service import WarpplateService

logger = logging.getLogger(__name__)


class WarpplatesPlugin:
    """Automatic warpplates for a host game server.

    Hook it up as follows:

    * after the world is loaded: ``await plugin.initialize()``
    * on every game update: ``plugin.on_update()``
    * when a player leaves: ``plugin.on_leave(player)``
    * for ``/warpplate`` and ``/wp``: ``await plugin.on_command(player, parameters)``
    """

    def __init__(
        self,
        host: Host,
        settings: Settings | None = None,
        store: WarpplateStore | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.host = host
        self.settings = settings or default_settings
        self.store = store or WarpplateRepository()
        self.registry = WarpplateRegistry(self.store)
        self.states = PlayerStateTable()
        self.config = WarpplatesConfig()
        self._clock = clock
        self.scheduler: WarpScheduler | None = None
        self.service: WarpplateService | None = None
        self.commands: WarpplateCommands | None = None

    @property
    def initialized(self) -> bool:
        return self.scheduler is not None

    async def initialize(self) -> None:
        """Read the configuration and load the active world's warpplates."""
        self.config = WarpplatesConfig.read_or_create(self.settings.config_path)
        if isinstance(self.store, WarpplateRepository):
            await self.store.ensure_schema()
        await self.registry.load(self.host.world_id)

        self.scheduler = WarpScheduler(
            self.host,
            self.registry,
            self.config,
            tile_size=self.settings.tile_size,
            sweep_interval=self.settings.sweep_interval_seconds,
            clock=self._clock,
            states=self.states,
        )
        self.service = WarpplateService(self.host, self.registry, self.config, self.states)
        self.commands = WarpplateCommands(self.host, self.service)
        logger.info(
            "Warpplates initialized for world %s (cooldown %ss)",
            self.host.world_id,
            self.config.warpplate_cooldown,
        )

    def on_update(self) -> None:
        """Host update hook. Does nothing until the plugin is initialized."""
        if self.scheduler is not None:
            self.scheduler.on_update()

    def on_leave(self, player: Player) -> None:
        """Host leave hook: forget the player's transient warp state."""
        self.states.discard(player)

    async def on_command(self, player: Player, parameters: list[str]) -> None:
        """Host command hook for ``/warpplate`` and its alias."""
        if self.commands is None:
            logger.warning("Ignoring warpplate command before initialization")
            return
        await self.commands.handle(player, parameters)

    async def change_world(self, world_id: int) -> None:
        """Reload the cache after the host switched worlds."""
        await self.registry.load(world_id)
