"""Warp scheduler - turns "player standing on a warpplate" into "player warped".

The host calls :meth:`WarpScheduler.on_update` from its own update signal,
usually many times per second. The scheduler sweeps all players at most once
per ``sweep_interval`` seconds, which makes delays and cooldowns count in
seconds whatever the host's tick rate is.

Per player and sweep, in order:

* no warpplate under the player: dwell progress resets to 0
* destination missing or unknown: nothing happens, progress is kept
* private warpplate and player not allow-listed, or player opted out: skipped
* cooldown running: cooldown decreases by one, no progress
* progress increases by one; below the destination's delay a countdown is sent
* progress reached the delay: teleport, cooldown starts, progress resets

A destination delay of N warps on the N-th second spent on the warpplate, or
on the first one for a delay of 0.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from warpplates.config import WarpplatesConfig
from warpplates.host import Host, MessageKind, Player
from warpplates.registry import WarpplateRegistry

logger = logging.getLogger(__name__)


@dataclass
class PlayerWarpState:
    """Transient per-session warp state. Never persisted."""

    accepts_warps: bool = True
    cooldown_remaining: int = 0
    dwell_progress: int = 0


class PlayerStateTable:
    """Warp state per player session, created on first access and dropped on leave."""

    def __init__(self) -> None:
        self._states: dict[int, PlayerWarpState] = {}

    def get_or_create(self, player: Player) -> PlayerWarpState:
        """Return the player's state, creating it with defaults if needed."""
        state = self._states.get(player.index)
        if state is None:
            state = self._states[player.index] = PlayerWarpState()
        return state

    def discard(self, player: Player) -> None:
        """Forget a player's state when its session ends."""
        self._states.pop(player.index, None)

    def __contains__(self, player: Player) -> bool:
        return player.index in self._states

    def __len__(self) -> int:
        return len(self._states)


def format_seconds(count: int) -> str:
    return f"{count} second{'' if count == 1 else 's'}"


class WarpScheduler:
    """Evaluates every connected player against the warpplate registry."""

    def __init__(
        self,
        host: Host,
        registry: WarpplateRegistry,
        config: WarpplatesConfig,
        tile_size: int = 16,
        sweep_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        states: PlayerStateTable | None = None,
    ):
        self.host = host
        self.registry = registry
        self.config = config
        self.tile_size = tile_size
        self.sweep_interval = sweep_interval
        self.states = states if states is not None else PlayerStateTable()
        self._clock = clock
        self._last_sweep = clock()

    def on_update(self) -> bool:
        """Handle one host update. Returns ``True`` if a sweep ran."""
        if self._clock() - self._last_sweep < self.sweep_interval:
            return False

        self.sweep()
        self._last_sweep = self._clock()
        return True

    def on_leave(self, player: Player) -> None:
        """Drop the state of a disconnecting player."""
        self.states.discard(player)

    def sweep(self) -> None:
        """Evaluate every connected player once."""
        for player in self.host.players():
            try:
                self.evaluate(player)
            except Exception:
                logger.exception("Error evaluating warpplates for player %s", player.name)

    def evaluate(self, player: Player) -> None:
        """Advance one player's warp state by one second."""
        state = self.states.get_or_create(player)
        warpplate = self.registry.get_at(player.tile_x, player.tile_y)
        if warpplate is None:
            state.dwell_progress = 0
            return

        if warpplate.destination is None:
            return
        destination = self.registry.get(warpplate.destination)
        if destination is None:
            return

        if not warpplate.can_use(player.user_id) or not state.accepts_warps:
            return

        if state.cooldown_remaining > 0:
            state.cooldown_remaining -= 1
            return

        state.dwell_progress += 1
        if state.dwell_progress < destination.delay:
            remaining = destination.delay - state.dwell_progress
            self.host.send_message(
                player,
                MessageKind.INFO,
                f"You will be warped to '{destination.name}' in {format_seconds(remaining)}.",
            )
            return

        self.host.teleport(player, destination.x * self.tile_size, destination.y * self.tile_size)
        self.host.send_message(
            player, MessageKind.SUCCESS, f"You've been warped to '{destination.name}'."
        )
        state.cooldown_remaining = self.config.warpplate_cooldown
        state.dwell_progress = 0
        logger.info(
            "Warped player %s from '%s' to '%s'", player.name, warpplate.name, destination.name
        )
