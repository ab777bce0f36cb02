"""Host environment collaborator.

The game server embedding the plugin implements :class:`Host`. It owns the
world, the connected players, teleportation, chat and permissions; the plugin
only consumes it.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class MessageKind(StrEnum):
    """Severity of a message delivered to a player."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Player:
    """A connected player, or a non-player issuer such as the console or a REST caller.

    ``index`` identifies the session; ``user_id`` is the durable account ID and
    is ``None`` for players that are not logged in.
    """

    index: int
    name: str
    user_id: int | None = None
    tile_x: int = 0
    tile_y: int = 0
    is_real: bool = True


class Host(Protocol):
    """Services the host game server provides to the plugin."""

    @property
    def world_id(self) -> int:
        """ID of the world currently loaded."""
        ...

    def players(self) -> list[Player]:
        """Currently connected players, in whatever order the server keeps them."""
        ...

    def teleport(self, player: Player, x: int, y: int) -> None:
        """Move a player to world (not tile) coordinates."""
        ...

    def send_message(self, player: Player, kind: MessageKind, text: str) -> None:
        """Deliver a chat message to a player."""
        ...

    def has_permission(self, player: Player, permission: str) -> bool:
        """Check a permission for a player or issuer."""
        ...

    def find_user_id(self, username: str) -> int | None:
        """Look up the durable ID of a registered user by name."""
        ...

    def user_name(self, user_id: int) -> str | None:
        """Look up the name of a registered user by ID."""
        ...
