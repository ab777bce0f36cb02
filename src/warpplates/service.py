"""Administrative warpplate operations.

Each operation checks the issuer's permission through the host, validates its
arguments against the registry and configuration, and routes the change
through the registry so that storage and cache stay in step.
"""

import logging

from warpplates.config import WarpplatesConfig
from warpplates.errors import (
    WarpplateAuthorizationError,
    WarpplateNotFoundError,
    WarpplateValidationError,
)
from warpplates.host import Host, Player
from warpplates.registry import WarpplateRegistry
from warpplates.scheduler import PlayerStateTable
from warpplates.schemas import Area, Warpplate, WarpplateUpdate

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 3
DEFAULT_DELAY = 3


def _resize(warpplate: Warpplate, width: int, height: int) -> None:
    warpplate.area = Area(x=warpplate.area.x, y=warpplate.area.y, width=width, height=height)


class Permissions:
    """Permission names checked by warpplate operations."""

    DEFINE = "warpplates.define"
    SET = "warpplates.set"
    RESIZE = "warpplates.resize"
    DELETE = "warpplates.delete"
    SET_TAG = "warpplates.settag"
    SET_DELAY = "warpplates.setdelay"
    SET_DESTINATION = "warpplates.setdestination"
    TOGGLE_PUBLIC = "warpplates.togglepublic"


class WarpplateService:
    """The capability set exposed to chat commands and the REST surface."""

    def __init__(
        self,
        host: Host,
        registry: WarpplateRegistry,
        config: WarpplatesConfig,
        states: PlayerStateTable,
    ):
        self.host = host
        self.registry = registry
        self.config = config
        self.states = states

    def _require(self, issuer: Player, permission: str, message: str) -> None:
        if not self.host.has_permission(issuer, permission):
            logger.warning("Denied %s to %s", permission, issuer.name)
            raise WarpplateAuthorizationError(permission, message)

    def get(self, name: str) -> Warpplate:
        """Return warpplate ``name`` or raise a validation error."""
        warpplate = self.registry.get(name)
        if warpplate is None:
            raise WarpplateNotFoundError(f"Invalid warpplate '{name}'.")
        return warpplate

    def _check_size(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise WarpplateValidationError("Invalid dimensions.")
        if width > self.config.max_warpplate_width or height > self.config.max_warpplate_height:
            raise WarpplateValidationError(
                "The new dimensions are too big. The maximum size is "
                f"{self.config.max_warpplate_width}x{self.config.max_warpplate_height}."
            )

    def _check_tag(self, tag: str) -> None:
        if not tag:
            raise WarpplateValidationError("Invalid tag.")

    def _check_delay(self, delay: int) -> None:
        if delay < 0:
            raise WarpplateValidationError("Invalid delay.")

    def _check_destination(self, destination: str) -> None:
        if self.registry.get(destination) is None:
            raise WarpplateValidationError(f"Invalid destination warpplate '{destination}'.")

    async def set(self, issuer: Player, name: str, x: int, y: int) -> Warpplate:
        """Define a new 3x3 warpplate with its origin at the given tile."""
        self._require(issuer, Permissions.SET, "You do not have permission to set warpplates.")
        if self.registry.get(name) is not None:
            raise WarpplateValidationError(f"Warpplate '{name}' already exists.")
        if self.registry.get_at(x, y) is not None:
            raise WarpplateValidationError(
                "The position is located within another warpplate's area. "
                "The warpplate cannot be set."
            )
        if self.registry.world_id is None:
            raise WarpplateValidationError("Warpplates have not been loaded for this world yet.")

        warpplate = Warpplate(
            world_id=self.registry.world_id,
            name=name,
            x=x,
            y=y,
            area=Area(x=x, y=y, width=DEFAULT_SIZE, height=DEFAULT_SIZE),
            delay=DEFAULT_DELAY,
        )
        await self.registry.add(warpplate)
        return warpplate

    async def delete(self, issuer: Player, name: str) -> None:
        """Delete a warpplate."""
        self._require(
            issuer, Permissions.DELETE, "You do not have permission to delete warpplates."
        )
        await self.registry.remove(self.get(name))

    async def resize(self, issuer: Player, name: str, width: int, height: int) -> Warpplate:
        """Change a warpplate's area size, keeping its top-left corner.

        The new area is not checked against other warpplates.
        """
        self._require(
            issuer, Permissions.RESIZE, "You do not have permission to resize warpplates."
        )
        self.get(name)
        self._check_size(width, height)

        def apply(warpplate: Warpplate) -> None:
            _resize(warpplate, width, height)

        return await self.registry.update(name, apply)

    async def set_tag(self, issuer: Player, name: str, tag: str) -> Warpplate:
        """Change a warpplate's display tag."""
        self._require(
            issuer, Permissions.SET_TAG, "You do not have permission to set warpplate tags."
        )
        self.get(name)
        self._check_tag(tag)

        def apply(warpplate: Warpplate) -> None:
            warpplate.tag = tag

        return await self.registry.update(name, apply)

    async def set_delay(self, issuer: Player, name: str, delay: int) -> Warpplate:
        """Change how many seconds players must stand on a warpplate before arriving here."""
        self._require(
            issuer, Permissions.SET_DELAY, "You do not have permission to set warpplate delays."
        )
        self.get(name)
        self._check_delay(delay)

        def apply(warpplate: Warpplate) -> None:
            warpplate.delay = delay

        return await self.registry.update(name, apply)

    async def set_destination(self, issuer: Player, name: str, destination: str) -> Warpplate:
        """Point a warpplate at another existing warpplate."""
        self._require(
            issuer,
            Permissions.SET_DESTINATION,
            "You do not have permission to set warpplate destinations.",
        )
        self.get(name)
        self._check_destination(destination)

        def apply(warpplate: Warpplate) -> None:
            warpplate.destination = destination

        return await self.registry.update(name, apply)

    async def set_public(
        self, issuer: Player, name: str, is_public: bool | None = None
    ) -> Warpplate:
        """Make a warpplate public or restrict it to its allow-list.

        With ``is_public`` left as ``None`` the current status is flipped.
        """
        self._require(
            issuer,
            Permissions.TOGGLE_PUBLIC,
            "You do not have permission to toggle warpplate statuses.",
        )
        self.get(name)

        def apply(warpplate: Warpplate) -> None:
            warpplate.is_public = not warpplate.is_public if is_public is None else is_public

        return await self.registry.update(name, apply)

    async def edit(self, issuer: Player, name: str, changes: WarpplateUpdate) -> Warpplate:
        """Apply several edits as one change.

        Every provided field is authorized and validated before anything is
        written, so the warpplate is stored with all of the changes or none.
        A size change may give only one of width and height; the other keeps
        its current value.
        """
        current = self.get(name)
        if changes.tag is not None:
            self._require(
                issuer, Permissions.SET_TAG, "You do not have permission to set warpplate tags."
            )
            self._check_tag(changes.tag)
        if changes.delay is not None:
            self._require(
                issuer,
                Permissions.SET_DELAY,
                "You do not have permission to set warpplate delays.",
            )
            self._check_delay(changes.delay)
        if changes.destination is not None:
            self._require(
                issuer,
                Permissions.SET_DESTINATION,
                "You do not have permission to set warpplate destinations.",
            )
            self._check_destination(changes.destination)
        if changes.is_public is not None:
            self._require(
                issuer,
                Permissions.TOGGLE_PUBLIC,
                "You do not have permission to toggle warpplate statuses.",
            )

        size = None
        if changes.width is not None or changes.height is not None:
            self._require(
                issuer, Permissions.RESIZE, "You do not have permission to resize warpplates."
            )
            size = (
                changes.width if changes.width is not None else current.area.width,
                changes.height if changes.height is not None else current.area.height,
            )
            self._check_size(*size)

        if not changes.model_dump(exclude_none=True):
            return current

        def apply(warpplate: Warpplate) -> None:
            if changes.tag is not None:
                warpplate.tag = changes.tag
            if changes.delay is not None:
                warpplate.delay = changes.delay
            if changes.destination is not None:
                warpplate.destination = changes.destination
            if changes.is_public is not None:
                warpplate.is_public = changes.is_public
            if size is not None:
                _resize(warpplate, *size)

        return await self.registry.update(name, apply)

    async def toggle_allowed(self, issuer: Player, name: str, username: str) -> tuple[str, bool]:
        """Add ``username`` to the allow-list, or remove them if already present.

        Returns the user's name and whether they are allowed afterwards.
        """
        self._require(
            issuer,
            Permissions.TOGGLE_PUBLIC,
            "You do not have permission to allow other players.",
        )
        self.get(name)
        user_id = self.host.find_user_id(username)
        if user_id is None:
            raise WarpplateValidationError("Invalid user.")

        def apply(warpplate: Warpplate) -> None:
            if user_id in warpplate.allowed_users:
                warpplate.allowed_users.discard(user_id)
            else:
                warpplate.allowed_users.add(user_id)

        updated = await self.registry.update(name, apply)
        return username, user_id in updated.allowed_users

    def list_names(self) -> list[str]:
        """Names of all warpplates, sorted."""
        return sorted(w.name for w in self.registry.all())

    def list_allowed(self, name: str) -> list[str]:
        """Names of the users allowed on a warpplate, sorted. Unknown user IDs are skipped."""
        names = (self.host.user_name(user_id) for user_id in self.get(name).allowed_users)
        return sorted(n for n in names if n is not None)

    def toggle_warps(self, player: Player) -> bool:
        """Opt a player in or out of warpplates. Returns whether warps now apply."""
        state = self.states.get_or_create(player)
        state.accepts_warps = not state.accepts_warps
        return state.accepts_warps
