"""Chat command surface: ``/warpplate <subcommand> ...`` (alias ``/wp``)."""

import logging
import math
from collections.abc import Awaitable, Callable

from warpplates.errors import (
    WarpplateAuthorizationError,
    WarpplateStorageError,
    WarpplateValidationError,
)
from warpplates.host import Host, MessageKind, Player
from warpplates.scheduler import format_seconds
from warpplates.service import Permissions, WarpplateService

logger = logging.getLogger(__name__)

COMMAND_NAMES = ("warpplate", "wp")
SPECIFIER = "/"
LINES_PER_PAGE = 4

SYNTAX = {
    "allow": "allow <warpplate name> <player name>",
    "delay": "delay <warpplate name> <delay>",
    "delete": "delete <warpplate name>",
    "destination": "destination <warpplate name> <destination warpplate name>",
    "help": "help",
    "info": "info <warpplate name>",
    "list": "list [page]",
    "listallowed": "listallowed <warpplate name> [page]",
    "resize": "resize <warpplate name> <width> <height>",
    "set": "set <warpplate name>",
    "tag": "tag <warpplate name> <tag>",
    "toggle": "toggle",
    "togglepublic": "togglepublic <warpplate name>",
}

Handler = Callable[[Player, list[str]], Awaitable[None]]


def _parse_int(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


class WarpplateCommands:
    """Parses warpplate subcommands and reports results to the issuing player."""

    def __init__(self, host: Host, service: WarpplateService):
        self.host = host
        self.service = service
        self._handlers: dict[str, Handler] = {
            "allow": self._allow,
            "delay": self._delay,
            "delete": self._delete,
            "destination": self._destination,
            "help": self._help,
            "info": self._info,
            "list": self._list,
            "listallowed": self._list_allowed,
            "resize": self._resize,
            "set": self._set,
            "tag": self._tag,
            "toggle": self._toggle,
            "togglepublic": self._toggle_public,
        }

    def _error(self, player: Player, text: str) -> None:
        self.host.send_message(player, MessageKind.ERROR, text)

    def _info_message(self, player: Player, text: str) -> None:
        self.host.send_message(player, MessageKind.INFO, text)

    def _success(self, player: Player, text: str) -> None:
        self.host.send_message(player, MessageKind.SUCCESS, text)

    def _syntax_error(self, player: Player, subcommand: str) -> None:
        self._error(
            player,
            f"Invalid syntax! Proper syntax: {SPECIFIER}warpplate {SYNTAX[subcommand]}",
        )

    async def handle(self, player: Player, parameters: list[str]) -> None:
        """Run a warpplate subcommand on behalf of ``player``."""
        if not self.host.has_permission(player, Permissions.DEFINE):
            self._error(player, "You do not have access to this command.")
            return

        handler = self._handlers.get(parameters[0].lower()) if parameters else None
        if handler is None:
            self._error(
                player,
                f"Invalid syntax! Type {SPECIFIER}warpplate help for a list of valid commands.",
            )
            return

        try:
            await handler(player, parameters)
        except (WarpplateValidationError, WarpplateAuthorizationError) as e:
            self._error(player, str(e))
        except WarpplateStorageError:
            logger.exception("Storage failure while running /warpplate %s", parameters[0])
            self._error(player, "The change could not be saved. Check the server log.")

    async def _allow(self, player: Player, parameters: list[str]) -> None:
        if len(parameters) != 3:
            self._syntax_error(player, "allow")
            return

        name = parameters[1]
        username, allowed = await self.service.toggle_allowed(player, name, parameters[2])
        if allowed:
            self._success(player, f"'{username}' is now allowed to use warpplate '{name}'.")
        else:
            self._success(player, f"'{username}' is no longer allowed to use warpplate '{name}'.")

    async def _delay(self, player: Player, parameters: list[str]) -> None:
        if len(parameters) != 3:
            self._syntax_error(player, "delay")
            return

        name = parameters[1]
        delay = _parse_int(parameters[2])
        if delay is None:
            self._error(player, "Invalid delay.")
            return

        await self.service.set_delay(player, name, delay)
        self._success(player, f"Set delay for warpplate '{name}' to {format_seconds(delay)}.")

    async def _delete(self, player: Player, parameters: list[str]) -> None:
        if len(parameters) != 2:
            self._syntax_error(player, "delete")
            return

        name = parameters[1]
        await self.service.delete(player, name)
        self._success(player, f"Removed warpplate '{name}'.")

    async def _destination(self, player: Player, parameters: list[str]) -> None:
        if len(parameters) != 3:
            self._syntax_error(player, "destination")
            return

        name, destination = parameters[1], parameters[2]
        await self.service.set_destination(player, name, destination)
        self._success(player, f"Set destination for warpplate '{name}' to '{destination}'.")

    async def _help(self, player: Player, parameters: list[str]) -> None:
        self._info_message(player, "Warpplate commands:")
        for syntax in SYNTAX.values():
            self._info_message(player, f"{SPECIFIER}warpplate {syntax}")

    async def _info(self, player: Player, parameters: list[str]) -> None:
        if len(parameters) != 2:
            self._syntax_error(player, "info")
            return

        warpplate = self.service.get(parameters[1])
        self._info_message(player, f"Name: {warpplate.name}")
        self._info_message(player, f"Tag: {warpplate.tag}")
        self._info_message(player, f"IsPublic: {warpplate.is_public}")
        self._info_message(player, f"Destination: {warpplate.destination or ''}")
        self._info_message(player, f"Delay: {warpplate.delay}")
        self._info_message(player, f"Size: {warpplate.area.width}x{warpplate.area.height}")

    async def _list(self, player: Player, parameters: list[str]) -> None:
        if len(parameters) > 2:
            self._syntax_error(player, "list")
            return

        page = self._page_number(player, parameters, 1)
        if page is None:
            return
        self._send_page(player, self.service.list_names(), page, "Warpplates", "list")

    async def _list_allowed(self, player: Player, parameters: list[str]) -> None:
        if not 2 <= len(parameters) <= 3:
            self._syntax_error(player, "listallowed")
            return

        name = parameters[1]
        names = self.service.list_allowed(name)
        page = self._page_number(player, parameters, 2)
        if page is None:
            return
        self._send_page(player, names, page, "Allowed Users", f"listallowed {name}")

    async def _resize(self, player: Player, parameters: list[str]) -> None:
        if len(parameters) != 4:
            self._syntax_error(player, "resize")
            return

        name = parameters[1]
        width, height = _parse_int(parameters[2]), _parse_int(parameters[3])
        if width is None or height is None:
            self._error(player, "Invalid dimensions.")
            return

        await self.service.resize(player, name, width, height)
        self._success(player, f"Set warpplate '{name}' size to {width}x{height}.")

    async def _set(self, player: Player, parameters: list[str]) -> None:
        if not player.is_real:
            self._error(player, "You must use this command in-game.")
            return
        if len(parameters) != 2:
            self._syntax_error(player, "set")
            return

        name = parameters[1]
        await self.service.set(player, name, player.tile_x, player.tile_y)
        self._success(player, f"Set warpplate '{name}' at your position.")

    async def _tag(self, player: Player, parameters: list[str]) -> None:
        if len(parameters) != 3:
            self._syntax_error(player, "tag")
            return

        name, tag = parameters[1], parameters[2]
        await self.service.set_tag(player, name, tag)
        self._success(player, f"Set the tag for warpplate '{name}' to '{tag}'.")

    async def _toggle(self, player: Player, parameters: list[str]) -> None:
        accepts = self.service.toggle_warps(player)
        self._success(
            player, f"You are {'now' if accepts else 'no longer'} affected by warpplates."
        )

    async def _toggle_public(self, player: Player, parameters: list[str]) -> None:
        if len(parameters) != 2:
            self._syntax_error(player, "togglepublic")
            return

        warpplate = await self.service.set_public(player, parameters[1])
        self._success(
            player, f"This warpplate is {'now' if warpplate.is_public else 'no longer'} public."
        )

    def _page_number(self, player: Player, parameters: list[str], index: int) -> int | None:
        """Read an optional 1-based page number, reporting invalid input."""
        if len(parameters) <= index:
            return 1
        page = _parse_int(parameters[index])
        if page is None or page < 1:
            self._error(player, f"\"{parameters[index]}\" is not a valid page number.")
            return None
        return page

    def _send_page(
        self, player: Player, lines: list[str], page: int, title: str, command: str
    ) -> None:
        total_pages = max(1, math.ceil(len(lines) / LINES_PER_PAGE))
        if page > total_pages:
            self._error(player, f"Page number exceeds the maximum of {total_pages}.")
            return

        self.host.send_message(player, MessageKind.SUCCESS, f"{title} ({page}/{total_pages})")
        start = (page - 1) * LINES_PER_PAGE
        for line in lines[start : start + LINES_PER_PAGE]:
            self._info_message(player, line)
        if page < total_pages:
            self._info_message(
                player, f"Type {SPECIFIER}warpplate {command} {page + 1} for more."
            )
