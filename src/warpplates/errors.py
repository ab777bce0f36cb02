"""Exceptions raised by warpplate operations."""


class WarpplateError(Exception):
    """Base class for warpplate errors."""


class WarpplateValidationError(WarpplateError):
    """A request referenced an unknown warpplate or carried invalid arguments."""


class WarpplateNotFoundError(WarpplateValidationError):
    """No warpplate with the requested name exists in the active world."""


class WarpplateAuthorizationError(WarpplateError):
    """The issuer lacks the permission an operation requires."""

    def __init__(self, permission: str, message: str):
        super().__init__(message)
        self.permission = permission


class WarpplateStorageError(WarpplateError):
    """Persisting or loading warpplates failed."""
