"""FastAPI dependencies for the warpplate REST surface."""

from fastapi import Header, HTTPException, Request, status

from warpplates.host import Player
from warpplates.service import WarpplateService


def get_service(request: Request) -> WarpplateService:
    """Return the plugin's service, or 503 until the plugin is initialized."""
    service = request.app.state.plugin.service
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Warpplates are not initialized yet",
        )
    return service


def get_issuer(
    request: Request,
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> Player:
    """Build the issuing player from the ``X-User-Id`` header.

    The host's REST layer authenticates the caller and forwards its user ID;
    permissions are then checked through the host like for chat commands.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID format",
        )

    host = request.app.state.plugin.host
    name = host.user_name(user_id) or f"user:{user_id}"
    return Player(index=-1, name=name, user_id=user_id, is_real=False)
