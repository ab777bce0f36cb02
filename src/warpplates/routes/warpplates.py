"""Warpplate administration endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from warpplates.host import Player
from warpplates.routes.dependencies import get_issuer, get_service
from warpplates.schemas import Warpplate, WarpplateCreate, WarpplateUpdate
from warpplates.service import WarpplateService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/warpplates", tags=["warpplates"])


class AllowedToggle(BaseModel):
    """Result of toggling a user on a warpplate's allow-list."""

    username: str
    allowed: bool


@router.get("", response_model=list[Warpplate])
async def list_warpplates(
    service: WarpplateService = Depends(get_service),
) -> list[Warpplate]:
    """List the active world's warpplates, sorted by name."""
    return sorted(service.registry.all(), key=lambda w: w.name)


@router.post("", response_model=Warpplate, status_code=status.HTTP_201_CREATED)
async def create_warpplate(
    body: WarpplateCreate,
    service: WarpplateService = Depends(get_service),
    issuer: Player = Depends(get_issuer),
) -> Warpplate:
    """
    Define a warpplate with its origin at the given tile.

    Returns 400 if the name is taken or the tile lies inside another warpplate.
    """
    return await service.set(issuer, body.name, body.x, body.y)


@router.get("/{name}", response_model=Warpplate)
async def get_warpplate(
    name: str,
    service: WarpplateService = Depends(get_service),
) -> Warpplate:
    """Get a warpplate by name."""
    return service.get(name)


@router.patch("/{name}", response_model=Warpplate)
async def update_warpplate(
    name: str,
    body: WarpplateUpdate,
    service: WarpplateService = Depends(get_service),
    issuer: Player = Depends(get_issuer),
) -> Warpplate:
    """
    Edit a warpplate.

    Each provided field needs the permission its chat command requires. All
    fields are checked before anything is stored, so a rejected request leaves
    the warpplate unchanged. A size change needs only one of width/height; the
    other keeps its current value.
    """
    return await service.edit(issuer, name, body)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_warpplate(
    name: str,
    service: WarpplateService = Depends(get_service),
    issuer: Player = Depends(get_issuer),
) -> None:
    """Delete a warpplate and its allow-list."""
    await service.delete(issuer, name)
    logger.info("Warpplate '%s' deleted by %s", name, issuer.name)


@router.get("/{name}/allowed", response_model=list[str])
async def list_allowed(
    name: str,
    service: WarpplateService = Depends(get_service),
) -> list[str]:
    """Names of the users allowed on a warpplate."""
    return service.list_allowed(name)


@router.post("/{name}/allowed/{username}", response_model=AllowedToggle)
async def toggle_allowed(
    name: str,
    username: str,
    service: WarpplateService = Depends(get_service),
    issuer: Player = Depends(get_issuer),
) -> AllowedToggle:
    """Allow ``username`` on the warpplate, or revoke them if already allowed."""
    username, allowed = await service.toggle_allowed(issuer, name, username)
    return AllowedToggle(username=username, allowed=allowed)
