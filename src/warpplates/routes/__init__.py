"""REST surface for warpplate administration.

The host's REST API mounts the app returned by :func:`create_app`.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from warpplates.errors import (
    WarpplateAuthorizationError,
    WarpplateNotFoundError,
    WarpplateStorageError,
    WarpplateValidationError,
)
from warpplates.plugin import WarpplatesPlugin
from warpplates.routes.warpplates import router as warpplates_router

logger = logging.getLogger(__name__)


def create_app(plugin: WarpplatesPlugin) -> FastAPI:
    """Build the FastAPI app serving ``plugin``'s warpplates."""
    app = FastAPI(
        title="Warpplates API",
        description="Administration of automatic warpplates",
        version="0.1.0",
    )
    app.state.plugin = plugin
    app.include_router(warpplates_router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "initialized": plugin.initialized}

    @app.exception_handler(WarpplateNotFoundError)
    async def not_found_handler(request: Request, exc: WarpplateNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(WarpplateValidationError)
    async def validation_error_handler(request: Request, exc: WarpplateValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(WarpplateAuthorizationError)
    async def authorization_error_handler(request: Request, exc: WarpplateAuthorizationError):
        logger.warning(
            "Forbidden %s %s: missing %s", request.method, request.url, exc.permission
        )
        return JSONResponse(
            status_code=403,
            content={"detail": str(exc), "permission": exc.permission},
        )

    @app.exception_handler(WarpplateStorageError)
    async def storage_error_handler(request: Request, exc: WarpplateStorageError):
        """Storage failures mean the change was not applied; report 503."""
        logger.error("Storage error on %s %s: %s", request.method, request.url, exc)
        return JSONResponse(
            status_code=503,
            content={"detail": "Warpplate storage temporarily unavailable"},
        )

    return app


__all__ = ["create_app"]
