"""
Gateway Errors and Fallback Handlers

Every failure is answered with a JSON body carrying ``success: false``:
- routing misses (unknown path or unaccepted method) -> 404
- deliberate HTTPExceptions keep their status code
- anything else escaping a handler -> 500 "Internal server error"
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

NOT_FOUND_HINT = "Visit /debug/routes to see all routes"


class GatewayError(Exception):
    """Base class for errors raised by the gateway."""


class UpstreamFetchError(GatewayError):
    """An upstream index or binary fetch failed."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url


class RegistryFrozenError(GatewayError):
    """The endpoint registry was modified after loading finished."""


def not_found_body(request: Request) -> dict:
    return {
        "success": False,
        "error": "Endpoint not found",
        "path": request.url.path,
        "method": request.method,
        "hint": NOT_FOUND_HINT,
    }


def internal_error_body(exc: Exception) -> dict:
    return {
        "success": False,
        "error": "Internal server error",
        "details": str(exc),
    }


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Starlette answers a path match with the wrong method as 405; both count as a miss
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content=not_found_body(request))

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def upstream_error_handler(request: Request, exc: UpstreamFetchError) -> JSONResponse:
    logger.error(f"[Gateway] Upstream failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=internal_error_body(exc))


def install_error_handlers(app: FastAPI) -> None:
    """
    Install the 404 responder and the catch-all 500 middleware.

    Must run after every route is mounted: the error middleware becomes the
    innermost user middleware and wraps the whole routing table.
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(UpstreamFetchError, upstream_error_handler)

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(f"[Gateway] Error: {e}")
            return JSONResponse(status_code=500, content=internal_error_body(e))
