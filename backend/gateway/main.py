"""
Gateway Application

Startup order:
1. core routes (health, home, API index, docs, debug-routes)
2. route modules discovered in ROUTES_DIR
3. 404 / error handlers and CORS headers
4. listen on PORT
"""

import time
import logging
from pathlib import Path
from typing import Optional, Union

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from . import config
from .core_routes import router as core_router
from .errors import install_error_handlers
from .loader import load_all_routes
from .registry import EndpointRegistry

logger = logging.getLogger(__name__)


def install_cors_headers(app: FastAPI) -> None:
    """Allow every origin on every response, errors included."""

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in config.CORS_HEADERS.items():
            response.headers[name] = value
        return response


def create_app(
    routes_dir: Optional[Union[str, Path]] = None,
    public_dir: Optional[Union[str, Path]] = None,
) -> FastAPI:
    """Build the gateway with every route module in ``routes_dir`` mounted."""
    routes_dir = Path(routes_dir or config.ROUTES_DIR)
    public_dir = Path(public_dir or config.PUBLIC_DIR)

    # /api/docs is the only documentation surface
    app = FastAPI(
        title=config.SERVER_NAME,
        version=config.SERVER_VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.registry = EndpointRegistry()
    app.state.started_at = time.monotonic()
    app.state.public_dir = public_dir

    logger.info("[Gateway] Registering core routes")
    app.include_router(core_router)
    if public_dir.is_dir():
        app.mount("/static", StaticFiles(directory=public_dir), name="static")

    app.state.route_load_results = load_all_routes(app, routes_dir, app.state.registry)

    logger.info("[Gateway] Registering error handlers")
    install_error_handlers(app)
    # Added last so it wraps the error middleware and decorates 500s too
    install_cors_headers(app)

    return app


def run() -> None:
    import uvicorn

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = create_app()
    base_url = f"http://localhost:{config.PORT}"
    logger.info(f"[Gateway] Server running on port {config.PORT}")
    logger.info(f"[Gateway] Total endpoints: {len(app.state.registry)}")
    logger.info(f"[Gateway] Home: {base_url}")
    logger.info(f"[Gateway] API Docs: {base_url}/api/docs")
    logger.info(f"[Gateway] Debug: {base_url}/debug/routes")

    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
