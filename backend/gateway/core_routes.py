"""
Core Routes

Fixed endpoints mounted before any route module:
- GET /              - landing page
- GET /health        - status, uptime and registry size
- GET /api           - server info and condensed endpoint list
- GET /api/docs      - full endpoint metadata
- GET /debug/routes  - live routing table
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse

from .config import SERVER_NAME, SERVER_VERSION
from .registry import EndpointRegistry

router = APIRouter(tags=["Core"])


def _registry(request: Request) -> EndpointRegistry:
    return request.app.state.registry


def collect_routes(routes: list) -> list:
    """Path and accepted methods of every route in a routing table."""
    collected = []
    for route in routes:
        methods = getattr(route, "methods", None)
        if not methods:
            continue
        collected.append({"path": route.path, "methods": sorted(methods)})
    return collected


@router.get("/health")
async def health(request: Request):
    uptime = int(time.monotonic() - request.app.state.started_at)
    return {
        "status": "ok",
        "uptime": max(uptime, 0),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "total_endpoints": len(_registry(request)),
    }


@router.get("/")
async def home(request: Request):
    index_file = request.app.state.public_dir / "index.html"
    if not index_file.is_file():
        raise HTTPException(status_code=404, detail="Landing page not found")
    return FileResponse(index_file, media_type="text/html")


@router.get("/api")
async def api_index(request: Request):
    registry = _registry(request)
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "total_endpoints": len(registry),
        "endpoints": registry.summaries(),
    }


@router.get("/api/docs")
async def api_docs(request: Request):
    registry = _registry(request)
    return {
        "success": True,
        "total": len(registry),
        "endpoints": registry.to_list(),
    }


@router.get("/debug/routes")
async def debug_routes(request: Request):
    routes = collect_routes(request.app.routes)
    return {
        "total": len(routes),
        "routes": routes,
    }
