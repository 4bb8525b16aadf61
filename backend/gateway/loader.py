"""
Route Loader

Discovers route modules in a directory at startup, mounts their routers and
collects their metadata into the endpoint registry.

A route module may export:
- ``router``: a fastapi.APIRouter, included at the root prefix
- ``metadata``: an EndpointDescriptor / dict, or a list of them

A module that fails to import or to register is logged and skipped; it never
stops the remaining modules or the server from starting.
"""

import sys
import logging
import importlib.util
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import List, Optional, Union

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute
from pydantic import ValidationError

from .models import normalize_metadata
from .registry import EndpointRegistry

logger = logging.getLogger(__name__)

MODULE_NAMESPACE = "gateway_routes"


@dataclass
class RouteLoadResult:
    """Outcome of loading one route module file."""
    file: str
    loaded: bool
    router_mounted: bool = False
    endpoints: int = 0
    error: Optional[str] = None
    metadata_error: Optional[str] = None


def discover_route_files(directory: Union[str, Path]) -> List[Path]:
    """Route module files in ``directory``, sorted by file name."""
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning(f"[RouteLoader] Routes directory not found: {directory}")
        return []

    return sorted(
        (p for p in directory.glob("*.py") if p.is_file() and not p.name.startswith("_")),
        key=lambda p: p.name,
    )


def import_route_module(path: Path) -> ModuleType:
    """Import a route module by file path under a private namespace."""
    module_name = f"{MODULE_NAMESPACE}.{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def _log_router(router: APIRouter) -> None:
    for route in router.routes:
        if isinstance(route, APIRoute):
            methods = ", ".join(sorted(route.methods or []))
            logger.info(f"[RouteLoader]     -> {methods} {route.path}")


def load_route_module(app: FastAPI, path: Path, registry: EndpointRegistry) -> RouteLoadResult:
    """
    Load one route module and register it with ``app`` and ``registry``.

    Import and registration failures mark the module as not loaded. Metadata
    that cannot be read is skipped on its own; the router is still mounted.
    """
    try:
        module = import_route_module(path)
    except Exception as e:
        logger.error(f"[RouteLoader]   Failed: {path.name}: {e}")
        return RouteLoadResult(file=path.name, loaded=False, error=str(e) or type(e).__name__)

    router = getattr(module, "router", None)
    result = RouteLoadResult(file=path.name, loaded=True)

    try:
        descriptors = normalize_metadata(getattr(module, "metadata", None))
    except (ValidationError, TypeError) as e:
        logger.warning(f"[RouteLoader]   Unreadable metadata in {path.name}: {e}")
        descriptors = []
        result.metadata_error = str(e)

    try:
        if isinstance(router, APIRouter):
            app.include_router(router)
            result.router_mounted = True
            logger.info(f"[RouteLoader]   Router registered: {path.name}")
            _log_router(router)
        elif router is not None:
            logger.warning(f"[RouteLoader]   Ignoring non-APIRouter 'router' in {path.name}")

        if descriptors:
            result.endpoints = registry.extend(descriptors)
            logger.info(f"[RouteLoader]   Metadata collected: {result.endpoints} endpoint(s)")
    except Exception as e:
        logger.error(f"[RouteLoader]   Registration failed: {path.name}: {e}")
        result.loaded = False
        result.error = str(e) or type(e).__name__

    return result


def load_all_routes(
    app: FastAPI,
    directory: Union[str, Path],
    registry: EndpointRegistry,
) -> List[RouteLoadResult]:
    """
    Load every route module in ``directory`` and freeze the registry.

    Returns one RouteLoadResult per file, in load order.
    """
    logger.info(f"[RouteLoader] Loading routes from {directory}")

    results = [load_route_module(app, path, registry) for path in discover_route_files(directory)]
    registry.freeze()

    failed = [r.file for r in results if not r.loaded]
    logger.info(f"[RouteLoader] Total {len(registry)} endpoints loaded")
    if failed:
        logger.warning(f"[RouteLoader] {len(failed)} module(s) failed: {', '.join(failed)}")

    return results
