"""
Route loader tests

A broken route module must never stop the others from loading.
"""

from fastapi import FastAPI

from gateway.loader import discover_route_files, load_all_routes
from gateway.registry import EndpointRegistry
from conftest import BROKEN_ROUTE, VALID_ROUTE_X, write_route_module


def route_source(path: str, name: str) -> str:
    return f'''
from fastapi import APIRouter

router = APIRouter()


@router.get("{path}")
async def handler():
    return {{"name": "{name}"}}


metadata = [{{"name": "{name}", "path": "{path}", "method": "GET", "params": []}}]
'''


def mounted_paths(app: FastAPI) -> set:
    return {route.path for route in app.routes}


class TestDiscovery:
    def test_sorted_and_filtered(self, routes_dir):
        for name in ("route_b.py", "route_a.py", "_helpers.py", "notes.txt"):
            (routes_dir / name).write_text("")

        files = discover_route_files(routes_dir)

        assert [f.name for f in files] == ["route_a.py", "route_b.py"]

    def test_missing_directory(self, tmp_path):
        assert discover_route_files(tmp_path / "nope") == []


class TestLoadAllRoutes:
    def test_corrupt_module_among_valid_ones(self, routes_dir):
        """One broken module among three valid ones"""
        write_route_module(routes_dir, "a_first.py", route_source("/one", "One"))
        write_route_module(routes_dir, "b_broken.py", BROKEN_ROUTE)
        write_route_module(routes_dir, "c_second.py", route_source("/two", "Two"))
        write_route_module(routes_dir, "d_third.py", route_source("/three", "Three"))

        app = FastAPI()
        registry = EndpointRegistry()
        results = load_all_routes(app, routes_dir, registry)

        assert [r.file for r in results] == ["a_first.py", "b_broken.py", "c_second.py", "d_third.py"]
        assert [r.loaded for r in results] == [True, False, True, True]
        assert "exploded" in results[1].error

        assert len(registry) == 3
        assert [d.name for d in registry] == ["One", "Two", "Three"]
        assert {"/one", "/two", "/three"} <= mounted_paths(app)

    def test_registry_frozen_after_load(self, routes_dir):
        write_route_module(routes_dir, "route_x.py", VALID_ROUTE_X)

        registry = EndpointRegistry()
        load_all_routes(FastAPI(), routes_dir, registry)

        assert registry.frozen

    def test_syntax_error_isolated(self, routes_dir):
        write_route_module(routes_dir, "a_syntax.py", "def broken(:\n")
        write_route_module(routes_dir, "b_valid.py", VALID_ROUTE_X)

        registry = EndpointRegistry()
        results = load_all_routes(FastAPI(), routes_dir, registry)

        assert [r.loaded for r in results] == [False, True]
        assert [d.path for d in registry] == ["/x"]

    def test_unreadable_metadata_keeps_router(self, routes_dir):
        """Metadata without a path is skipped, the router still mounts"""
        write_route_module(routes_dir, "route_bad.py", '''
from fastapi import APIRouter

router = APIRouter()


@router.get("/bad")
async def bad():
    return {}


metadata = [{"name": "missing path"}]
''')

        app = FastAPI()
        registry = EndpointRegistry()
        results = load_all_routes(app, routes_dir, registry)

        assert results[0].loaded is True
        assert results[0].router_mounted is True
        assert "path" in results[0].metadata_error
        assert len(registry) == 0
        assert "/bad" in mounted_paths(app)

    def test_free_form_params_accepted(self, routes_dir):
        """Params need no fixed schema"""
        write_route_module(routes_dir, "route_q.py", '''
from fastapi import APIRouter

router = APIRouter()


@router.get("/q")
async def q():
    return {}


metadata = {"name": "Q", "path": "/q", "method": "GET", "params": [{"query": "text"}]}
''')

        app = FastAPI()
        registry = EndpointRegistry()
        results = load_all_routes(app, routes_dir, registry)

        assert results[0].loaded is True
        assert results[0].metadata_error is None
        assert [d.path for d in registry] == ["/q"]
        assert registry.to_list()[0]["params"] == [{"query": "text"}]
        assert "/q" in mounted_paths(app)

    def test_registration_failure_isolated(self, routes_dir, monkeypatch):
        write_route_module(routes_dir, "a_explode.py", route_source("/explode", "Explode"))
        write_route_module(routes_dir, "b_fine.py", route_source("/fine", "Fine"))

        app = FastAPI()
        include_router = app.include_router

        def include_or_fail(router, **kwargs):
            if any(route.path == "/explode" for route in router.routes):
                raise RuntimeError("cannot mount")
            return include_router(router, **kwargs)

        monkeypatch.setattr(app, "include_router", include_or_fail)

        registry = EndpointRegistry()
        results = load_all_routes(app, routes_dir, registry)

        assert [r.loaded for r in results] == [False, True]
        assert results[0].error == "cannot mount"
        assert [d.name for d in registry] == ["Fine"]
        assert "/fine" in mounted_paths(app)
        assert "/explode" not in mounted_paths(app)

    def test_router_without_metadata(self, routes_dir):
        write_route_module(routes_dir, "route_hidden.py", '''
from fastapi import APIRouter

router = APIRouter()


@router.get("/hidden")
async def hidden():
    return {}
''')

        app = FastAPI()
        registry = EndpointRegistry()
        results = load_all_routes(app, routes_dir, registry)

        assert results[0].router_mounted is True
        assert results[0].endpoints == 0
        assert len(registry) == 0
        assert "/hidden" in mounted_paths(app)

    def test_metadata_without_router(self, routes_dir):
        write_route_module(routes_dir, "route_docs.py", '''
metadata = {"name": "Planned", "path": "/planned", "method": "POST"}
''')

        app = FastAPI()
        registry = EndpointRegistry()
        results = load_all_routes(app, routes_dir, registry)

        assert results[0].router_mounted is False
        assert [(d.path, d.method) for d in registry] == [("/planned", "POST")]
        assert "/planned" not in mounted_paths(app)

    def test_empty_directory(self, routes_dir):
        registry = EndpointRegistry()
        assert load_all_routes(FastAPI(), routes_dir, registry) == []
        assert len(registry) == 0
