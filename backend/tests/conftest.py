"""
Gateway test configuration

Fixtures for building throwaway route directories and fake upstream servers.
Upstream HTTP is never contacted: every test client runs on httpx.MockTransport.
"""

import json
import sys
import textwrap
from pathlib import Path

import httpx
import pytest

# Add backend directory to the import path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))


# ============================================
# Route module fixtures
# ============================================

VALID_ROUTE_X = '''
from fastapi import APIRouter

router = APIRouter()


@router.get("/x")
async def x():
    return {"ok": True}


metadata = {"name": "X", "path": "/x", "method": "GET", "params": []}
'''

BROKEN_ROUTE = '''
raise RuntimeError("module exploded on import")
'''


def write_route_module(directory: Path, name: str, source: str) -> Path:
    """Write a route module file into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(textwrap.dedent(source))
    return path


@pytest.fixture
def routes_dir(tmp_path):
    """Empty directory for route modules."""
    path = tmp_path / "routes"
    path.mkdir()
    return path


@pytest.fixture
def public_dir(tmp_path):
    """Directory holding a minimal landing page."""
    path = tmp_path / "public"
    path.mkdir()
    (path / "index.html").write_text("<html><body>landing</body></html>")
    return path


# ============================================
# Fake upstream
# ============================================

class FakeUpstream:
    """
    Serves canned responses by URL and records every request.

    Values may be a list/dict (served as JSON), bytes (served as binary),
    an int (empty response with that status) or an exception instance.
    """

    def __init__(self, responses: dict):
        self.responses = responses
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url not in self.responses:
            return httpx.Response(404, request=request)

        value = self.responses[url]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, int):
            return httpx.Response(value, request=request)
        if isinstance(value, bytes):
            return httpx.Response(200, content=value, headers={"content-type": "image/png"})
        if isinstance(value, str):
            return httpx.Response(200, text=value, headers={"content-type": "application/json"})
        return httpx.Response(200, content=json.dumps(value).encode(), headers={"content-type": "application/json"})

    @property
    def urls(self):
        return [str(r.url) for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self), follow_redirects=True)


@pytest.fixture
def fake_upstream():
    """Factory: fake_upstream({url: response}) -> FakeUpstream"""
    return FakeUpstream


def assert_not_found(response, path: str, method: str = "GET"):
    """Assert a response is the gateway's 404 body for ``path``."""
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Endpoint not found"
    assert body["path"] == path
    assert body["method"] == method
    assert "hint" in body
