"""
Proxy Fetcher

Two-stage passthrough fetch used by the random image routes:
1. GET a JSON index (a list of image references)
2. Pick one entry uniformly at random
3. GET the referenced image as raw bytes

No caching and no retry: any failure raises UpstreamFetchError.
"""

import random
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import httpx
from fastapi.responses import Response

from .config import BINARY_FETCH_TIMEOUT, INDEX_FETCH_TIMEOUT, USER_AGENT
from .errors import UpstreamFetchError

logger = logging.getLogger(__name__)

# All known sources serve JPEG; the payload is not inspected.
DEFAULT_CONTENT_TYPE = "image/jpeg"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

Selector = Callable[[Sequence[Any]], Any]
UrlExtractor = Callable[[Any], str]


@dataclass
class ProxiedBinary:
    """Bytes fetched from an upstream source."""
    content: bytes
    content_type: str
    source_url: str = ""


# ============================================
# Entry selection / URL extraction
# ============================================

def random_index(length: int, rng: Optional[random.Random] = None) -> int:
    """Uniform index in [0, length)."""
    if length <= 0:
        raise ValueError("Cannot pick from an empty index")
    return (rng or random).randrange(length)


def choose_uniform(entries: Sequence[Any], rng: Optional[random.Random] = None) -> Any:
    return entries[random_index(len(entries), rng)]


def url_from_string(entry: Any) -> str:
    """Index entries that are the image URL itself."""
    if not isinstance(entry, str) or not entry:
        raise UpstreamFetchError(f"Index entry is not a URL: {entry!r}")
    return entry


def url_from_field(field: str = "url") -> UrlExtractor:
    """Index entries that are objects holding the image URL under ``field``."""

    def extract(entry: Any) -> str:
        if not isinstance(entry, dict):
            raise UpstreamFetchError(f"Index entry is not an object: {entry!r}")
        url = entry.get(field)
        if not isinstance(url, str) or not url:
            raise UpstreamFetchError(f"Index entry has no '{field}' field")
        return url

    return extract


# ============================================
# HTTP
# ============================================

def create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


async def get_http_client():
    """FastAPI dependency: one client per request, closed afterwards."""
    async with create_http_client() as client:
        yield client


async def _get(client: httpx.AsyncClient, url: str, timeout: float) -> httpx.Response:
    try:
        response = await client.get(url, timeout=timeout)
        response.raise_for_status()
    except httpx.TimeoutException as e:
        logger.error(f"[ProxyFetcher] Timeout after {timeout:g}s: {url[:80]}")
        raise UpstreamFetchError(f"timeout of {timeout:g}s exceeded", url) from e
    except httpx.HTTPStatusError as e:
        logger.error(f"[ProxyFetcher] HTTP error {e.response.status_code}: {url[:80]}")
        raise UpstreamFetchError(
            f"Request failed with status code {e.response.status_code}", url
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"[ProxyFetcher] Fetch error: {e}")
        raise UpstreamFetchError(str(e) or type(e).__name__, url) from e
    return response


async def fetch_index(client: httpx.AsyncClient, index_url: str, timeout: float = INDEX_FETCH_TIMEOUT) -> list:
    """Fetch and validate a JSON image index. Must be a non-empty list."""
    response = await _get(client, index_url, timeout)

    try:
        entries = response.json()
    except ValueError as e:
        raise UpstreamFetchError("Image index is not valid JSON", index_url) from e

    if not isinstance(entries, list):
        raise UpstreamFetchError("Image index is not a list", index_url)
    if not entries:
        raise UpstreamFetchError("Image index is empty", index_url)

    return entries


async def _fetch_random_binary(
    client: httpx.AsyncClient,
    index_url: str,
    extract_url: UrlExtractor,
    selector: Selector,
    index_timeout: float,
    binary_timeout: float,
) -> ProxiedBinary:
    entries = await fetch_index(client, index_url, index_timeout)
    image_url = extract_url(selector(entries))

    logger.info(f"[ProxyFetcher] Fetching: {image_url[:80]}")
    response = await _get(client, image_url, binary_timeout)

    return ProxiedBinary(
        content=response.content,
        content_type=DEFAULT_CONTENT_TYPE,
        source_url=image_url,
    )


async def fetch_random_binary(
    index_url: str,
    extract_url: UrlExtractor = url_from_string,
    *,
    selector: Optional[Selector] = None,
    client: Optional[httpx.AsyncClient] = None,
    index_timeout: float = INDEX_FETCH_TIMEOUT,
    binary_timeout: float = BINARY_FETCH_TIMEOUT,
) -> ProxiedBinary:
    """
    Fetch the index at ``index_url``, pick an entry and fetch the image it points to.

    Args:
        index_url: URL of a JSON list of image references
        extract_url: turns the chosen entry into an image URL
        selector: picks one entry from the list (uniform random by default)
        client: shared client; a temporary one is opened when omitted
        index_timeout: seconds allowed for the index fetch
        binary_timeout: seconds allowed for the image fetch

    Raises:
        UpstreamFetchError: on timeout, non-2xx status, malformed or empty index
    """
    selector = selector or choose_uniform

    if client is not None:
        return await _fetch_random_binary(
            client, index_url, extract_url, selector, index_timeout, binary_timeout
        )

    async with create_http_client() as own_client:
        return await _fetch_random_binary(
            own_client, index_url, extract_url, selector, index_timeout, binary_timeout
        )


def binary_response(result: ProxiedBinary) -> Response:
    """Wrap fetched bytes in a response that clients must not cache."""
    return Response(
        content=result.content,
        media_type=result.content_type,
        headers=dict(NO_CACHE_HEADERS),
    )
