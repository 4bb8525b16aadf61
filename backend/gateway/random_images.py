"""
Random Image Routes

Builds GET endpoints that each proxy one random image from an upstream index,
together with the metadata describing them.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from .models import EndpointDescriptor
from .proxy_fetcher import (
    Selector,
    UrlExtractor,
    binary_response,
    fetch_random_binary,
    get_http_client,
    url_from_string,
)

logger = logging.getLogger(__name__)


@dataclass
class RandomImageSource:
    """One upstream image index exposed at ``path``."""
    name: str
    path: str
    index_url: str
    extract_url: UrlExtractor = url_from_string
    description: str = ""
    selector: Optional[Selector] = None

    def descriptor(self) -> EndpointDescriptor:
        return EndpointDescriptor(
            name=self.name,
            path=self.path,
            method="GET",
            description=self.description,
            responseBinary=True,
            params=[],
        )


def _make_handler(source: RandomImageSource):
    async def handler(client: httpx.AsyncClient = Depends(get_http_client)) -> Response:
        result = await fetch_random_binary(
            source.index_url,
            source.extract_url,
            selector=source.selector,
            client=client,
        )
        logger.info(f"[RandomImage] {source.path}: {len(result.content)} bytes")
        return binary_response(result)

    return handler


def build_random_image_router(
    sources: Sequence[RandomImageSource],
    tags: Optional[List[str]] = None,
) -> Tuple[APIRouter, List[EndpointDescriptor]]:
    """Return a router serving every source plus the matching metadata list."""
    router = APIRouter(tags=tags or ["Random"])

    for source in sources:
        router.add_api_route(
            source.path,
            _make_handler(source),
            methods=["GET"],
            name=source.name,
            summary=source.name,
            description=source.description,
            response_class=Response,
        )

    return router, [source.descriptor() for source in sources]
