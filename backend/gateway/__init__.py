"""
Gateway Module

HTTP gateway that loads route modules from a directory at startup,
proxies random images from upstream indexes and documents its endpoints.
"""

from .errors import GatewayError, UpstreamFetchError, RegistryFrozenError
from .models import EndpointDescriptor, ParamDescriptor
from .registry import EndpointRegistry
from .loader import RouteLoadResult, load_all_routes
from .proxy_fetcher import ProxiedBinary, fetch_random_binary
from .main import create_app

__all__ = [
    "GatewayError",
    "UpstreamFetchError",
    "RegistryFrozenError",
    "EndpointDescriptor",
    "ParamDescriptor",
    "EndpointRegistry",
    "RouteLoadResult",
    "load_all_routes",
    "ProxiedBinary",
    "fetch_random_binary",
    "create_app",
]
