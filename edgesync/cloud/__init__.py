"""
Tencent Cloud API clients (CDN and EdgeOne).
"""

from ..core.constants import CACHE_TYPE_CDN, CACHE_TYPE_EDGEONE
from .api_client import CloudApiClient, CloudApiError, Credentials, create_common_client, parse_response
from .cdn import CdnClient
from .edgeone import EdgeOneClient


def create_cache_client(cache_type: str, api: CloudApiClient):
    """Wrap an API client in the backend-specific client for cache_type."""
    if cache_type == CACHE_TYPE_CDN:
        return CdnClient(api)
    if cache_type == CACHE_TYPE_EDGEONE:
        return EdgeOneClient(api)
    raise ValueError(f"unknown cache type: {cache_type!r}")


__all__ = [
    "CloudApiClient",
    "CloudApiError",
    "Credentials",
    "create_common_client",
    "parse_response",
    "CdnClient",
    "EdgeOneClient",
    "create_cache_client",
]
