"""
Tencent CDN client: flat URL cache purge.
"""

from typing import List

from .api_client import CloudApiClient


class CdnClient:
    """Wraps the CDN actions a deploy needs."""

    def __init__(self, api: CloudApiClient):
        self.api = api

    async def purge_urls(self, urls: List[str]) -> dict:
        """Purge cached copies of up to 1000 URLs."""
        return await self.api.request("PurgeUrlsCache", {"Urls": list(urls)})
