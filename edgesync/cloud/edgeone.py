"""
EdgeOne client: zones, purge quota and purge tasks.
"""

from typing import Iterable, List

from ..purge.tasks import PurgeKind, PurgeMethod, Quota, Zone
from .api_client import CloudApiClient, CloudApiError


class EdgeOneClient:
    """
    Wraps the EdgeOne (teo) actions a deploy needs.

    list_zones() follows Offset/Limit pagination until every zone is read.
    """

    ZONE_PAGE_SIZE = 100

    def __init__(self, api: CloudApiClient):
        self.api = api

    async def list_zones(self) -> List[Zone]:
        zones: List[Zone] = []
        offset = 0
        while True:
            body = await self.api.request("DescribeZones", {"Offset": offset, "Limit": self.ZONE_PAGE_SIZE})
            page = body.get("Zones") or []
            zones.extend(Zone(name=z.get("ZoneName", ""), zone_id=z.get("ZoneId", "")) for z in page)
            offset += len(page)
            if not page or offset >= body.get("TotalCount", 0):
                break
        return zones

    async def get_quota(self, zone_id: str) -> Quota:
        """URL purge quota for a zone."""
        body = await self.api.request("DescribeContentQuota", {"ZoneId": zone_id})
        for entry in body.get("PurgeQuota") or []:
            if entry.get("Type") == PurgeKind.URL_PURGE.value:
                return Quota(
                    batch_limit=int(entry.get("Batch", 0)),
                    daily_limit=int(entry.get("Daily", 0)),
                    daily_available=int(entry.get("DailyAvailable", 0)),
                )
        raise CloudApiError("QuotaUnavailable", f"no {PurgeKind.URL_PURGE.value} quota reported for zone {zone_id}")

    async def create_purge_task(
        self,
        zone_id: str,
        kind: PurgeKind,
        targets: Iterable[str],
        method: PurgeMethod,
    ) -> dict:
        return await self.api.request("CreatePurgeTask", {
            "ZoneId": zone_id,
            "Type": kind.value,
            "Method": method.value,
            "Targets": list(targets),
        })
