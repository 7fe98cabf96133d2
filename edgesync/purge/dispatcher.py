"""
Cache invalidation strategies.

BatchPurgeStrategy - Tencent CDN: flat URL lists, up to 1000 per request.
ZonePurgeStrategy  - EdgeOne: URLs are grouped per zone, checked against the
                     zone's purge quota and submitted as purge tasks.

Both isolate failures per submission: a batch or task that still fails after
retries is reported and skipped, and the next one is attempted. Zone lookup
and quota fetch failures are not isolated and propagate to the caller.
"""

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

from ..core.constants import CACHE_TYPE_CDN, CACHE_TYPE_EDGEONE, CDN_PURGE_BATCH_SIZE
from ..core.formatting import chunked
from ..core.logging import debug_log
from ..core.retry import RetryPolicy, with_retry
from ..ui import display
from .tasks import (
    PurgeKind,
    PurgeReport,
    PurgeTask,
    ZoneBinding,
    find_zone,
    group_by_main_domain,
    is_valid_url,
    plan_zone_tasks,
)


class ZoneNotFoundError(LookupError):
    """No edge zone covers a domain that has URLs to refresh."""

    def __init__(self, main_domain: str):
        self.main_domain = main_domain
        super().__init__(f"no EdgeOne zone found for {main_domain}")


class BatchPurgeStrategy:
    """Flat URL purge in fixed-size batches (no zones, no quota check)."""

    def __init__(
        self,
        client,
        retry_policy: Optional[RetryPolicy] = None,
        batch_size: int = CDN_PURGE_BATCH_SIZE,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()
        self.batch_size = batch_size
        self._sleep = sleep

    async def invalidate(self, urls: List[str]) -> PurgeReport:
        report = PurgeReport(urls=len(urls))
        for batch in chunked(urls, self.batch_size):
            result = await with_retry(
                self.retry_policy,
                lambda: self.client.purge_urls(batch),
                description=f"purge {len(batch)} urls",
                sleep=self._sleep,
            )
            if result.ok:
                report.submitted += 1
                report.refreshed += len(batch)
                display.purge_batch_ok(len(batch))
            else:
                report.failed += 1
                display.purge_batch_failed(len(batch), result.error)
        return report


class ZonePurgeStrategy:
    """Zone-resolved, quota-aware purge tasks with host-level fallback."""

    def __init__(
        self,
        client,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    async def resolve_zones(self, main_domains: List[str]) -> Dict[str, ZoneBinding]:
        """
        Bind each main domain to a zone.

        Zones are listed once per call. Raises ZoneNotFoundError for the first
        domain without a matching zone.
        """
        zones = await self.client.list_zones()
        bindings = {}
        for domain in main_domains:
            zone = find_zone(zones, domain)
            if zone is None:
                raise ZoneNotFoundError(domain)
            bindings[domain] = ZoneBinding(main_domain=domain, zone_id=zone.zone_id)
            display.zone_bound(domain, zone.zone_id)
        return bindings

    async def _submit(self, zone_id: str, task: PurgeTask, report: PurgeReport) -> bool:
        result = await with_retry(
            self.retry_policy,
            lambda: self.client.create_purge_task(zone_id, task.kind, task.targets, task.method),
            description=f"{task.kind.value} x{len(task.targets)} on {zone_id}",
            sleep=self._sleep,
        )
        if not result.ok:
            report.failed += 1
            display.purge_task_failed(task.kind.value, len(task.targets), zone_id, result.error)
            return False

        report.submitted += 1
        display.purge_task_ok(task.kind.value, len(task.targets), zone_id)
        rejected = (result.value or {}).get("FailedList") or []
        if rejected:
            display.purge_targets_rejected([item.get("Target", "") if isinstance(item, dict) else str(item) for item in rejected])
        return True

    async def invalidate(self, urls: List[str]) -> PurgeReport:
        report = PurgeReport(urls=len(urls))

        for url in urls:
            if not is_valid_url(url):
                display.purge_skipped_malformed(url)
                report.skipped = True
                return report

        groups = group_by_main_domain(urls)
        if not groups:
            return report

        bindings = await self.resolve_zones(list(groups))

        for domain, domain_urls in groups.items():
            zone_id = bindings[domain].zone_id
            quota = await self.client.get_quota(zone_id)
            debug_log(
                f"quota {zone_id}: batch={quota.batch_limit} daily={quota.daily_limit} "
                f"available={quota.daily_available} pending={len(domain_urls)}"
            )

            tasks = plan_zone_tasks(domain_urls, quota)
            if tasks and tasks[0].kind == PurgeKind.HOST_INVALIDATE:
                display.host_fallback(domain, len(domain_urls), quota.daily_available)

            for task in tasks:
                if await self._submit(zone_id, task, report):
                    # A host invalidation covers every pending URL of the domain
                    covered = domain_urls if task.kind == PurgeKind.HOST_INVALIDATE else task.targets
                    report.refreshed += len(covered)

        return report


def create_dispatcher(
    cache_type: str,
    client,
    retry_policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
):
    """Pick the invalidation strategy for a cache backend."""
    if cache_type == CACHE_TYPE_CDN:
        return BatchPurgeStrategy(client, retry_policy, sleep=sleep)
    if cache_type == CACHE_TYPE_EDGEONE:
        return ZonePurgeStrategy(client, retry_policy, sleep=sleep)
    raise ValueError(f"unknown cache type: {cache_type!r}")
