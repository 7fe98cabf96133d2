"""
Deploy orchestration for edgesync.

Coordinates scanning, uploading, remote cleanup and cache refresh for one
deploy. Phases run strictly in that order; the changed-key set is complete
before any refresh URL is derived.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from ..cloud import CloudApiClient, Credentials, create_cache_client
from ..config.deploy import DeployConfig
from ..core.limiter import ConcurrencyLimiter
from ..core.retry import RetryPolicy
from ..purge.dispatcher import create_dispatcher
from ..purge.tasks import PurgeReport
from ..purge.urls import derive_urls, merge_urls
from ..storage.client import ObjectStoreClient
from ..storage.scanner import scan_local_tree_async
from ..ui import display
from .inventory import list_remote_objects
from .plan import DeployPlan
from .reconciler import compute_delete_keys, delete_remote_keys
from .uploader import FileUploader


@dataclass
class DeployResult:
    """What a deploy did."""
    uploaded: int = 0
    unchanged: int = 0
    changed_keys: set[str] = field(default_factory=set)
    deleted_keys: set[str] = field(default_factory=set)
    purge: Optional[PurgeReport] = None
    duration: float = 0.0


class Deployer:
    """
    Runs one deploy against already-constructed clients.

    Args:
        config: Validated deploy configuration
        store: ObjectStoreClient (or anything with the same async methods)
        dispatcher: Cache invalidation strategy, or None to skip cache refresh
        retry_policy: Retry policy for uploads
        sleep: Awaitable sleep used between retries
        show_progress: Print per-file upload lines
    """

    def __init__(
        self,
        config: DeployConfig,
        store,
        dispatcher=None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        show_progress: bool = True,
    ):
        self.config = config
        self.store = store
        self.dispatcher = dispatcher
        self.retry_policy = retry_policy or RetryPolicy()
        self.show_progress = show_progress
        self._sleep = sleep

    async def _scan_and_list(self):
        upload_dir = self.config.upload_dir
        # Fail before any network I/O if there's nothing to deploy from
        if not upload_dir.exists():
            raise FileNotFoundError(f"upload directory not found: {upload_dir}")
        if not upload_dir.is_dir():
            raise NotADirectoryError(f"upload path is not a directory: {upload_dir}")

        if not self.config.remove_remote_files:
            return await scan_local_tree_async(upload_dir), None

        scan = asyncio.ensure_future(scan_local_tree_async(upload_dir))
        listing = asyncio.ensure_future(list_remote_objects(self.store))
        try:
            records, remote_objects = await asyncio.gather(scan, listing)
        except BaseException:
            # Neither half may outlive a failure of the other
            for task in (scan, listing):
                task.cancel()
            await asyncio.gather(scan, listing, return_exceptions=True)
            raise
        display.remote_inventory(len(remote_objects))
        return records, remote_objects

    async def _refresh_caches(self, plan: DeployPlan) -> Optional[PurgeReport]:
        if self.dispatcher is None or not self.config.domains:
            return None
        urls = merge_urls(derive_urls(
            sorted(plan.changed_keys),
            self.config.domains,
            self.config.refresh_index_page,
        ))
        if not urls:
            display.nothing_to_purge()
            return PurgeReport()
        return await self.dispatcher.invalidate(urls)

    async def run(self) -> DeployResult:
        start = time.time()
        result = DeployResult()
        plan = DeployPlan()

        records, remote_objects = await self._scan_and_list()
        display.deploy_starting(len(records), self.store.bucket, self.config.concurrency)

        # Upload phase
        uploader = FileUploader(
            self.store,
            ConcurrencyLimiter(self.config.concurrency),
            retry_policy=self.retry_policy,
            sleep=self._sleep,
            show_progress=self.show_progress,
        )
        upload_start = time.time()
        result.uploaded, result.unchanged = await uploader.upload_many(records, plan)
        result.changed_keys = plan.changed_keys
        display.upload_phase_complete(result.uploaded, result.unchanged, time.time() - upload_start)

        # Remote cleanup
        if remote_objects is not None:
            plan.delete_keys = compute_delete_keys(
                (obj.key for obj in remote_objects),
                (record.relative_key for record in records),
            )
            if plan.delete_keys:
                await delete_remote_keys(self.store, plan.delete_keys)
                display.remote_deleted(len(plan.delete_keys))
            result.deleted_keys = plan.delete_keys

        # Cache refresh
        if plan.changed_keys:
            result.purge = await self._refresh_caches(plan)

        result.duration = time.time() - start
        purge = result.purge or PurgeReport()
        display.deploy_complete(
            result.uploaded,
            len(result.deleted_keys),
            purge.refreshed,
            purge.failed,
            result.duration,
        )
        return result


async def deploy_async(config: DeployConfig, retry_policy: Optional[RetryPolicy] = None) -> DeployResult:
    """Build the clients for config and run one deploy."""
    store = ObjectStoreClient.for_config(config)
    credentials = Credentials(config.secret_id, config.secret_key)

    api = CloudApiClient.for_cache_type(config.cache_type, credentials)
    dispatcher = create_dispatcher(
        config.cache_type,
        create_cache_client(config.cache_type, api),
        retry_policy=retry_policy,
    )
    deployer = Deployer(config, store, dispatcher, retry_policy=retry_policy)
    return await deployer.run()


def deploy(config: DeployConfig, retry_policy: Optional[RetryPolicy] = None) -> DeployResult:
    """Run one deploy to completion (blocking)."""
    return asyncio.run(deploy_async(config, retry_policy))
