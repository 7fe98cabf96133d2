"""
Changed-file uploader for edgesync.

Compares local digests with remote ETags and uploads only what differs.
Uses asyncio with a shared ConcurrencyLimiter so at most `concurrency`
files are being hashed, checked or uploaded at once.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Tuple

from ..core.formatting import strip_etag
from ..core.limiter import ConcurrencyLimiter
from ..core.logging import debug_log
from ..core.retry import RetryPolicy, with_retry
from ..storage.scanner import FileRecord, compute_digest_async
from ..ui import display
from .plan import DeployPlan


@dataclass
class UploadResult:
    """Result of syncing a single file."""
    record: FileRecord
    uploaded: bool
    bytes_uploaded: int = 0
    attempts: int = 0


class FileUploader:
    """
    Async diff-and-upload of local files.

    A head() failure other than "not found", or an upload that still fails
    after the retry policy is used up, aborts the whole upload phase: the
    remaining file tasks are cancelled and the error is re-raised.
    """

    def __init__(
        self,
        store,
        limiter: ConcurrencyLimiter,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        show_progress: bool = True,
    ):
        self.store = store
        self.limiter = limiter
        self.retry_policy = retry_policy or RetryPolicy()
        self.show_progress = show_progress
        self._sleep = sleep

    async def _needs_upload(self, record: FileRecord) -> bool:
        local_digest = await compute_digest_async(record.absolute_path)
        remote = await self.store.head(record.relative_key)
        if remote is None:
            debug_log(f"upload {record.relative_key}: not in bucket")
            return True
        if strip_etag(remote.etag) == local_digest:
            debug_log(f"skip {record.relative_key}: unchanged ({local_digest})")
            return False
        debug_log(f"upload {record.relative_key}: etag {remote.etag} != {local_digest}")
        return True

    async def _sync_file(self, record: FileRecord) -> UploadResult:
        if not await self._needs_upload(record):
            return UploadResult(record=record, uploaded=False)

        result = await with_retry(
            self.retry_policy,
            lambda: self.store.put(record.relative_key, record.absolute_path),
            description=f"upload {record.relative_key}",
            sleep=self._sleep,
        )
        result.unwrap()

        try:
            size = record.absolute_path.stat().st_size
        except OSError:
            size = 0
        return UploadResult(record=record, uploaded=True, bytes_uploaded=size, attempts=result.attempts)

    async def _sync_file_async(self, record: FileRecord) -> UploadResult:
        """Check and (if needed) upload one file while holding a limiter permit."""
        return await self.limiter.run(self._sync_file, record)

    async def upload_many(self, records: List[FileRecord], plan: DeployPlan) -> Tuple[int, int]:
        """
        Sync all records, adding every successfully uploaded key to plan.changed_keys.

        Returns:
            Tuple of (uploaded, unchanged)
        """
        uploaded = 0
        unchanged = 0

        pending = {
            asyncio.create_task(self._sync_file_async(record), name=record.relative_key): record
            for record in records
        }

        try:
            while pending:
                done, _ = await asyncio.wait(pending.keys(), return_when=asyncio.FIRST_COMPLETED)

                for task in done:
                    pending.pop(task)
                    result = task.result()

                    if result.uploaded:
                        plan.mark_uploaded(result.record.relative_key)
                        uploaded += 1
                        if self.show_progress:
                            display.upload_ok(result.record.relative_key, result.bytes_uploaded, result.attempts)
                    else:
                        unchanged += 1
        except BaseException:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            raise

        return uploaded, unchanged
