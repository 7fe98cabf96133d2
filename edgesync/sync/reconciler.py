"""
Remote cleanup for edgesync.

Deletes bucket objects that no longer exist in the local upload directory.
"""

from typing import Iterable, Set

from ..core.constants import DELETE_BATCH_SIZE
from ..core.formatting import chunked
from ..core.logging import debug_log


def compute_delete_keys(remote_keys: Iterable[str], local_keys: Iterable[str]) -> Set[str]:
    """
    Keys present in the bucket but not locally.

    local_keys must be the complete local key set (every scanned file, not
    just the changed ones), otherwise unchanged files would be deleted.
    """
    return set(remote_keys) - set(local_keys)


async def delete_remote_keys(store, keys: Iterable[str], batch_size: int = DELETE_BATCH_SIZE) -> int:
    """
    Delete keys in batches of at most batch_size.

    Batches run sequentially; the first failure propagates and later batches
    are not attempted.

    Returns number of keys deleted.
    """
    deleted = 0
    for batch in chunked(sorted(keys), batch_size):
        await store.delete_many(batch)
        deleted += len(batch)
        debug_log(f"deleted {len(batch)} remote objects ({deleted} total)")
    return deleted
