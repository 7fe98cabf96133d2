"""
Local and remote storage access.
"""

from .scanner import FileRecord, compute_digest, compute_digest_async, scan_local_tree, scan_local_tree_async
from .client import ObjectStoreClient, RemoteObject, ListPage, StoreError, create_cos_client

__all__ = [
    "FileRecord",
    "compute_digest",
    "compute_digest_async",
    "scan_local_tree",
    "scan_local_tree_async",
    "ObjectStoreClient",
    "RemoteObject",
    "ListPage",
    "StoreError",
    "create_cos_client",
]
