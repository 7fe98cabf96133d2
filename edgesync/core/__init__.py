"""
Core utilities for edgesync.

Shared constants, paths, retry/concurrency primitives and formatting.
"""

from .constants import (
    DEFAULT_CONCURRENCY,
    DELETE_BATCH_SIZE,
    CDN_PURGE_BATCH_SIZE,
    CONSTRAINED_PLAN_BATCH_LIMIT,
    INDEX_DOCUMENT,
    CACHE_TYPE_CDN,
    CACHE_TYPE_EDGEONE,
    CACHE_TYPES,
)

from .paths import (
    get_certifi_ssl_context,
    get_data_dir,
    get_logs_dir,
)

from .formatting import (
    normalize_fs_name,
    to_posix,
    normalize_path_prefix,
    normalize_extension,
    key_extension,
    strip_etag,
    chunked,
    format_size,
    format_duration,
)

from .retry import RetryPolicy, RetryResult, with_retry
from .limiter import ConcurrencyLimiter

__all__ = [
    # Constants
    "DEFAULT_CONCURRENCY",
    "DELETE_BATCH_SIZE",
    "CDN_PURGE_BATCH_SIZE",
    "CONSTRAINED_PLAN_BATCH_LIMIT",
    "INDEX_DOCUMENT",
    "CACHE_TYPE_CDN",
    "CACHE_TYPE_EDGEONE",
    "CACHE_TYPES",
    # Paths
    "get_certifi_ssl_context",
    "get_data_dir",
    "get_logs_dir",
    # Formatting
    "normalize_fs_name",
    "to_posix",
    "normalize_path_prefix",
    "normalize_extension",
    "key_extension",
    "strip_etag",
    "chunked",
    "format_size",
    "format_duration",
    # Retry / concurrency
    "RetryPolicy",
    "RetryResult",
    "with_retry",
    "ConcurrencyLimiter",
]
