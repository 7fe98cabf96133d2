"""
Cache invalidation module.

Derives refresh URLs from changed keys and submits them to the configured
edge cache.
"""

from .urls import build_url, derive_urls, is_ignored, merge_urls
from .tasks import (
    PurgeKind,
    PurgeMethod,
    PurgeReport,
    PurgeTask,
    Quota,
    Zone,
    ZoneBinding,
    find_zone,
    group_by_main_domain,
    is_valid_url,
    main_domain,
    plan_zone_tasks,
)
from .dispatcher import BatchPurgeStrategy, ZonePurgeStrategy, ZoneNotFoundError, create_dispatcher

__all__ = [
    # URL derivation
    "build_url",
    "derive_urls",
    "is_ignored",
    "merge_urls",
    # Task planning
    "PurgeKind",
    "PurgeMethod",
    "PurgeReport",
    "PurgeTask",
    "Quota",
    "Zone",
    "ZoneBinding",
    "find_zone",
    "group_by_main_domain",
    "is_valid_url",
    "main_domain",
    "plan_zone_tasks",
    # Strategies
    "BatchPurgeStrategy",
    "ZonePurgeStrategy",
    "ZoneNotFoundError",
    "create_dispatcher",
]
