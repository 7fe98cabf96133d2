"""
Purge task planning for zone-based edge caches.

Pure functions: grouping URLs by registrable domain, matching zones, and
turning a domain's pending URLs plus its quota into purge tasks.
"""

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlsplit

from ..core.constants import CONSTRAINED_PLAN_BATCH_LIMIT
from ..core.formatting import chunked


class PurgeKind(str, Enum):
    URL_PURGE = "purge_url"
    HOST_INVALIDATE = "purge_host"


class PurgeMethod(str, Enum):
    DELETE = "delete"
    INVALIDATE = "invalidate"


@dataclass(frozen=True)
class PurgeTask:
    """One submission to the edge cache."""
    kind: PurgeKind
    targets: tuple
    method: PurgeMethod


@dataclass(frozen=True)
class Quota:
    """URL purge limits for a zone (fetched fresh every deploy)."""
    batch_limit: int  # max targets per submission
    daily_limit: int
    daily_available: int

    @property
    def is_constrained(self) -> bool:
        return self.batch_limit <= CONSTRAINED_PLAN_BATCH_LIMIT


@dataclass(frozen=True)
class Zone:
    name: str
    zone_id: str


@dataclass(frozen=True)
class ZoneBinding:
    main_domain: str
    zone_id: str


@dataclass
class PurgeReport:
    """Summary of one cache refresh pass."""
    urls: int = 0
    refreshed: int = 0  # URLs covered by successful submissions
    submitted: int = 0  # successful submissions (batches or tasks)
    failed: int = 0  # submissions that failed after retries
    skipped: bool = False  # whole pass skipped (malformed input)


def is_valid_url(url: str) -> bool:
    """http(s) URL with a host and no whitespace."""
    if not isinstance(url, str) or not url or any(ch.isspace() for ch in url):
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.hostname)


def main_domain(hostname: str) -> str:
    """Registrable domain approximated as the last two labels ("a.b.example.com" -> "example.com")."""
    labels = hostname.lower().rstrip(".").split(".")
    return ".".join(labels[-2:])


def group_by_main_domain(urls: Iterable[str]) -> Dict[str, List[str]]:
    """Group URLs by the main domain of their host, preserving first-seen order."""
    groups: Dict[str, List[str]] = OrderedDict()
    for url in urls:
        groups.setdefault(main_domain(urlsplit(url).hostname), []).append(url)
    return groups


def find_zone(zones: Iterable[Zone], domain: str) -> Optional[Zone]:
    """Zone whose name equals domain or is a parent of it."""
    domain = domain.lower()
    for zone in zones:
        name = zone.name.lower().rstrip(".")
        if domain == name or domain.endswith("." + name):
            return zone
    return None


def plan_zone_tasks(urls: List[str], quota: Quota) -> List[PurgeTask]:
    """
    Purge tasks for one main domain's URLs.

    On a constrained plan, more pending URLs than the remaining daily quota
    collapses into a single host invalidation covering every host involved.
    Otherwise URLs are chunked by the plan's per-submission limit.
    """
    if not urls:
        return []

    if quota.is_constrained and len(urls) > quota.daily_available:
        hosts = tuple(OrderedDict.fromkeys(urlsplit(url).hostname for url in urls))
        return [PurgeTask(kind=PurgeKind.HOST_INVALIDATE, targets=hosts, method=PurgeMethod.INVALIDATE)]

    batch_size = max(1, quota.batch_limit)
    return [
        PurgeTask(kind=PurgeKind.URL_PURGE, targets=tuple(batch), method=PurgeMethod.DELETE)
        for batch in chunked(urls, batch_size)
    ]
