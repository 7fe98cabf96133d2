"""
URL derivation for cache refresh.

Turns changed object keys into the public URLs each configured domain serves
them under, applying the domain's ignore rules.
"""

from typing import Dict, Iterable, List
from urllib.parse import quote, urlsplit

from ..core.constants import INDEX_DOCUMENT
from ..core.formatting import key_extension


def is_ignored(rule, key: str) -> bool:
    """True if the rule's ignored paths or extensions cover this key."""
    for prefix in rule.ignore_paths:
        if key == prefix or key.startswith(prefix + "/"):
            return True
    return key_extension(key) in rule.ignore_extensions


def build_url(domain: str, key: str, refresh_index_page: bool = False) -> str:
    """
    Public URL for a key under domain.

    With refresh_index_page, ".../index.html" becomes ".../" since that is the
    permalink the CDN caches.
    """
    url = f"{domain.rstrip('/')}/{quote(key, safe='/')}"
    if refresh_index_page and urlsplit(url).path.endswith("/" + INDEX_DOCUMENT):
        url = url[: -len(INDEX_DOCUMENT)]
    return url


def derive_urls(changed_keys: Iterable[str], rules: list, refresh_index_page: bool = False) -> Dict[str, List[str]]:
    """
    Build refresh URLs per domain.

    Args:
        changed_keys: Keys uploaded by this deploy
        rules: DomainRule list from the deploy config
        refresh_index_page: Rewrite index documents to directory URLs

    Returns:
        {domain: [url, ...]} in rule order, keys in the order given
    """
    keys = list(changed_keys)
    urls: Dict[str, List[str]] = {}
    for rule in rules:
        domain_urls = urls.setdefault(rule.domain, [])
        for key in keys:
            if is_ignored(rule, key):
                continue
            domain_urls.append(build_url(rule.domain, key, refresh_index_page))
    return urls


def merge_urls(urls_by_domain: Dict[str, List[str]]) -> List[str]:
    """Flatten per-domain URLs into one list, keeping order and dropping duplicates."""
    merged = dict.fromkeys(url for urls in urls_by_domain.values() for url in urls)
    return list(merged)
