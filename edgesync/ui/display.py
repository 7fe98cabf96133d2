"""
Centralized display functions for deploy output.

Any output with color codes or multi-line formatting belongs here.

Usage:
    from edgesync.ui import display
    display.upload_ok("posts/hello/index.html", 2048)
"""

from .colors import Colors
from ..core.formatting import format_size, format_duration

_c = Colors


# === Configuration ===

def config_errors(errors: list):
    print(f"{_c.RED}Error:{_c.RESET} invalid deploy configuration")
    for error in errors:
        print(f"  - {error.field}: {error.message}")
    print()


# === Upload phase ===

def deploy_starting(file_count: int, bucket: str, concurrency: int):
    print(f"{_c.CYAN}Deploying {file_count:,} files to {bucket}{_c.RESET} {_c.DIM}({concurrency} concurrent){_c.RESET}")

def remote_inventory(object_count: int):
    print(f"  {_c.DIM}Remote bucket holds {object_count:,} objects{_c.RESET}")

def upload_ok(key: str, size: int, attempts: int = 1):
    retried = f", {attempts} attempts" if attempts > 1 else ""
    print(f"  {_c.GREEN}↑{_c.RESET} {key} {_c.DIM}({format_size(size)}{retried}){_c.RESET}")

def upload_phase_complete(uploaded: int, unchanged: int, duration: float):
    print(f"  Uploaded {uploaded:,} changed files, {unchanged:,} unchanged {_c.DIM}({format_duration(duration)}){_c.RESET}")


# === Remote cleanup ===

def remote_deleted(count: int):
    print(f"  {_c.YELLOW}✗{_c.RESET} Deleted {count:,} remote files not present locally")


# === Cache refresh ===

def nothing_to_purge():
    print(f"  {_c.DIM}No changed URLs - cache refresh skipped{_c.RESET}")

def purge_batch_ok(count: int):
    print(f"  {_c.GREEN}⟳{_c.RESET} Refreshed {count:,} URLs")

def purge_batch_failed(count: int, error: Exception):
    print(f"  {_c.RED}Refresh failed{_c.RESET} for {count:,} URLs: {error}")

def purge_skipped_malformed(url: str):
    print(f"  {_c.YELLOW}Cache refresh skipped:{_c.RESET} malformed URL {url!r}")

def zone_bound(main_domain: str, zone_id: str):
    print(f"  {_c.DIM}{main_domain} → zone {zone_id}{_c.RESET}")

def host_fallback(main_domain: str, pending: int, available: int):
    print(f"  {_c.YELLOW}Quota:{_c.RESET} {pending:,} URLs pending for {main_domain} but only {available:,} left today")
    print(f"  {_c.DIM}Invalidating whole hosts instead{_c.RESET}")

def purge_task_ok(kind: str, count: int, zone_id: str):
    print(f"  {_c.GREEN}⟳{_c.RESET} {kind}: {count:,} targets {_c.DIM}(zone {zone_id}){_c.RESET}")

def purge_task_failed(kind: str, count: int, zone_id: str, error: Exception):
    print(f"  {_c.RED}{kind} failed{_c.RESET} for {count:,} targets (zone {zone_id}): {error}")

def purge_targets_rejected(targets: list):
    print(f"  {_c.YELLOW}Provider rejected {len(targets):,} targets:{_c.RESET}")
    for target in targets[:10]:
        print(f"    {target}")
    if len(targets) > 10:
        print(f"    {_c.DIM}... and {len(targets) - 10:,} more{_c.RESET}")


# === Summary ===

def deploy_complete(uploaded: int, deleted: int, purged: int, failed_purges: int, duration: float):
    print()
    print(f"{_c.GREEN}Deploy complete{_c.RESET} {_c.DIM}({format_duration(duration)}){_c.RESET}")
    print(f"  {uploaded:,} uploaded, {deleted:,} deleted, {purged:,} URLs refreshed")
    if failed_purges:
        print(f"  {_c.YELLOW}{failed_purges:,} cache refresh submissions failed - run again or purge manually{_c.RESET}")

def deploy_failed(error: Exception):
    print(f"\n{_c.RED}Deploy failed:{_c.RESET} {error}")
