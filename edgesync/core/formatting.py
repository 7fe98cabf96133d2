"""
Formatting and normalization utilities for edgesync.
"""

import posixpath
import unicodedata
from pathlib import Path
from typing import Iterable, Iterator, List, TypeVar, Union

T = TypeVar("T")


# ============================================================================
# Unicode normalization
# ============================================================================

def normalize_fs_name(name: str) -> str:
    """Normalize filesystem name to NFC for cross-platform consistency.

    macOS returns NFD (decomposed), Linux/Windows builds produce NFC.
    Without normalization the same page would get two different object keys
    depending on which machine ran the deploy.
    """
    return unicodedata.normalize("NFC", name)


# ============================================================================
# Cross-platform path utilities
# ============================================================================

def to_posix(path: Union[str, Path]) -> str:
    """
    Convert a path to a posix-style string (forward slashes).

    Works consistently across platforms - use this instead of str(path)
    when building object keys.
    """
    if isinstance(path, Path):
        return path.as_posix()
    return path.replace("\\", "/")


def normalize_path_prefix(prefix: str) -> str:
    """Normalize an ignored path prefix: posix separators, no leading/trailing slash."""
    return to_posix(prefix.strip()).strip("/")


def normalize_extension(ext: str) -> str:
    """Normalize an ignored extension to lowercase with a leading dot ("JS" -> ".js")."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def key_extension(key: str) -> str:
    """Lowercase extension of an object key, including the dot ("" if none)."""
    return posixpath.splitext(key)[1].lower()


def strip_etag(etag: str) -> str:
    """Remove the quotes object stores put around ETag values."""
    return (etag or "").strip().strip('"')


# ============================================================================
# Batching
# ============================================================================

def chunked(items: Iterable[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive lists of at most `size` items. Yields nothing for empty input."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    batch: List[T] = []
    for item in items:
        batch.append(item)
        if len(batch) == size:
            yield batch
            batch = []
    if batch:
        yield batch


# ============================================================================
# Size and duration formatting
# ============================================================================

def format_size(size_bytes: int) -> str:
    """Format bytes as human readable string."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} PB"


def format_duration(seconds: float) -> str:
    """Format seconds as human readable duration."""
    if seconds < 60:
        return f"{int(seconds)}s"
    elif seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    else:
        return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60)}m"
