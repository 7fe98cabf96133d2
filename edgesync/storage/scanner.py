"""
Local file scanning and content digests.
"""

import asyncio
import hashlib
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..core.formatting import normalize_fs_name
from ..core.logging import debug_log


@dataclass(frozen=True)
class FileRecord:
    """A local file and the object key it is uploaded under."""
    relative_key: str  # forward slashes on every platform
    absolute_path: Path


def compute_digest(path: Path) -> str:
    """MD5 hex digest of a file's contents (the ETag COS returns for single-part uploads)."""
    return hashlib.md5(Path(path).read_bytes()).hexdigest()


async def compute_digest_async(path: Path) -> str:
    """compute_digest() off the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, compute_digest, path)


def scan_local_tree(root: Path) -> List[FileRecord]:
    """
    Recursively list every regular file under root.

    Symlinks are followed. Raises FileNotFoundError / NotADirectoryError /
    PermissionError if root, any directory below it, or any entry (including
    a dangling symlink) can't be stat'ed. Unreadable entries are never
    skipped: the result is either the complete tree or an exception. Sockets,
    FIFOs and device nodes are not deployable and are logged and left out.
    """
    root = Path(root)
    records: List[FileRecord] = []

    def scan_dir(dir_path: Path, prefix: str = ""):
        with os.scandir(dir_path) as entries:
            for entry in entries:
                name = normalize_fs_name(entry.name)
                rel_key = f"{prefix}{name}" if prefix else name
                mode = entry.stat().st_mode
                if stat.S_ISDIR(mode):
                    scan_dir(Path(entry.path), f"{rel_key}/")
                elif stat.S_ISREG(mode):
                    records.append(FileRecord(relative_key=rel_key, absolute_path=Path(entry.path)))
                else:
                    debug_log(f"scan: skipping special file {rel_key}")

    scan_dir(root)
    return records


async def scan_local_tree_async(root: Path) -> List[FileRecord]:
    """scan_local_tree() off the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, scan_local_tree, root)
