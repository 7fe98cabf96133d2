"""
edgesync - Incremental static-site deploys to COS with CDN/EdgeOne cache refresh.

This package uploads only the files whose content changed since the last
deploy, optionally removes remote objects that no longer exist locally, and
purges the edge caches for exactly the URLs affected.

Import from submodules directly:
    from edgesync.config import load_config
    from edgesync.sync import Deployer, deploy
    from edgesync.purge import derive_urls, create_dispatcher
"""


def _get_version():
    """Read version from VERSION file."""
    from pathlib import Path
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    return "0.0.0"


__version__ = _get_version()
