"""
Centralized path management for edgesync.

Run data is stored in a .edgesync/ folder inside the site's base directory:

    path/to/site/
        .edgesync/
            logs/       - Deploy logs (one file per day)
        public/         - Generated files to upload (upload_dir)
"""

import sys
from pathlib import Path

import certifi


# Directory name for run data (hidden on Unix)
DATA_DIR_NAME = ".edgesync"


def get_certifi_ssl_context() -> str:
    """Get path to certifi CA bundle, handling PyInstaller bundles."""
    if getattr(sys, "frozen", False):
        # PyInstaller bundles certifi's cacert.pem
        return str(Path(sys._MEIPASS) / "certifi" / "cacert.pem")
    return certifi.where()


def get_data_dir(base_dir: Path) -> Path:
    """Get the .edgesync data directory for a site, creating it if needed."""
    data_dir = Path(base_dir) / DATA_DIR_NAME
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_logs_dir(base_dir: Path) -> Path:
    """Get the deploy log directory for a site, creating it if needed."""
    logs_dir = get_data_dir(base_dir) / "logs"
    logs_dir.mkdir(exist_ok=True)
    return logs_dir
