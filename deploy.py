#!/usr/bin/env python3
"""
edgesync - Deploy a generated static site to COS and refresh CDN/EdgeOne caches.

Reads the deploy section from a JSON config file, uploads changed files from
upload_dir, optionally removes stale remote files, then purges the edge cache
for the URLs that changed.
"""

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path

from edgesync import __version__
from edgesync.config import ConfigValidationError, load_config
from edgesync.core.logging import TeeOutput
from edgesync.core.paths import get_logs_dir
from edgesync.sync import deploy
from edgesync.ui import display

# ============================================================================
# Configuration
# ============================================================================

CREDENTIAL_ENV = {
    "secret_id": "EDGESYNC_SECRET_ID",
    "secret_key": "EDGESYNC_SECRET_KEY",
}


def main(argv=None) -> int:
    """Entry point."""
    parser = argparse.ArgumentParser(
        description="Deploy a static site to COS and refresh CDN/EdgeOne caches"
    )
    parser.add_argument(
        "--config", "-c", type=Path, default=Path("deploy.json"),
        help="JSON config file (settings may be nested under \"deploy\")",
    )
    parser.add_argument(
        "--base-dir", type=Path, default=None,
        help="Site directory that upload_dir is relative to (default: config file's directory)",
    )
    parser.add_argument(
        "--no-log", action="store_true",
        help="Don't write a log file under .edgesync/logs/",
    )
    parser.add_argument("--version", action="version", version=f"edgesync {__version__}")
    args = parser.parse_args(argv)

    overrides = {name: os.environ.get(env, "") for name, env in CREDENTIAL_ENV.items()}
    try:
        config, _ = load_config(args.config, base_dir=args.base_dir, overrides=overrides)
    except ConfigValidationError as e:
        display.config_errors(e.errors)
        return 2

    tee = None
    if not args.no_log:
        base_dir = args.base_dir or args.config.parent
        log_path = get_logs_dir(base_dir) / f"{datetime.now().strftime('%Y-%m-%d')}.log"
        tee = TeeOutput(log_path, version=__version__, secrets=[config.secret_key])
        sys.stdout = tee

    try:
        deploy(config)
    except Exception as e:
        display.deploy_failed(e)
        return 1
    finally:
        if tee:
            sys.stdout = tee.terminal
            tee.close()

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nCancelled by user.")
        sys.exit(130)
