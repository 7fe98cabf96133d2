"""Pytest configuration and shared fixtures."""

import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path

import pytest

from edgesync.config import DeployConfig, DomainRule


@pytest.fixture(autouse=True)
def restore_stdout():
    """Put sys.stdout back if a test left a TeeOutput installed."""
    original = sys.stdout
    yield
    sys.stdout = original


@dataclass
class SiteEnv:
    """Isolated site directory with an upload dir."""
    base_dir: Path
    upload_dir: Path

    def make_files(self, file_specs: dict[str, bytes]) -> None:
        """Create files under upload_dir. file_specs: {relative_key: content}."""
        for rel_key, content in file_specs.items():
            full = self.upload_dir / rel_key
            full.parent.mkdir(parents=True, exist_ok=True)
            full.write_bytes(content)

    def make_config(self, **overrides) -> DeployConfig:
        values = dict(
            secret_id="AKIDtest",
            secret_key="secret",
            bucket="site-1250000000",
            region="ap-guangzhou",
            upload_dir=self.upload_dir,
            domains=[DomainRule(domain="https://www.example.com")],
        )
        values.update(overrides)
        return DeployConfig(**values)


@pytest.fixture
def site_env():
    with tempfile.TemporaryDirectory() as tmpdir:
        base_dir = Path(tmpdir)
        upload_dir = base_dir / "public"
        upload_dir.mkdir()
        yield SiteEnv(base_dir=base_dir, upload_dir=upload_dir)


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
