"""
Deploy configuration for edgesync.

Reads the deploy section (JSON) and turns it into a typed DeployConfig.
Validation never stops at the first problem: every issue is collected as a
ConfigError so the user can fix them all in one pass.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from ..core.constants import CACHE_TYPE_CDN, CACHE_TYPES, DEFAULT_CONCURRENCY
from ..core.formatting import normalize_extension, normalize_path_prefix

REQUIRED_FIELDS = ("secret_id", "secret_key", "bucket", "region", "upload_dir")


@dataclass(frozen=True)
class ConfigError:
    """A single validation problem."""
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ConfigValidationError(ValueError):
    """Raised by load_config(strict=True) when the configuration is invalid."""

    def __init__(self, errors: list[ConfigError]):
        self.errors = errors
        super().__init__("; ".join(str(e) for e in errors))


@dataclass(frozen=True)
class DomainRule:
    """A public site domain and the keys whose URLs should not be refreshed."""
    domain: str
    ignore_paths: frozenset = frozenset()  # normalized, no leading/trailing slash
    ignore_extensions: frozenset = frozenset()  # lowercase, leading dot

    @classmethod
    def from_dict(cls, data) -> "DomainRule":
        """Build from a bare URL string or a {domain, ignore_paths, ignore_extensions} dict."""
        if isinstance(data, str):
            return cls(domain=data.strip())
        paths = {normalize_path_prefix(p) for p in data.get("ignore_paths") or []}
        extensions = {normalize_extension(e) for e in data.get("ignore_extensions") or []}
        return cls(
            domain=str(data.get("domain", "")).strip(),
            ignore_paths=frozenset(p for p in paths if p),
            ignore_extensions=frozenset(e for e in extensions if e),
        )


@dataclass
class DeployConfig:
    """Fully resolved deploy settings."""
    secret_id: str
    secret_key: str
    bucket: str
    region: str
    upload_dir: Path
    cache_type: str = CACHE_TYPE_CDN
    domains: list[DomainRule] = field(default_factory=list)
    remove_remote_files: bool = False
    refresh_index_page: bool = False
    concurrency: int = DEFAULT_CONCURRENCY


def _validate_domain(index: int, rule: DomainRule) -> Optional[ConfigError]:
    parsed = urlparse(rule.domain)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return ConfigError(f"cdn_domains[{index}]", f"not an http(s) URL: {rule.domain!r}")
    return None


def validate_config(data: dict, base_dir: Path) -> tuple[Optional[DeployConfig], list[ConfigError]]:
    """
    Validate a raw deploy section.

    Args:
        data: Raw deploy settings (already parsed JSON)
        base_dir: Directory that upload_dir is relative to

    Returns:
        Tuple of (config or None, errors). config is None whenever errors is non-empty.
    """
    errors: list[ConfigError] = []

    if not isinstance(data, dict):
        return None, [ConfigError("deploy", "deploy section must be an object")]

    for name in REQUIRED_FIELDS:
        value = data.get(name)
        if not value:
            errors.append(ConfigError(name, "required"))
        elif value == f"your_{name}":
            errors.append(ConfigError(name, "still set to the placeholder value"))

    cache_type = data.get("cache_type") or CACHE_TYPE_CDN
    if cache_type not in CACHE_TYPES:
        errors.append(ConfigError("cache_type", f"must be one of {', '.join(CACHE_TYPES)}, got {cache_type!r}"))

    concurrency = data.get("concurrency", DEFAULT_CONCURRENCY)
    if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
        errors.append(ConfigError("concurrency", f"must be a positive integer, got {concurrency!r}"))

    raw_domains = data.get("cdn_domains") or []
    if not isinstance(raw_domains, list):
        errors.append(ConfigError("cdn_domains", "must be a list"))
        raw_domains = []

    domains = []
    for i, raw in enumerate(raw_domains):
        if not isinstance(raw, (str, dict)):
            errors.append(ConfigError(f"cdn_domains[{i}]", "must be a URL or an object with a domain"))
            continue
        rule = DomainRule.from_dict(raw)
        error = _validate_domain(i, rule)
        if error:
            errors.append(error)
        else:
            domains.append(rule)

    if errors:
        return None, errors

    config = DeployConfig(
        secret_id=data["secret_id"],
        secret_key=data["secret_key"],
        bucket=data["bucket"],
        region=data["region"],
        upload_dir=Path(base_dir) / data["upload_dir"],
        cache_type=cache_type,
        domains=domains,
        remove_remote_files=bool(data.get("remove_remote_files", False)),
        refresh_index_page=bool(data.get("refresh_index_page", False)),
        concurrency=concurrency,
    )
    return config, []


def load_config(
    path: Path,
    base_dir: Optional[Path] = None,
    overrides: Optional[dict] = None,
    strict: bool = True,
) -> tuple[Optional[DeployConfig], list[ConfigError]]:
    """
    Load and validate a deploy config file.

    The file may hold the settings directly or nest them under a "deploy" key.

    Args:
        path: JSON config file
        base_dir: Site directory (defaults to the config file's directory)
        overrides: Values applied over the file's settings only when the file leaves them empty
        strict: Raise ConfigValidationError instead of returning errors

    Returns:
        Tuple of (config or None, errors)
    """
    path = Path(path)
    base_dir = Path(base_dir) if base_dir else path.parent

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        errors = [ConfigError("config", f"file not found: {path}")]
    except json.JSONDecodeError as e:
        errors = [ConfigError("config", f"invalid JSON in {path.name}: {e}")]
    else:
        if isinstance(data, dict) and isinstance(data.get("deploy"), dict):
            data = data["deploy"]
        if isinstance(data, dict) and overrides:
            data = {**data, **{k: v for k, v in overrides.items() if v and not data.get(k)}}
        config, errors = validate_config(data, base_dir)
        if not errors:
            return config, []

    if strict:
        raise ConfigValidationError(errors)
    return None, errors
