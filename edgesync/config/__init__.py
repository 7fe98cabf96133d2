"""
Configuration management for edgesync.

Config files:
- deploy.json (or any JSON file with a "deploy" section): bucket, credentials,
  cache backend and domain rules for one site
"""

from .deploy import (
    ConfigError,
    ConfigValidationError,
    DeployConfig,
    DomainRule,
    load_config,
    validate_config,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DeployConfig",
    "DomainRule",
    "load_config",
    "validate_config",
]
