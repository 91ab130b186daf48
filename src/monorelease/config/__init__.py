"""Configuration management for monorelease."""

from __future__ import annotations

from monorelease.config.loader import load_config
from monorelease.config.models import (
    ChangelogConfig,
    CommitsConfig,
    MonoreleaseConfig,
    PackagesConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "MonoreleaseConfig",
    "PackagesConfig",
    "load_config",
]
