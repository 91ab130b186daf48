"""Configuration loading from package.json."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from monorelease.config.models import MonoreleaseConfig
from monorelease.exceptions import (
    ConfigNotFoundError,
    ConfigValidationError,
    PackageJsonNotFoundError,
)
from monorelease.project.package_json import PACKAGE_JSON, load_package_json

CONFIG_KEY = "monorelease"


def find_root_package_json(start: Path | None = None) -> Path:
    """Find package.json in ``start`` or the nearest parent directory.

    Raises:
        ConfigNotFoundError: If no package.json is found up to the filesystem root
    """
    current = (start or Path.cwd()).resolve()

    while True:
        candidate = current / PACKAGE_JSON
        if candidate.is_file():
            return candidate
        if current.parent == current:
            raise ConfigNotFoundError(f"Could not find {PACKAGE_JSON} in {start} or its parents")
        current = current.parent


def extract_config(package_json: dict[str, Any]) -> dict[str, Any]:
    """Return the ``monorelease`` section, empty if absent."""
    section = package_json.get(CONFIG_KEY, {})
    if not isinstance(section, dict):
        raise ConfigValidationError(f'"{CONFIG_KEY}" in {PACKAGE_JSON} must be an object')
    return section


def load_config(path: Path | None = None) -> MonoreleaseConfig:
    """Load configuration from the package.json at or above ``path``.

    Raises:
        ConfigNotFoundError: If no package.json exists
        ConfigValidationError: If the configuration is invalid
    """
    package_path = find_root_package_json(path)
    try:
        data = load_package_json(package_path)
    except PackageJsonNotFoundError as e:
        raise ConfigNotFoundError(str(e)) from e

    try:
        return MonoreleaseConfig.model_validate(extract_config(data))
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {package_path}:\n{e}") from e
