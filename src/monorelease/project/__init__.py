"""Project files: package.json and sub-package discovery."""

from __future__ import annotations

from monorelease.project.package_json import (
    PackageMetadata,
    get_package_metadata,
    update_package_version,
)
from monorelease.project.subpackages import PathsCollection, get_subpackages_paths

__all__ = [
    "PackageMetadata",
    "PathsCollection",
    "get_package_metadata",
    "get_subpackages_paths",
    "update_package_version",
]
