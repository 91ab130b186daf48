"""package.json metadata and version manipulation.

This module reads the package name, version and repository/bug tracker
URLs that changelog links are built from, and rewrites the version of a
package.json in place.

Version updates use a targeted regex replacement rather than dumping the
parsed JSON again, so indentation and key order are preserved.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from monorelease.exceptions import (
    ConfigValidationError,
    PackageJsonNotFoundError,
    ProjectError,
)

PACKAGE_JSON = "package.json"

_VERSION_PATTERN = re.compile(r'^(\s*"version"\s*:\s*)"[^"]*"', re.MULTILINE)


@dataclass(frozen=True)
class PackageMetadata:
    """The parts of package.json that release tooling needs."""

    name: str
    version: str | None = None
    repository_url: str | None = None
    bugs_url: str | None = None

    @property
    def issues_url(self) -> str | None:
        """Base URL that issue numbers are appended to."""
        if self.repository_url:
            return f"{self.repository_url}/issues"
        if self.bugs_url:
            return self.bugs_url.rstrip("/")
        return None


def find_package_json(start: Path | None = None) -> Path:
    """Return the package.json of a directory (or the path itself if it is a file).

    Raises:
        PackageJsonNotFoundError: If no package.json exists there
    """
    start = start or Path.cwd()
    candidate = start if start.is_file() else start / PACKAGE_JSON
    if not candidate.is_file():
        raise PackageJsonNotFoundError(f"No {PACKAGE_JSON} found in {start}")
    return candidate


def load_package_json(path: Path) -> dict[str, Any]:
    """Load and parse a package.json file.

    Raises:
        PackageJsonNotFoundError: If the file doesn't exist
        ConfigValidationError: If the file isn't valid JSON
    """
    package_path = find_package_json(path)
    try:
        data = json.loads(package_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON in {package_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{package_path} must contain a JSON object")
    return data


def normalize_repository_url(repository: str | dict[str, Any] | None) -> str | None:
    """Turn the ``repository`` field into a browsable URL.

    Accepts the plain string form and the ``{"type": ..., "url": ...}`` form,
    dropping ``git+`` prefixes and ``.git`` suffixes.
    """
    if isinstance(repository, dict):
        repository = repository.get("url")
    if not repository:
        return None

    url = str(repository).strip()
    url = url.removeprefix("git+")
    url = re.sub(r"\.git$", "", url)
    if url.startswith("git@github.com:"):
        url = "https://github.com/" + url.removeprefix("git@github.com:")
    elif url.startswith("github:"):
        url = "https://github.com/" + url.removeprefix("github:")
    return url.rstrip("/")


def get_package_metadata(path: Path) -> PackageMetadata:
    """Read name, version and URLs from a package.json.

    Raises:
        ConfigValidationError: If the package has no name
    """
    data = load_package_json(path)

    name = data.get("name")
    if not name:
        raise ConfigValidationError(f"No package name found in {find_package_json(path)}")

    bugs = data.get("bugs")
    if isinstance(bugs, dict):
        bugs = bugs.get("url")

    return PackageMetadata(
        name=name,
        version=data.get("version"),
        repository_url=normalize_repository_url(data.get("repository")),
        bugs_url=bugs or None,
    )


def update_package_version(path: Path, new_version: str) -> Path:
    """Set the ``version`` field of a package.json.

    Args:
        path: package.json or the directory containing it
        new_version: Version string to write

    Returns:
        Path to the updated package.json

    Raises:
        ProjectError: If the file has no top-level version field
    """
    package_path = find_package_json(path)
    content = package_path.read_text(encoding="utf-8")

    new_content, count = _VERSION_PATTERN.subn(
        rf'\g<1>"{new_version}"',
        content,
        count=1,
    )

    if count == 0:
        raise ProjectError(f'Could not find a "version" field in {package_path}')

    package_path.write_text(new_content, encoding="utf-8")
    return package_path
