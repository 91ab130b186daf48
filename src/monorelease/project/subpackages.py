"""Discovery of packages kept inside a single repository."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path

from monorelease.project.package_json import PACKAGE_JSON, get_package_metadata


@dataclass
class PathsCollection:
    """Sub-package directories split into those to process and those to skip."""

    matched: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


def get_subpackages_paths(
    cwd: Path,
    packages: str = "packages",
    skip_packages: str | Iterable[str] = (),
    scope: str | None = None,
) -> PathsCollection:
    """Collect package directories under ``cwd / packages``.

    A package is skipped when its name matches any of ``skip_packages``
    or, if ``scope`` is given, does not match ``scope``. Globs are
    matched per ``/``-separated segment (see :func:`matches_package_name`).
    Directories without a package.json are ignored.

    Args:
        cwd: Repository root
        packages: Directory holding the packages
        skip_packages: Glob pattern(s) of package names to skip
        scope: Glob pattern package names must match

    Returns:
        Matched and skipped package paths, sorted by directory name
    """
    if isinstance(skip_packages, str):
        skip_packages = [skip_packages]
    skip_patterns = list(skip_packages)

    collection = PathsCollection()
    packages_path = cwd / packages
    if not packages_path.is_dir():
        return collection

    for directory in sorted(p for p in packages_path.iterdir() if p.is_dir()):
        if not (directory / PACKAGE_JSON).is_file():
            continue

        name = get_package_metadata(directory).name
        if _is_valid_package(name, skip_patterns, scope):
            collection.matched.append(directory)
        else:
            collection.skipped.append(directory)

    return collection


def matches_package_name(name: str, pattern: str) -> bool:
    """Glob-match a package name segment by segment.

    ``*`` and ``?`` never match ``/``, so ``*-internal`` matches
    ``tools-internal`` but not ``@scope/tools-internal``.
    """
    name_parts = name.split("/")
    pattern_parts = pattern.split("/")
    if len(name_parts) != len(pattern_parts):
        return False
    return all(fnmatchcase(part, glob) for part, glob in zip(name_parts, pattern_parts))


def _is_valid_package(name: str, skip_patterns: list[str], scope: str | None) -> bool:
    if any(matches_package_name(name, pattern) for pattern in skip_patterns):
        return False
    if scope:
        return matches_package_name(name, scope)
    return True
