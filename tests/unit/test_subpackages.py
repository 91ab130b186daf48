"""Tests for sub-package discovery."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from monorelease.project.subpackages import get_subpackages_paths, matches_package_name
from tests.helpers import write_package_json

if TYPE_CHECKING:
    from pathlib import Path


def names(paths: list[Path]) -> list[str]:
    return [path.name for path in paths]


class TestGetSubpackagesPaths:
    """Tests for get_subpackages_paths()."""

    def test_all_packages(self, monorepo: Path):
        paths = get_subpackages_paths(monorepo)

        assert names(paths.matched) == ["alpha", "beta", "tools-internal"]
        assert paths.skipped == []

    def test_skip_packages(self, monorepo: Path):
        paths = get_subpackages_paths(monorepo, skip_packages="@scope/*-internal")

        assert names(paths.matched) == ["alpha", "beta"]
        assert names(paths.skipped) == ["tools-internal"]

    def test_skip_multiple_patterns(self, monorepo: Path):
        paths = get_subpackages_paths(monorepo, skip_packages=["@scope/*alpha", "@scope/*beta"])

        assert names(paths.matched) == ["tools-internal"]
        assert names(paths.skipped) == ["alpha", "beta"]

    def test_wildcard_does_not_cross_scope(self, monorepo: Path):
        """An unscoped pattern leaves scoped packages alone."""
        paths = get_subpackages_paths(monorepo, skip_packages="*-internal")

        assert names(paths.matched) == ["alpha", "beta", "tools-internal"]
        assert paths.skipped == []

    def test_scope(self, monorepo: Path):
        paths = get_subpackages_paths(monorepo, scope="@scope/b*")

        assert names(paths.matched) == ["beta"]
        assert names(paths.skipped) == ["alpha", "tools-internal"]

    def test_directories_without_package_json_are_ignored(self, monorepo: Path):
        (monorepo / "packages" / "docs").mkdir()
        (monorepo / "packages" / "README.md").write_text("Packages.\n")

        paths = get_subpackages_paths(monorepo)

        assert "docs" not in names(paths.matched + paths.skipped)

    def test_custom_packages_directory(self, tmp_path: Path):
        write_package_json(tmp_path / "libs" / "one", name="one")

        paths = get_subpackages_paths(tmp_path, packages="libs")

        assert names(paths.matched) == ["one"]

    def test_missing_packages_directory(self, tmp_path: Path):
        paths = get_subpackages_paths(tmp_path)

        assert paths.matched == []
        assert paths.skipped == []


@pytest.mark.parametrize(
    ("name", "pattern", "expected"),
    [
        ("tools-internal", "*-internal", True),
        ("@scope/tools-internal", "*-internal", False),
        ("@scope/tools-internal", "@scope/*-internal", True),
        ("@scope/tools-internal", "*/*-internal", True),
        ("@scope/alpha", "@scope/*", True),
        ("@other/alpha", "@scope/*", False),
        ("@scope/Alpha", "@scope/alpha", False),
    ],
)
def test_matches_package_name(name, pattern, expected):
    assert matches_package_name(name, pattern) is expected
