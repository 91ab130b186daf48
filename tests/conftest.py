"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from monorelease.project.package_json import PackageMetadata
from tests.helpers import REPOSITORY_URL, commit, git, write_package_json


@pytest.fixture
def empty_repo(tmp_path: Path) -> Path:
    """An initialised git repository without commits."""
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "--quiet")
    git(repo, "config", "user.email", "release@example.com")
    git(repo, "config", "user.name", "Release Bot")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "tag.gpgsign", "false")
    return repo


@pytest.fixture
def package_repo(empty_repo: Path) -> Path:
    """A git repository with a package.json (not yet committed)."""
    write_package_json(
        empty_repo,
        name="@ckeditor/ckeditor5-test-package",
        version="0.0.1",
        bugs=f"{REPOSITORY_URL}/issues",
        repository=REPOSITORY_URL,
    )
    return empty_repo


@pytest.fixture
def package() -> PackageMetadata:
    return PackageMetadata(
        name="@ckeditor/ckeditor5-test-package",
        version="0.0.1",
        repository_url=REPOSITORY_URL,
        bugs_url=f"{REPOSITORY_URL}/issues",
    )


@pytest.fixture
def monorepo(empty_repo: Path) -> Path:
    """A repository with two sub-packages and one internal package."""
    write_package_json(
        empty_repo,
        name="monorepo",
        private=True,
        repository=REPOSITORY_URL,
        monorelease={"packages": {"skip": ["@scope/*-internal"]}},
    )
    for name in ("alpha", "beta", "tools-internal"):
        write_package_json(
            empty_repo / "packages" / name,
            name=f"@scope/{name}",
            version="1.0.0",
            repository=REPOSITORY_URL,
        )
    git(empty_repo, "add", ".")
    commit(empty_repo, "Internal: Initial commit.")
    return empty_repo
