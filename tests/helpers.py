"""Helpers for building git repositories and commits in tests."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

from monorelease.core.commits import Commit, parse_commit

REPOSITORY_URL = "https://github.com/ckeditor/ckeditor5-test-package"


def git(repo: Path, *args: str) -> str:
    """Run a git command in ``repo`` and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def commit(repo: Path, *messages: str) -> None:
    """Create an empty commit; each message becomes one paragraph."""
    args = ["commit", "--allow-empty"]
    for message in messages:
        args.extend(["--message", message])
    git(repo, *args)


def commit_file(repo: Path, relative_path: str, *messages: str) -> None:
    """Create a commit that adds or changes one file."""
    path = repo / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    previous = path.read_text() if path.exists() else ""
    path.write_text(previous + "change\n")
    git(repo, "add", relative_path)
    commit(repo, *messages)


def write_package_json(directory: Path, **fields: object) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(fields, indent="\t") + "\n")
    return path


def raw_entry(message: str, commit_hash: str = "a1b2c3d4e5f60718293a") -> str:
    """Build a raw log entry as produced by the git reader."""
    return f"{message}\n\n-hash-\n{commit_hash}\n"


def make_commit(message: str, commit_hash: str = "a1b2c3d4e5f60718293a") -> Commit:
    parsed = parse_commit(raw_entry(message, commit_hash))
    assert parsed is not None
    return parsed
