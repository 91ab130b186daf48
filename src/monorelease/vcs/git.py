"""Git repository access via the ``git`` command line."""

from __future__ import annotations

import fnmatch
import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from monorelease.core.commits import DEFAULT_NOTE_KEYWORDS, Commit, parse_commits
from monorelease.exceptions import GitError

logger = logging.getLogger(__name__)

# Separator between log entries, unlikely to appear in commit messages
COMMIT_SEPARATOR = "---MONORELEASE-COMMIT---"

# Message first, then the full hash as a "-hash-" field
RAW_COMMIT_FORMAT = f"%B%n-hash-%n%H%n{COMMIT_SEPARATOR}"


class GitRepository:
    """A local git repository.

    Args:
        path: Any directory inside the working tree

    Raises:
        GitError: If ``path`` is not inside a git repository
    """

    def __init__(self, path: Path | str = ".") -> None:
        self.path = Path(path).resolve()
        top_level = self._run("rev-parse", "--show-toplevel")
        self.root = Path(top_level.strip())

    def _run(self, *args: str, check: bool = True) -> str:
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=check,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {' '.join(args)} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e
        return result.stdout

    def has_commits(self) -> bool:
        """Whether HEAD points at a commit."""
        try:
            self._run("rev-parse", "--verify", "--quiet", "HEAD")
        except GitError:
            return False
        return True

    def get_tags(self) -> list[str]:
        """All tag names, newest version first."""
        output = self._run("tag", "--list", "--sort=-v:refname")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def tag_exists(self, name: str) -> bool:
        return name in self.get_tags()

    def get_latest_tag(self, pattern: str = "*") -> str | None:
        """Return the highest version tag matching a glob, or None."""
        for tag in self.get_tags():
            if fnmatch.fnmatch(tag, pattern):
                return tag
        return None

    def get_raw_log(self, from_tag: str | None = None, path: Path | str | None = None) -> list[str]:
        """Raw log entries reachable from HEAD, newest first.

        Args:
            from_tag: Exclude the tag and everything before it
            path: Only commits touching this path

        Returns:
            One ``%B%n-hash-%n%H`` entry per commit
        """
        revision = f"{from_tag}..HEAD" if from_tag else "HEAD"
        args = ["log", "--first-parent", f"--format={RAW_COMMIT_FORMAT}", revision]
        if path is not None:
            args.extend(["--", str(path)])

        output = self._run(*args)
        entries = [entry for entry in output.split(COMMIT_SEPARATOR) if entry.strip()]
        logger.debug("Read %d commits from %s (%s)", len(entries), self.root, revision)
        return entries

    def get_commits(
        self,
        from_tag: str | None = None,
        path: Path | str | None = None,
        note_keywords: Iterable[str] = DEFAULT_NOTE_KEYWORDS,
    ) -> list[Commit]:
        """Parsed commits reachable from HEAD, newest first."""
        return parse_commits(self.get_raw_log(from_tag, path), note_keywords)
