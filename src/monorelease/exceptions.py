"""Exception hierarchy for monorelease.

Library code raises these; the CLI layer turns them into readable
messages and a non-zero exit code.
"""

from __future__ import annotations


class MonoreleaseError(Exception):
    """Base class for all monorelease errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(MonoreleaseError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No package.json could be found."""


class ConfigValidationError(ConfigError):
    """Configuration or package metadata is invalid."""


# =============================================================================
# Git
# =============================================================================


class GitError(MonoreleaseError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr


class EmptyRepositoryError(GitError):
    """The repository has no commits at all."""

    def __init__(self) -> None:
        super().__init__("Given repository is empty.")


class TagNotFoundError(GitError):
    """The previous release tag does not exist in the repository."""

    def __init__(self, tag_name: str) -> None:
        super().__init__(
            f'Cannot find tag "{tag_name}" (the latest version from the changelog) '
            "in given repository."
        )
        self.tag_name = tag_name


# =============================================================================
# Commits and changelog
# =============================================================================


class InvalidCommitError(MonoreleaseError):
    """A commit type token is not part of the commit type table.

    Raised by the transformer only in strict mode; otherwise invalid
    commits are logged and dropped or passed through.
    """

    def __init__(self, commit_hash: str | None, header: str) -> None:
        super().__init__(f"Invalid commit {commit_hash}: {header!r}")
        self.commit_hash = commit_hash
        self.header = header


class ChangelogError(MonoreleaseError):
    """Changelog could not be read or written."""


class VersionError(MonoreleaseError):
    """A version string could not be parsed."""


# =============================================================================
# Project files
# =============================================================================


class ProjectError(MonoreleaseError):
    """A project file could not be read or updated."""


class PackageJsonNotFoundError(ProjectError):
    """No package.json in the given directory."""
