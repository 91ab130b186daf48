"""Core business logic for monorelease.

This package contains the fundamental building blocks:
- Commit parsing and the commit type table
- Commit transformation into release-note form
- Semantic versions and release types

Release type resolution (:mod:`monorelease.core.release_type`) and
changelog writing (:mod:`monorelease.core.changelog`) read the git
repository and are imported from their modules directly.
"""

from __future__ import annotations

from monorelease.core.commit_types import SECTION_ORDER, CommitType
from monorelease.core.commits import Commit, CommitNote, parse_commit, parse_commits
from monorelease.core.transform import TransformContext, transform_commit
from monorelease.core.version import ReleaseType, Version, next_version

__all__ = [
    # Commits
    "SECTION_ORDER",
    "Commit",
    "CommitNote",
    "CommitType",
    "parse_commit",
    "parse_commits",
    # Transformation
    "TransformContext",
    "transform_commit",
    # Versions
    "ReleaseType",
    "Version",
    "next_version",
]
