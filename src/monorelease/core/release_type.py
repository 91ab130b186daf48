"""Release type resolution.

Walks the commits made since the previous release tag, newest first,
and decides which semantic-version bump the next release needs:

- ``major`` if an included commit carries a breaking-change note
- ``minor`` if an included commit is a feature
- ``patch`` if any other included commit exists
- ``internal`` if only commits hidden from the changelog exist
- ``skip`` if nothing was committed since the tag

A breaking change cannot be outranked, so no commit older than the
first breaking one is transformed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from monorelease.core.commit_types import CommitType
from monorelease.core.commits import DEFAULT_NOTE_KEYWORDS, Commit
from monorelease.core.transform import TransformContext, transform_commit
from monorelease.core.version import ReleaseType, Version, next_version
from monorelease.exceptions import EmptyRepositoryError, TagNotFoundError, VersionError
from monorelease.project.package_json import PackageMetadata
from monorelease.vcs.git import GitRepository

logger = logging.getLogger(__name__)

TransformFn = Callable[[Commit, TransformContext], "Commit | None"]


@dataclass(frozen=True)
class ResolveOptions:
    """Options for :func:`resolve_release_type`.

    Attributes:
        tag_name: Tag of the previous release; history stops before it
        cwd: Directory inside the repository
        path: Only consider commits touching this path (a sub-package)
        allow_empty: Return ``skip`` for a repository without commits
            instead of raising
        package: Metadata passed to the transformer for links
        note_keywords: Footer keywords recognised as notes
    """

    tag_name: str | None = None
    cwd: Path = Path()
    path: Path | str | None = None
    allow_empty: bool = False
    package: PackageMetadata | None = None
    note_keywords: tuple[str, ...] = DEFAULT_NOTE_KEYWORDS


@dataclass
class ReleaseTypeDecision:
    """Result of :func:`resolve_release_type`."""

    release_type: ReleaseType
    version: Version | None = None
    commits: list[Commit] = field(default_factory=list)

    @property
    def is_release(self) -> bool:
        return self.release_type != ReleaseType.SKIP


def resolve_release_type(
    transform: TransformFn = transform_commit,
    options: ResolveOptions | None = None,
    *,
    repo: GitRepository | None = None,
) -> ReleaseTypeDecision:
    """Determine the release type of the changes since the last release.

    Args:
        transform: Commit transformer, called once per examined commit
        options: Resolution options
        repo: Repository to read, defaults to the one at ``options.cwd``

    Returns:
        The release type, the next version and the included commits

    Raises:
        EmptyRepositoryError: If the repository has no commits and
            ``options.allow_empty`` is not set
        TagNotFoundError: If ``options.tag_name`` does not exist
        GitError: If reading the repository fails
    """
    options = options or ResolveOptions()
    repo = repo or GitRepository(options.cwd)

    # Empty repository and "nothing since the tag" both resolve to skip,
    # but are detected separately.
    if not repo.has_commits():
        if options.allow_empty:
            return ReleaseTypeDecision(ReleaseType.SKIP)
        raise EmptyRepositoryError()

    if options.tag_name and not repo.tag_exists(options.tag_name):
        raise TagNotFoundError(options.tag_name)

    current: Version | None = None
    if options.tag_name:
        try:
            current = Version.from_tag(options.tag_name)
        except VersionError as e:
            # The release type still follows from the commits
            logger.debug("No version in tag %s: %s", options.tag_name, e)

    commits = repo.get_commits(options.tag_name, options.path, options.note_keywords)
    if not commits:
        logger.debug("No commits since %s", options.tag_name)
        return ReleaseTypeDecision(ReleaseType.SKIP, current)

    context = TransformContext(
        display_logs=False,
        return_invalid_commit=True,
        package=options.package,
    )

    included: list[Commit] = []
    has_internal = False
    has_feature = False
    has_breaking = False

    for commit in commits:
        transformed = transform(commit, context)
        if transformed is None:
            continue

        commit_type = CommitType.lookup(transformed.raw_type)
        if commit_type is None:
            # Invalid commits never count towards a release
            continue
        if not commit_type.included:
            has_internal = True
            continue

        included.append(transformed)

        if transformed.has_breaking_change:
            has_breaking = True
            break
        if commit_type is CommitType.FEATURE:
            has_feature = True

    if has_breaking:
        release_type = ReleaseType.MAJOR
    elif has_feature:
        release_type = ReleaseType.MINOR
    elif included:
        release_type = ReleaseType.PATCH
    elif has_internal:
        release_type = ReleaseType.INTERNAL
    else:
        release_type = ReleaseType.SKIP

    logger.debug("Resolved %s release from %d commits", release_type, len(commits))

    return ReleaseTypeDecision(
        release_type=release_type,
        version=next_version(current, release_type),
        commits=included,
    )
