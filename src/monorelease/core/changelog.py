"""Changelog generation.

Release notes are built from transformed commits and written to the
``CHANGELOG.md`` of a package. New sections are inserted directly below
the fixed header, so the newest release is always on top::

    Changelog
    =========

    ## [1.1.0](https://github.com/owner/repo/compare/v1.0.0...v1.1.0) (2024-05-02)

    ### Features

    * Added a button. Closes [#12](https://github.com/owner/repo/issues/12). ([1a2b3c4](...))
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from pathlib import Path

from monorelease.core.commit_types import SECTION_ORDER
from monorelease.core.commits import DEFAULT_NOTE_KEYWORDS, Commit
from monorelease.core.links import DEFAULT_USER_URL
from monorelease.core.release_type import TransformFn
from monorelease.core.transform import TransformContext, transform_commit
from monorelease.exceptions import ChangelogError, TagNotFoundError
from monorelease.project.package_json import PackageMetadata, get_package_metadata
from monorelease.vcs.git import GitRepository

logger = logging.getLogger(__name__)

CHANGELOG_FILE = "CHANGELOG.md"
CHANGELOG_HEADER = "Changelog\n=========\n\n"
INTERNAL_RELEASE_NOTE = "Internal changes only (updated dependencies, documentation, etc.)."

_LAST_VERSION_PATTERN = re.compile(r"\n## \[?([\da-z.\-+]+)", re.IGNORECASE)


@dataclass(frozen=True)
class ChangelogOptions:
    """Options for :func:`generate_changelog_from_commits`.

    Attributes:
        version: Version being released
        cwd: Package directory holding package.json and the changelog
        tag_name: Tag of the previous release, None for a first release
        new_tag_name: Tag the release will get, defaults to ``v<version>``
        path: Only include commits touching this path
        transform: Commit transformer
        is_internal_release: Write the internal-changes note even if
            commits would be listed
        display_logs: Log each commit classification at INFO
        strict: Fail on commits whose type is unknown
        user_url: Profile URL template for ``@mentions``
        changelog_file: File name of the changelog
        release_date: Date in the title, defaults to today (UTC)
    """

    version: str
    cwd: Path = Path()
    tag_name: str | None = None
    new_tag_name: str | None = None
    path: Path | str | None = None
    transform: TransformFn = transform_commit
    is_internal_release: bool = False
    display_logs: bool = True
    strict: bool = False
    user_url: str = DEFAULT_USER_URL
    note_keywords: tuple[str, ...] = DEFAULT_NOTE_KEYWORDS
    changelog_file: str = CHANGELOG_FILE
    release_date: date | None = None

    @property
    def effective_new_tag_name(self) -> str:
        return self.new_tag_name or f"v{self.version}"


# =============================================================================
# Rendering
# =============================================================================


def _release_title(
    version: str,
    package: PackageMetadata | None,
    previous_tag_name: str | None,
    new_tag_name: str,
    release_date: date,
) -> str:
    day = release_date.isoformat()
    repository_url = package.repository_url if package else None

    if previous_tag_name and repository_url:
        compare_url = f"{repository_url}/compare/{previous_tag_name}...{new_tag_name}"
        return f"## [{version}]({compare_url}) ({day})"
    return f"## {version} ({day})"


def _indent_continuation(text: str) -> str:
    lines = text.split("\n")
    return "\n".join([lines[0]] + ["  " + line if line else "" for line in lines[1:]])


def format_commit_entry(commit: Commit, repository_url: str | None) -> str:
    """Format one changelog bullet, followed by the body paragraph if any."""
    entry = f"* {commit.subject or commit.header}"

    if commit.hash:
        if repository_url:
            entry += f" ([{commit.hash}]({repository_url}/commit/{commit.hash}))"
        else:
            entry += f" ({commit.hash})"

    if commit.body:
        entry += f"\n\n{commit.body}"

    return entry


def group_entries(commits: Iterable[Commit]) -> dict[str, list[Commit | str]]:
    """Group commits by display category and notes by title.

    Commit order within a group is preserved. Note groups hold the note
    text, commit groups hold the commit.
    """
    groups: dict[str, list[Commit | str]] = {}
    for commit in commits:
        groups.setdefault(commit.type or "", []).append(commit)
        for note in commit.notes:
            groups.setdefault(note.title, []).append(note.text)
    return groups


def render_release(
    version: str,
    commits: Iterable[Commit],
    *,
    package: PackageMetadata | None = None,
    previous_tag_name: str | None = None,
    new_tag_name: str | None = None,
    is_internal_release: bool = False,
    release_date: date | None = None,
) -> str:
    """Render the changelog section of one release.

    Args:
        version: Released version
        commits: Transformed commits to list
        package: Package metadata for commit and compare links
        previous_tag_name: Tag of the previous release
        new_tag_name: Tag of this release, defaults to ``v<version>``
        is_internal_release: Render only the internal-changes note
        release_date: Date shown in the title

    Returns:
        Section text, title first, ending with a newline
    """
    release_date = release_date or datetime.now(UTC).date()
    title = _release_title(
        version,
        package,
        previous_tag_name,
        new_tag_name or f"v{version}",
        release_date,
    )
    lines = [title, ""]

    commits = list(commits)
    if is_internal_release or not commits:
        lines.extend([INTERNAL_RELEASE_NOTE, ""])
        return "\n".join(lines)

    repository_url = package.repository_url if package else None
    groups = group_entries(commits)

    # Known categories first, anything unexpected after them
    ordered = [name for name in SECTION_ORDER if name in groups]
    ordered += [name for name in groups if name not in SECTION_ORDER]

    for name in ordered:
        lines.extend([f"### {name}", ""])
        for item in groups[name]:
            if isinstance(item, Commit):
                lines.append(format_commit_entry(item, repository_url))
            else:
                lines.append(f"* {_indent_continuation(item)}")
            lines.append("")

    return "\n".join(lines)


# =============================================================================
# Changelog file
# =============================================================================


def get_changelog(cwd: Path = Path(), changelog_file: str = CHANGELOG_FILE) -> str | None:
    """Return the changelog content, or None if the file doesn't exist."""
    path = cwd / changelog_file
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def save_changelog(
    content: str,
    cwd: Path = Path(),
    changelog_file: str = CHANGELOG_FILE,
) -> Path:
    path = cwd / changelog_file
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ChangelogError(f"Cannot write {path}: {e}") from e
    return path


def get_changes_for_version(
    version: str,
    cwd: Path = Path(),
    changelog_file: str = CHANGELOG_FILE,
) -> str | None:
    """Return the body of a version's section, without its title.

    Args:
        version: Version to look up, with or without a ``v`` prefix
        cwd: Directory containing the changelog

    Returns:
        The section body, or None if the version is not in the changelog
    """
    changelog = get_changelog(cwd, changelog_file)
    if changelog is None:
        return None

    version = version.removeprefix("v")
    changelog = changelog.replace(CHANGELOG_HEADER, "\n", 1)
    match = re.search(
        rf"\n(## \[?{re.escape(version)}\]?[\s\S]+?)(?:\n## \[?|$)",
        changelog,
    )
    if not match:
        return None

    return re.sub(r"##[^\n]+\n", "", match.group(1), count=1).strip()


def get_last_version(cwd: Path = Path(), changelog_file: str = CHANGELOG_FILE) -> str | None:
    """Return the newest version listed in the changelog, or None."""
    changelog = get_changelog(cwd, changelog_file)
    if changelog is None:
        return None

    match = _LAST_VERSION_PATTERN.search(changelog)
    return match.group(1) if match else None


def insert_release(changelog: str | None, section: str) -> str:
    """Insert a release section below the changelog header."""
    if not changelog:
        return CHANGELOG_HEADER + section

    rest = changelog.removeprefix(CHANGELOG_HEADER).lstrip("\n")
    if not rest:
        return CHANGELOG_HEADER + section
    return CHANGELOG_HEADER + section.rstrip("\n") + "\n\n" + rest


# =============================================================================
# Generation
# =============================================================================


def generate_changelog_from_commits(options: ChangelogOptions) -> str:
    """Write the changelog section for a new release.

    Commits since ``options.tag_name`` are transformed and rendered; the
    section is saved into the package changelog below its header.

    Args:
        options: Changelog options

    Returns:
        The rendered section

    Raises:
        TagNotFoundError: If the previous tag does not exist
        GitError: If reading the repository fails
        ChangelogError: If the changelog cannot be written
        InvalidCommitError: If ``options.strict`` is set and a commit has
            an unknown type
    """
    repo = GitRepository(options.cwd)
    package = get_package_metadata(options.cwd)

    if options.tag_name and not repo.tag_exists(options.tag_name):
        raise TagNotFoundError(options.tag_name)

    commits: list[Commit] = []
    if repo.has_commits():
        commits = repo.get_commits(options.tag_name, options.path, options.note_keywords)

    context = TransformContext(
        display_logs=options.display_logs,
        return_invalid_commit=False,
        strict=options.strict,
        package=package,
        user_url=options.user_url,
    )

    transformed = []
    for commit in commits:
        result = options.transform(commit, context)
        if result is not None:
            transformed.append(result)

    section = render_release(
        options.version,
        transformed,
        package=package,
        previous_tag_name=options.tag_name,
        new_tag_name=options.effective_new_tag_name,
        is_internal_release=options.is_internal_release,
        release_date=options.release_date,
    )

    existing = get_changelog(options.cwd, options.changelog_file)
    path = save_changelog(
        insert_release(existing, section),
        options.cwd,
        options.changelog_file,
    )
    logger.info("Saved changes for %s in %s", options.version, path)

    return section
