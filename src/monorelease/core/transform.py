"""Commit transformation for the changelog.

Each parsed commit is classified against the commit type table:

- INCLUDED commits are rewritten into release-note form (display
  category, trailing period, issue and user links, indented body)
- SKIPPED commits have a known type that never reaches the changelog
- INVALID commits have a type token outside the table

One log line per commit reports the classification.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.markup import escape

from monorelease.core.commit_types import BREAKING_CHANGES, CommitType
from monorelease.core.commits import Commit
from monorelease.core.links import DEFAULT_USER_URL, link_issues, link_users, truncate
from monorelease.exceptions import InvalidCommitError
from monorelease.project.package_json import PackageMetadata

logger = logging.getLogger(__name__)

SHORT_HASH_LENGTH = 7
HEADER_LOG_LENGTH = 100
SKIP_CI_MARKER = "[skip ci]"

# Width of the "* 1234567 " prefix of a log line
_LOG_INDENT = " " * 10


@dataclass(frozen=True)
class TransformContext:
    """Options for :func:`transform_commit`.

    Attributes:
        display_logs: Log classification lines at INFO instead of DEBUG
        return_invalid_commit: Return skipped and invalid commits instead of None
        strict: Raise InvalidCommitError for a commit whose type is unknown
        package: Metadata used to build issue links
        user_url: Profile URL template with a ``{user}`` placeholder
    """

    display_logs: bool = True
    return_invalid_commit: bool = False
    strict: bool = False
    package: PackageMetadata | None = None
    user_url: str = DEFAULT_USER_URL

    @property
    def issues_url(self) -> str | None:
        return self.package.issues_url if self.package else None


def transform_commit(commit: Commit, context: TransformContext) -> Commit | None:
    """Classify a commit and rewrite it for the changelog, in place.

    Args:
        commit: Parsed commit, mutated by this call
        context: Transformation options

    Returns:
        The commit when it belongs in the changelog (or when
        ``context.return_invalid_commit`` is set), otherwise None

    Raises:
        InvalidCommitError: If ``context.strict`` is set and the type
            token is not in the commit type table
    """
    repair_merge_commit(commit)

    if isinstance(commit.hash, str):
        commit.hash = commit.hash[:SHORT_HASH_LENGTH]

    commit_type = CommitType.lookup(commit.type)
    _log_commit(commit, commit_type, context)

    if commit_type is None and context.strict:
        raise InvalidCommitError(commit.hash, commit.header)

    if commit_type is None or not commit_type.included:
        if context.return_invalid_commit:
            commit.raw_type = commit.type
            return commit
        return None

    if commit.subject is not None:
        commit.subject = _normalize_subject(commit.subject)

    commit.raw_type = commit.type
    commit.type = commit_type.display

    if commit.subject is not None:
        commit.subject = _make_links(commit.subject, context)

    # Notes are parsed out of the footer, so their lines would show twice.
    if commit.footer and commit.notes:
        note_lines = {
            line.strip() for note in commit.notes for line in note.text.split("\n") if line.strip()
        }
        footer_lines = [
            line
            for line in commit.footer.split("\n")
            if not any(line.startswith(note.title) for note in commit.notes)
            and line.strip() not in note_lines
        ]
        commit.footer = "\n".join(footer_lines).strip() or None

    if commit.footer and not commit.body:
        commit.body = commit.footer
        commit.footer = None

    if commit.body is not None:
        commit.body = "\n".join("  " + line if line else "" for line in commit.body.split("\n"))
        commit.body = _make_links(commit.body, context)

    for note in commit.notes:
        if note.title == "BREAKING CHANGE":
            note.title = BREAKING_CHANGES
        note.text = _make_links(note.text, context)

    # Issues are linked inline only, never hoisted into a separate list.
    commit.references = []

    return commit


def repair_merge_commit(commit: Commit) -> None:
    """Fix the fields of a merge commit created by git itself.

    Our merge commits carry two lines::

        Merge pull request #5 from owner/branch
        Fix: Subject of the changes.

    A merge commit made by ``git merge`` has only the first line, so the
    parser takes the ``-hash-`` marker as the header and the hash ends up
    in the body. Restore the hash and use the merge line as the header.
    """
    if commit.merge and not commit.hash:
        commit.hash = commit.body
        commit.header = commit.merge
        commit.body = None
        commit.type = None
        commit.subject = None


def _normalize_subject(subject: str) -> str:
    subject = " ".join(subject.replace(SKIP_CI_MARKER, "").split())
    return subject.rstrip(" .") + "."


def _make_links(text: str, context: TransformContext) -> str:
    text = link_issues(text, context.issues_url)
    return link_users(text, context.user_url)


def _log_commit(
    commit: Commit,
    commit_type: CommitType | None,
    context: TransformContext,
) -> None:
    if commit_type is not None and commit_type.included:
        status = "[green]INCLUDED[/]"
    elif commit_type is not None:
        status = "[grey50]SKIPPED[/]"
    else:
        status = "[red]INVALID[/]"

    message = (
        f"* [yellow]{commit.hash}[/] "
        f"\"{escape(truncate(commit.header, HEADER_LOG_LENGTH))}\" {status}"
    )

    # The merge line is shown only when it was not promoted to the header
    if commit.merge and commit.merge != commit.header:
        message += f"\n{_LOG_INDENT}{escape(commit.merge)}"

    logger.log(logging.INFO if context.display_logs else logging.DEBUG, message)
