"""Commit model and raw git log parsing.

Commit messages follow the ``Type: Subject.`` convention::

    Feature: Added a new button. Closes #12.

    Optional body describing the change.

    NOTE: Notes are collected from the footer.
    BREAKING CHANGES: The old button is gone.

Raw entries are produced by ``git log --format=%B%n-hash-%n%H`` so that
the hash follows the message as a ``-hash-`` field.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from monorelease.core.commit_types import BREAKING_CHANGE_TITLES

HEADER_PATTERN = re.compile(r"^([^:]+): (.*)$")
MERGE_PATTERN = re.compile(r"^Merge .*$")
REVERT_PATTERN = re.compile(r"^Revert:\s([\s\S]*?)\s*This reverts commit (\w*)\.")
FIELD_PATTERN = re.compile(r"^-(.*?)-$")
REFERENCE_PATTERN = re.compile(r"(?:(?<![\w/-])([\w-]+/[\w-]+))?#(\d+)")

DEFAULT_NOTE_KEYWORDS: tuple[str, ...] = ("BREAKING CHANGE", "BREAKING CHANGES", "NOTE")


@dataclass
class CommitNote:
    """A footer annotation such as ``BREAKING CHANGES: ...``."""

    title: str
    text: str


@dataclass
class CommitReference:
    """An issue mentioned somewhere in the commit message."""

    issue: str
    repository: str | None = None


@dataclass
class CommitRevert:
    header: str
    hash: str


@dataclass
class Commit:
    """One commit under evaluation.

    Created by :func:`parse_commit` and mutated in place by the transformer.
    """

    header: str
    hash: str | None = None
    type: str | None = None
    subject: str | None = None
    body: str | None = None
    footer: str | None = None
    notes: list[CommitNote] = field(default_factory=list)
    references: list[CommitReference] = field(default_factory=list)
    merge: str | None = None
    revert: CommitRevert | None = None
    raw_type: str | None = None

    @property
    def has_breaking_change(self) -> bool:
        return any(note.title in BREAKING_CHANGE_TITLES for note in self.notes)


def _note_pattern(keywords: Iterable[str]) -> re.Pattern[str]:
    # Longest keyword first so "BREAKING CHANGES" is not read as "BREAKING CHANGE"
    ordered = sorted(keywords, key=len, reverse=True)
    alternatives = "|".join(re.escape(keyword) for keyword in ordered)
    return re.compile(rf"^({alternatives}):[ \t]*(.*)$")


def _join(lines: list[str]) -> str | None:
    text = "\n".join(lines).strip("\n")
    return text or None


def parse_commit(
    raw: str,
    note_keywords: Iterable[str] = DEFAULT_NOTE_KEYWORDS,
) -> Commit | None:
    """Parse a single raw log entry into a :class:`Commit`.

    Args:
        raw: Commit message, optionally followed by ``-<field>-`` blocks
        note_keywords: Footer keywords that open a note

    Returns:
        Parsed commit, or None if the entry holds no message at all
    """
    lines = [line.rstrip() for line in raw.strip("\r\n").splitlines()]
    if not lines or not any(lines):
        return None

    note_pattern = _note_pattern(note_keywords)

    merge: str | None = None
    if MERGE_PATTERN.match(lines[0]):
        merge = lines.pop(0)
        # Blank lines between the merge line and the real header are skipped.
        # A default git merge commit has no second line, so the next
        # non-empty line is the "-hash-" marker itself.
        while lines and not lines[0].strip():
            lines.pop(0)

    header = lines.pop(0) if lines else (merge or "")

    fields: dict[str, list[str]] = {}
    current_field: str | None = None
    body_lines: list[str] = []
    footer_lines: list[str] = []
    notes: list[CommitNote] = []
    note_lines: list[str] = []

    def close_note() -> None:
        if notes:
            notes[-1].text = "\n".join(note_lines).strip()

    for line in lines:
        field_match = FIELD_PATTERN.match(line)
        if field_match:
            current_field = field_match.group(1)
            fields[current_field] = []
            continue

        if current_field is not None:
            fields[current_field].append(line)
            continue

        note_match = note_pattern.match(line)
        if note_match:
            close_note()
            notes.append(CommitNote(title=note_match.group(1), text=""))
            note_lines = [note_match.group(2)]
            footer_lines.append(line)
            continue

        if notes:
            footer_lines.append(line)
            note_lines.append(line)
        else:
            body_lines.append(line)

    close_note()

    commit = Commit(
        header=header,
        hash=_join(fields.get("hash", [])),
        body=_join(body_lines),
        footer=_join(footer_lines),
        notes=notes,
        merge=merge,
    )

    header_match = HEADER_PATTERN.match(header)
    if header_match:
        commit.type = header_match.group(1)
        commit.subject = header_match.group(2)

    message = "\n".join(part for part in (header, commit.body, commit.footer) if part)

    revert_match = REVERT_PATTERN.match(message)
    if revert_match:
        commit.revert = CommitRevert(header=revert_match.group(1), hash=revert_match.group(2))

    commit.references = [
        CommitReference(issue=match.group(2), repository=match.group(1))
        for match in REFERENCE_PATTERN.finditer(message)
    ]

    return commit


def parse_commits(
    raw_entries: Iterable[str],
    note_keywords: Iterable[str] = DEFAULT_NOTE_KEYWORDS,
) -> list[Commit]:
    """Parse raw log entries, dropping entries with no message."""
    keywords = tuple(note_keywords)
    commits = []
    for raw in raw_entries:
        commit = parse_commit(raw, keywords)
        if commit is not None:
            commits.append(commit)
    return commits
