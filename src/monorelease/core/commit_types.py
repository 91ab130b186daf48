"""Commit type table.

Maps the type token of a ``Type: Subject.`` header to the changelog
category it is displayed under and whether it appears in the changelog
at all. The set of tokens is closed; anything else is an invalid commit.
"""

from __future__ import annotations

from enum import Enum

BREAKING_CHANGES = "BREAKING CHANGES"
BREAKING_CHANGE_TITLES = frozenset({"BREAKING CHANGE", BREAKING_CHANGES})
NOTE = "NOTE"


class CommitType(Enum):
    """Known commit type tokens as ``(token, display category, included)``."""

    FEATURE = ("Feature", "Features", True)
    FIX = ("Fix", "Bug fixes", True)
    OTHER = ("Other", "Other changes", True)
    CODE_STYLE = ("Code style", "Code style", False)
    DOCS = ("Docs", "Docs", False)
    INTERNAL = ("Internal", "Internal", False)
    TESTS = ("Tests", "Tests", False)
    REVERT = ("Revert", "Revert", False)
    RELEASE = ("Release", "Release", False)

    def __init__(self, token: str, display: str, included: bool) -> None:
        self.token = token
        self.display = display
        self.included = included

    @classmethod
    def lookup(cls, token: str | None) -> CommitType | None:
        """Find the member for a raw type token, ``None`` if the token is unknown."""
        if token is None:
            return None
        return _BY_TOKEN.get(token)


_BY_TOKEN = {member.token: member for member in CommitType}

# Order of sub-sections within one version of the changelog
SECTION_ORDER: tuple[str, ...] = (
    CommitType.FIX.display,
    CommitType.FEATURE.display,
    CommitType.OTHER.display,
    BREAKING_CHANGES,
    NOTE,
)


def is_included(token: str | None) -> bool:
    """Whether commits of this type are listed in the changelog."""
    commit_type = CommitType.lookup(token)
    return commit_type is not None and commit_type.included
