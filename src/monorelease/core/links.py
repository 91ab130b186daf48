"""Markdown links for issues and users mentioned in commit messages."""

from __future__ import annotations

import re

GITHUB_URL = "https://github.com"
DEFAULT_USER_URL = GITHUB_URL + "/{user}"

_ISSUE_PATTERN = re.compile(r"(/?[\w-]+/[\w-]+)?#(\d+)")
_USER_PATTERN = re.compile(r"(^|[\s(])@([\w-]+)(?![/\w-])")


def link_issues(text: str, issues_url: str | None) -> str:
    """Replace ``#12`` and ``owner/repo#12`` with markdown links.

    ``#12`` links to ``<issues_url>/12``; without an issues URL it is left
    as plain text. A reference preceded by ``/`` is part of a path and is
    never linked.
    """

    def replace(match: re.Match[str]) -> str:
        repository, issue = match.group(1), match.group(2)
        if repository:
            if repository.startswith("/"):
                return match.group(0)
            return f"[{repository}#{issue}]({GITHUB_URL}/{repository}/issues/{issue})"
        if not issues_url:
            return match.group(0)
        return f"[#{issue}]({issues_url}/{issue})"

    return _ISSUE_PATTERN.sub(replace, text)


def link_users(text: str, user_url: str = DEFAULT_USER_URL) -> str:
    """Replace ``@name`` mentions with links to the user's profile."""

    def replace(match: re.Match[str]) -> str:
        before, user = match.group(1), match.group(2)
        return f"{before}[@{user}]({user_url.format(user=user)})"

    return _USER_PATTERN.sub(replace, text)


def truncate(sentence: str, length: int) -> str:
    """Shorten ``sentence`` to ``length`` characters, ending with ``...``."""
    if len(sentence) <= length:
        return sentence
    return sentence[: length - 3].strip() + "..."
