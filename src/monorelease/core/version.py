"""Semantic version parsing and release-type bumps."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from monorelease.exceptions import VersionError

_SEMVER_PATTERN = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z.-]+))?$"
)

_TAG_VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?$")


class ReleaseType(str, Enum):
    """Semantic-versioning bump category of the next release."""

    SKIP = "skip"
    INTERNAL = "internal"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    def __str__(self) -> str:
        return self.value

    @property
    def bumps_version(self) -> bool:
        return self in (ReleaseType.PATCH, ReleaseType.MINOR, ReleaseType.MAJOR)


@dataclass(frozen=True, order=True)
class Version:
    """A semantic version (``major.minor.patch[-prerelease]``)."""

    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a version string, accepting an optional ``v`` prefix.

        Raises:
            VersionError: If the string is not a semantic version
        """
        match = _SEMVER_PATTERN.match(value.strip())
        if not match:
            raise VersionError(f"Invalid semantic version: {value!r}")

        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=match.group("prerelease"),
        )

    @classmethod
    def from_tag(cls, tag_name: str) -> Version:
        """Extract the version from a tag such as ``v1.2.0`` or ``@scope/pkg@1.2.0``.

        Raises:
            VersionError: If the tag does not end with a semantic version
        """
        match = _TAG_VERSION_PATTERN.search(tag_name)
        if not match:
            raise VersionError(f"Tag {tag_name!r} does not end with a semantic version")
        return cls.parse(match.group(0))

    def bump(self, release_type: ReleaseType) -> Version:
        """Return the version following this one for the given release type.

        ``internal`` and ``skip`` releases do not change the version.
        """
        if release_type == ReleaseType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if release_type == ReleaseType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if release_type == ReleaseType.PATCH:
            if self.prerelease:
                # 1.2.0-alpha.1 -> 1.2.0
                return Version(self.major, self.minor, self.patch)
            return Version(self.major, self.minor, self.patch + 1)
        return self

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{base}-{self.prerelease}"
        return base


INITIAL_VERSION = Version(0, 0, 0)


def parse_version(value: str) -> Version:
    return Version.parse(value)


def next_version(current: Version | None, release_type: ReleaseType) -> Version | None:
    """Compute the next version from the latest released one.

    Args:
        current: Latest released version, ``None`` when nothing was released yet
        release_type: Resolved release type

    Returns:
        The bumped version, or ``current`` for ``internal``/``skip``
    """
    if not release_type.bumps_version:
        return current
    return (current or INITIAL_VERSION).bump(release_type)
