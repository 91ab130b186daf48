"""Configuration models.

Configuration lives under the ``"monorelease"`` key of the root
package.json::

    {
      "name": "my-monorepo",
      "monorelease": {
        "tag_prefix": "v",
        "packages": {"directory": "packages", "skip": ["@my-scope/*-internal"]}
      }
    }
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from monorelease.core.changelog import CHANGELOG_FILE
from monorelease.core.commits import DEFAULT_NOTE_KEYWORDS
from monorelease.core.links import DEFAULT_USER_URL


class CommitsConfig(BaseModel):
    """How commit messages are parsed."""

    model_config = ConfigDict(extra="forbid")

    note_keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_NOTE_KEYWORDS))

    @field_validator("note_keywords")
    @classmethod
    def _not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("note_keywords must not be empty")
        return value


class ChangelogConfig(BaseModel):
    """Changelog file and link settings."""

    model_config = ConfigDict(extra="forbid")

    file: str = CHANGELOG_FILE
    user_url: str = DEFAULT_USER_URL

    @field_validator("user_url")
    @classmethod
    def _has_user_placeholder(cls, value: str) -> str:
        if "{user}" not in value:
            raise ValueError("user_url must contain a {user} placeholder")
        return value


class PackagesConfig(BaseModel):
    """Where sub-packages live and which of them to release."""

    model_config = ConfigDict(extra="forbid")

    directory: str = "packages"
    skip: list[str] = Field(default_factory=list)
    scope: str | None = None
    tag_format: str = "{name}@{version}"

    @field_validator("tag_format")
    @classmethod
    def _has_version_placeholder(cls, value: str) -> str:
        if "{version}" not in value:
            raise ValueError("tag_format must contain a {version} placeholder")
        return value

    def tag_for(self, name: str, version: str) -> str:
        """Tag name of a released sub-package version."""
        return self.tag_format.format(name=name, version=version)


class MonoreleaseConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    tag_prefix: str = "v"
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    packages: PackagesConfig = Field(default_factory=PackagesConfig)

    def tag_for(self, version: str) -> str:
        """Tag name of a released version."""
        return f"{self.tag_prefix}{version}"
