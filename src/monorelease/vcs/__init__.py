"""Version control access."""

from __future__ import annotations

from monorelease.vcs.git import GitRepository

__all__ = ["GitRepository"]
