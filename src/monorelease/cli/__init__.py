"""Command line interface for monorelease."""

from __future__ import annotations

from monorelease.cli.main import cli, main

__all__ = ["cli", "main"]
