"""Implementation of the 'release-type' command."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.markup import escape

from monorelease.config import load_config
from monorelease.core.changelog import get_last_version
from monorelease.core.release_type import ResolveOptions, resolve_release_type
from monorelease.core.transform import transform_commit
from monorelease.exceptions import MonoreleaseError
from monorelease.project.package_json import get_package_metadata

if TYPE_CHECKING:
    from rich.console import Console


def run_release_type(
    path: str | None,
    tag_name: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Print the release type of the changes since the last release."""
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        package = get_package_metadata(project_path)

        if tag_name is None:
            last_version = get_last_version(project_path, config.changelog.file)
            tag_name = config.tag_for(last_version) if last_version else None

        decision = resolve_release_type(
            transform_commit,
            ResolveOptions(
                tag_name=tag_name,
                cwd=project_path,
                package=package,
                note_keywords=tuple(config.commits.note_keywords),
            ),
        )
    except MonoreleaseError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(f"[bold]{decision.release_type}[/]")
    if decision.version is not None:
        console.print(f"[dim]Next version:[/] [green]{decision.version}[/]")
    for commit in decision.commits:
        console.print(f"  [yellow]{commit.hash}[/] {escape(commit.header)}", highlight=False)
