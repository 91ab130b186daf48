"""Implementation of the 'changelog-subpackages' command.

Every package under the packages directory gets its own release type,
computed from the commits that touched its directory since its last
release tag.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.table import Table

from monorelease.cli.commands.update import plan_next_version
from monorelease.config import load_config
from monorelease.config.loader import find_root_package_json
from monorelease.core.changelog import (
    ChangelogOptions,
    generate_changelog_from_commits,
    get_last_version,
)
from monorelease.core.release_type import ResolveOptions, resolve_release_type
from monorelease.core.transform import transform_commit
from monorelease.core.version import ReleaseType
from monorelease.exceptions import MonoreleaseError
from monorelease.project.package_json import get_package_metadata, update_package_version
from monorelease.project.subpackages import get_subpackages_paths

if TYPE_CHECKING:
    from rich.console import Console


def run_subpackages(
    path: str | None,
    execute: bool,
    packages_dir: str | None,
    skip: tuple[str, ...],
    scope: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the changelog-subpackages command.

    Args:
        path: Optional path to the repository root
        execute: Whether to actually write changelogs and package.json files
        packages_dir: Directory holding the packages, overrides config
        skip: Package name globs to skip, added to the configured ones
        scope: Package name glob to restrict to, overrides config
        console: Console for standard output
        err_console: Console for error output
    """
    root = Path(path) if path else Path.cwd()

    try:
        config = load_config(root)
        root = find_root_package_json(root).parent
    except MonoreleaseError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    packages_config = config.packages
    paths = get_subpackages_paths(
        root,
        packages=packages_dir or packages_config.directory,
        skip_packages=[*packages_config.skip, *skip],
        scope=scope or packages_config.scope,
    )

    if not paths.matched:
        console.print("[yellow]No packages found. Nothing to do.[/]")
        return

    note_keywords = tuple(config.commits.note_keywords)
    table = Table(title="Sub-package releases")
    table.add_column("Package", style="cyan")
    table.add_column("Previous tag")
    table.add_column("Release type")
    table.add_column("Next version", style="green")

    planned = []
    for package_path in paths.matched:
        try:
            package = get_package_metadata(package_path)
            last_version = get_last_version(package_path, config.changelog.file)
            tag_name = (
                packages_config.tag_for(package.name, last_version) if last_version else None
            )

            decision = resolve_release_type(
                transform_commit,
                ResolveOptions(
                    tag_name=tag_name,
                    cwd=package_path,
                    path=".",
                    package=package,
                    note_keywords=note_keywords,
                ),
            )
            next_version = (
                plan_next_version(decision, package)
                if decision.release_type != ReleaseType.SKIP
                else None
            )
        except MonoreleaseError as e:
            err_console.print(f"[red]Error in {package_path.name}:[/] {e}")
            raise SystemExit(1) from e

        table.add_row(
            package.name,
            tag_name or "-",
            str(decision.release_type),
            str(next_version) if next_version else "-",
        )
        if next_version is not None:
            planned.append((package_path, package, tag_name, decision, next_version))

    console.print(table)

    for skipped in paths.skipped:
        console.print(f"[dim]Skipped {skipped.name}[/]")

    if not planned:
        console.print("[yellow]No package has changes since its last release.[/]")
        return

    if not execute:
        console.print("\n[dim]Run with [cyan]--execute[/] to apply these changes.[/]")
        return

    for package_path, package, tag_name, decision, next_version in planned:
        try:
            generate_changelog_from_commits(
                ChangelogOptions(
                    version=str(next_version),
                    cwd=package_path,
                    tag_name=tag_name,
                    new_tag_name=packages_config.tag_for(package.name, str(next_version)),
                    path=".",
                    is_internal_release=decision.release_type == ReleaseType.INTERNAL,
                    user_url=config.changelog.user_url,
                    note_keywords=note_keywords,
                    changelog_file=config.changelog.file,
                )
            )
            update_package_version(package_path, str(next_version))
        except MonoreleaseError as e:
            err_console.print(f"[red]Error releasing {package.name}:[/] {e}")
            raise SystemExit(1) from e

        console.print(f"  [green]✓[/] {package.name} {next_version}")
