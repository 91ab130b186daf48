"""Implementation of the 'changelog' command.

The changelog command resolves the release type of one package, writes
its changelog section and bumps the version in package.json.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel

from monorelease.config import load_config
from monorelease.core.changelog import (
    ChangelogOptions,
    generate_changelog_from_commits,
    get_last_version,
)
from monorelease.core.release_type import (
    ReleaseTypeDecision,
    ResolveOptions,
    resolve_release_type,
)
from monorelease.core.transform import transform_commit
from monorelease.core.version import INITIAL_VERSION, ReleaseType, Version
from monorelease.exceptions import MonoreleaseError
from monorelease.project.package_json import (
    PackageMetadata,
    get_package_metadata,
    update_package_version,
)

if TYPE_CHECKING:
    from rich.console import Console


def plan_next_version(
    decision: ReleaseTypeDecision,
    package: PackageMetadata,
    version_override: str | None = None,
) -> Version:
    """Pick the version to release.

    An explicit override wins. Otherwise the version in package.json (the
    last released one) is bumped; the version derived from the previous
    tag is used only when package.json has none. Internal releases are
    still published, so they get a patch bump.
    """
    if version_override:
        return Version.parse(version_override)

    release_type = decision.release_type
    if not release_type.bumps_version:
        release_type = ReleaseType.PATCH

    if package.version:
        return Version.parse(package.version).bump(release_type)
    if decision.release_type.bumps_version and decision.version is not None:
        return decision.version
    return (decision.version or INITIAL_VERSION).bump(release_type)


def run_update(
    path: str | None,
    execute: bool,
    version_override: str | None,
    tag_name: str | None,
    console: Console,
    err_console: Console,
    *,
    strict: bool = False,
) -> None:
    """Run the changelog command.

    Args:
        path: Optional path to the package directory
        execute: Whether to actually write the changelog and package.json
        version_override: Manual version override (e.g., "2.0.0")
        tag_name: Previous release tag, defaults to the last changelog version
        console: Console for standard output
        err_console: Console for error output
        strict: Fail on commits with an unknown type
    """
    project_path = Path(path) if path else Path.cwd()

    # Load configuration
    try:
        config = load_config(project_path)
        package = get_package_metadata(project_path)
    except MonoreleaseError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    # The previous release is the newest version in the changelog
    if tag_name is None:
        last_version = get_last_version(project_path, config.changelog.file)
        tag_name = config.tag_for(last_version) if last_version else None

    try:
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

    if decision.release_type == ReleaseType.SKIP:
        console.print("[yellow]No commits found since last release. Nothing to do.[/]")
        return

    try:
        next_version = plan_next_version(decision, package, version_override)
    except MonoreleaseError as e:
        err_console.print(f"[red]Invalid version format:[/] {e}")
        raise SystemExit(1) from e

    is_first_release = tag_name is None
    mode_str = "[green]EXECUTING[/]" if execute else "[yellow]DRY-RUN[/]"
    if is_first_release:
        console.print(
            f"\n{mode_str} - First release of [cyan]{package.name}[/] "
            f"as [green]{next_version}[/] ({decision.release_type})\n"
        )
    else:
        console.print(
            f"\n{mode_str} - [cyan]{package.name}[/] {decision.release_type} release "
            f"from [cyan]{tag_name}[/] to [green]{next_version}[/]\n"
        )

    if not execute:
        console.print(
            Panel(
                "[bold]Would make the following changes:[/]\n\n"
                f"  • Update version in [cyan]package.json[/]\n"
                f"  • Generate changelog in [cyan]{config.changelog.file}[/]",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print("\n[dim]Run with [cyan]--execute[/] to apply these changes.[/]")
        return

    new_tag_name = config.tag_for(str(next_version))

    try:
        generate_changelog_from_commits(
            ChangelogOptions(
                version=str(next_version),
                cwd=project_path,
                tag_name=tag_name,
                new_tag_name=new_tag_name,
                is_internal_release=decision.release_type == ReleaseType.INTERNAL,
                user_url=config.changelog.user_url,
                note_keywords=tuple(config.commits.note_keywords),
                changelog_file=config.changelog.file,
                strict=strict,
            )
        )
        console.print(f"  [green]✓[/] Updated {config.changelog.file}")
    except MonoreleaseError as e:
        err_console.print(f"[red]Error generating changelog:[/] {e}")
        raise SystemExit(1) from e

    try:
        update_package_version(project_path, str(next_version))
        console.print("  [green]✓[/] Updated version in package.json")
    except MonoreleaseError as e:
        err_console.print(f"[red]Error updating package.json:[/] {e}")
        raise SystemExit(1) from e

    console.print(
        Panel(
            f"[green]Successfully updated to version {next_version}![/]\n\n"
            "Next steps:\n"
            "  1. Review the changes\n"
            f"  2. Commit: [cyan]git add . && git commit -m "
            f"'Release: {new_tag_name}.'[/]\n"
            f"  3. Tag: [cyan]git tag {new_tag_name}[/]",
            title="[green]Update Complete[/]",
            border_style="green",
        )
    )
