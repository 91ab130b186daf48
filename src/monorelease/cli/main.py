"""CLI interface for monorelease, click-based commands."""

from __future__ import annotations

import click
from rich.console import Console

from monorelease import __version__
from monorelease.logging import configure_logging

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.version_option(__version__, prog_name="monorelease")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs.")
def cli(verbose: bool) -> None:
    """Changelog and release tooling for multi-package JavaScript repositories."""
    configure_logging(verbose=verbose, console=err_console)


@cli.command()
@click.argument("path", required=False)
@click.option("--execute", is_flag=True, help="Write the changelog and bump package.json.")
@click.option("--version", "version_override", help="Release this version instead.")
@click.option("--from-tag", "tag_name", help="Tag of the previous release.")
@click.option("--strict", is_flag=True, help="Fail on commits with an unknown type.")
def changelog(
    path: str | None,
    execute: bool,
    version_override: str | None,
    tag_name: str | None,
    strict: bool,
) -> None:
    """Generate the changelog of a single package."""
    from monorelease.cli.commands.update import run_update

    run_update(path, execute, version_override, tag_name, console, err_console, strict=strict)


@cli.command("changelog-subpackages")
@click.argument("path", required=False)
@click.option("--execute", is_flag=True, help="Write changelogs and bump package.json files.")
@click.option("--packages", "packages_dir", help="Directory holding the packages.")
@click.option("--skip", multiple=True, help="Glob of package names to skip (repeatable).")
@click.option("--scope", help="Glob package names must match.")
def changelog_subpackages(
    path: str | None,
    execute: bool,
    packages_dir: str | None,
    skip: tuple[str, ...],
    scope: str | None,
) -> None:
    """Generate changelogs for every package of a monorepo."""
    from monorelease.cli.commands.subpackages import run_subpackages

    run_subpackages(path, execute, packages_dir, skip, scope, console, err_console)


@cli.command("release-type")
@click.argument("path", required=False)
@click.option("--from-tag", "tag_name", help="Tag of the previous release.")
def release_type(path: str | None, tag_name: str | None) -> None:
    """Print the release type of the changes since the last release."""
    from monorelease.cli.commands.release_type import run_release_type

    run_release_type(path, tag_name, console, err_console)


def main() -> None:
    cli()
