"""Command line interface."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .errors import PackagingError
from .hcl import load_project
from .package import PACKAGE_TARGETS, common_env_vars, prepare
from .targets import resolve_targets

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _parse_defines(defines: tuple[str, ...]) -> dict[str, str]:
    values: dict[str, str] = {}
    for item in defines:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--define")
        values[key.strip()] = value
    return values


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="stagepack")
def main(verbose: bool) -> None:
    """Package staged build output into layouts, archives and packages."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


@main.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-p", "--package", "package_name", help="Package block to build")
@click.option("-n", "--dry-run", is_flag=True, help="Log targets without running them")
@click.option("-D", "--define", "defines", multiple=True, help="Template variable as KEY=VALUE")
def run(config_file: Path, package_name: str | None, dry_run: bool, defines: tuple[str, ...]) -> None:
    """Run the packaging pipeline for a package."""
    try:
        project = load_project(config_file, package_name, context=_parse_defines(defines))
        result = project.build(dry_run=dry_run)
    except (PackagingError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(1)

    if not result:
        logger.error("Packaging failed in target '%s': %s", result.target, result.reason)
        sys.exit(1)
    logger.info("Packaging of '%s' complete", project.name)


@main.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-p", "--package", "package_name", help="Package block to read")
@click.option("-D", "--define", "defines", multiple=True, help="Template variable as KEY=VALUE")
def env(config_file: Path, package_name: str | None, defines: tuple[str, ...]) -> None:
    """Print the environment passed to collaborator tools."""
    try:
        project = load_project(config_file, package_name, context=_parse_defines(defines))
        ctx = project.create_context()
        result = prepare(ctx)
        if not result:
            raise PackagingError(result.reason)
        table = common_env_vars(ctx)
    except (PackagingError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(1)

    for key, value in table.items():
        click.echo(f"{key}={value}")


@main.command()
def targets() -> None:
    """List the pipeline targets in run order."""
    for tgt in resolve_targets(PACKAGE_TARGETS):
        click.echo(tgt.name)
        if tgt.description:
            click.echo(f"    {tgt.description}")
        if tgt.consumes:
            click.echo(f"    consumes: {', '.join(sorted(tgt.consumes))}")
        if tgt.produces:
            click.echo(f"    produces: {', '.join(sorted(tgt.produces))}")
