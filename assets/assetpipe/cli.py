"""CLI entrypoint for assetpipe."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import DEFAULT_MANIFEST


def _auto_detect_manifest(start: Path) -> Path | None:
    """Find assets.toml by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / DEFAULT_MANIFEST
        if candidate.is_file():
            return candidate
    return None


@click.group()
@click.version_option(__version__, prog_name="assetpipe")
@click.option(
    "--manifest",
    "-m",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f"Path to the asset manifest (defaults to the nearest {DEFAULT_MANIFEST})",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every build step")
@click.pass_context
def cli(ctx: click.Context, manifest: Path | None, verbose: bool) -> None:
    """assetpipe - Compile, join and compress CSS/JS into content-addressed files.

    Groups of sources are declared in assets.toml. Each group is rebuilt only
    when one of its sources changed.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    if manifest is None:
        manifest = _auto_detect_manifest(Path.cwd())
        if manifest is None:
            raise click.ClickException(f"{DEFAULT_MANIFEST} not found. Pass --manifest /path/to/{DEFAULT_MANIFEST}.")

    if not manifest.is_file():
        raise click.BadParameter(f"File '{manifest}' does not exist.", param_hint="--manifest / -m")

    ctx.obj["manifest"] = manifest.resolve()


@cli.command()
@click.argument("groups", nargs=-1)
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def build(ctx: click.Context, groups: tuple[str, ...], output_json: bool) -> None:
    """Build asset groups (all of them, or the ones named).

    Unchanged groups are left alone; changed ones are recompiled, written
    under a new content-hashed name, and their previous file is removed.

    Examples:

        assetpipe build

        assetpipe build app vendor --json
    """
    from .commands.build_cmd import run_build

    exit_code = run_build(ctx.obj["manifest"], groups, output_json=output_json)
    sys.exit(exit_code)


@cli.command()
@click.argument("groups", nargs=-1)
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def status(ctx: click.Context, groups: tuple[str, ...], output_json: bool) -> None:
    """Check whether built assets match their sources, without writing.

    Exits with 1 if any group is stale, new, or missing its file, so it can
    gate CI.
    """
    from .commands.build_cmd import run_status

    exit_code = run_status(ctx.obj["manifest"], groups, output_json=output_json)
    sys.exit(exit_code)


@cli.command()
@click.argument("groups", nargs=-1)
@click.pass_context
def clean(ctx: click.Context, groups: tuple[str, ...]) -> None:
    """Remove built assets and their asset-info files."""
    from .commands.build_cmd import run_clean

    exit_code = run_clean(ctx.obj["manifest"], groups)
    sys.exit(exit_code)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
