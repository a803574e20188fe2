"""opsprune scan command - write the usage map of a TypeScript project."""

from pathlib import Path

import click

from opsprune.cli.utils import make_console, raise_click
from opsprune.core.errors import OpsPruneError
from opsprune.scan import scan_usage
from opsprune.usage import dump_usage_map


@click.command()
@click.option(
    "--project",
    "tsconfig",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="tsconfig.json of the project to scan",
)
@click.option(
    "--out",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Usage-map JSON file to write",
)
@click.option(
    "--include",
    "include",
    multiple=True,
    help="Glob of files to scan for calls (repeatable; default from config)",
)
@click.pass_context
def scan_command(ctx: click.Context, tsconfig: Path, out: Path, include: tuple[str, ...]) -> None:
    """Scan a project for client.models.<Model>.<operation>() calls.

    Writes a JSON object mapping each model to its sorted used operations.
    """
    config = ctx.obj["config"]
    console = make_console()

    try:
        usage = scan_usage(tsconfig, list(include) or None, config=config.scan)
        dump_usage_map(usage, out)
    except OpsPruneError as e:
        raise_click(e)

    console.print(f"written: {out}")
