"""opsprune CLI - scan client usage, then disable unused operations."""

from pathlib import Path

import click

from opsprune.cli.apply import apply_command
from opsprune.cli.scan import scan_command
from opsprune.cli.utils import raise_click
from opsprune.config import load_config
from opsprune.core.errors import OpsPruneError
from opsprune.core.logging import configure_logging, set_run_id


@click.group()
@click.version_option(version="0.1.0", prog_name="opsprune")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .opsprune.yaml (default: current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_dir: Path | None) -> None:
    """opsprune - prune unused data-client operations from a schema."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_dir)
    except OpsPruneError as e:
        raise_click(e)

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    set_run_id()

    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(scan_command, name="scan")
cli.add_command(apply_command, name="apply")


if __name__ == "__main__":
    cli()
