"""opsprune apply command - add disableOperations to schema models."""

from pathlib import Path

import click

from opsprune.cli.utils import make_console, raise_click
from opsprune.core.errors import OpsPruneError
from opsprune.patch import ModelAction, apply_disable_operations
from opsprune.patch.ops import ON_EXISTING_CHOICES


def format_action(action: ModelAction) -> str | None:
    """Diagnostic line for one model, or None when there is nothing to report."""
    if action.action == "skipped":
        return f"[skip] already has disableOperations: {action.model}"
    if action.action == "overwritten":
        return f"[overwrite] replaced disableOperations for {action.model}"
    if action.action == "merged":
        return f"[merge] merged disableOperations for {action.model}: [{', '.join(action.disable)}]"
    if action.action == "unparseable":
        return f"[merge] could not read existing disableOperations for {action.model}, left as is"
    return None


@click.command()
@click.option(
    "--resource",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Schema resource file containing the schema({...}) call",
)
@click.option(
    "--usage",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Usage-map JSON written by 'opsprune scan'",
)
@click.option("--dry-run", is_flag=True, help="Report only; write nothing (no backup either)")
@click.option("--no-backup", is_flag=True, help="Do not copy the resource to <resource>.bak first")
@click.option(
    "--on-existing",
    type=click.Choice(ON_EXISTING_CHOICES),
    default=None,
    help="Policy for models that already call disableOperations (default: skip)",
)
@click.pass_context
def apply_command(
    ctx: click.Context,
    resource: Path,
    usage: Path,
    dry_run: bool,
    no_backup: bool,
    on_existing: str | None,
) -> None:
    """Disable unused operation categories on every schema model."""
    apply_config = ctx.obj["config"].apply
    console = make_console()

    try:
        result = apply_disable_operations(
            resource,
            usage,
            dry_run=dry_run,
            backup=apply_config.backup and not no_backup,
            on_existing=on_existing or apply_config.on_existing,
            backup_suffix=apply_config.backup_suffix,
        )
    except OpsPruneError as e:
        raise_click(e)

    for action in result.actions:
        line = format_action(action)
        if line is not None:
            console.print(line)

    if result.dry_run:
        console.print("dry-run: no save")
    else:
        console.print(f"saved: {result.resource_path}")
