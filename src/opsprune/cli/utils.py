"""CLI utilities."""

from typing import NoReturn

import click
from rich.console import Console

from opsprune.core.errors import OpsPruneError


def make_console() -> Console:
    """Console for user-facing lines: no markup (``[skip]`` is literal), no wrapping."""
    return Console(markup=False, highlight=False, soft_wrap=True)


def raise_click(error: OpsPruneError) -> NoReturn:
    """Surface a domain error as a failed invocation (exit code 1)."""
    raise click.ClickException(str(error)) from error
