"""Entry point for ``python -m opsprune``."""

from opsprune.cli.main import cli

if __name__ == "__main__":
    cli()
