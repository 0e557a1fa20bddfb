"""Logging setup for the CLI."""

import logging

from rich.logging import RichHandler

from phxschema.cli.common.output import console


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich on stderr (DEBUG when verbose)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
