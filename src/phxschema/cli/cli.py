"""CLI application for Phoenix schema extraction tooling."""

import typer

from phxschema.cli.commands.extract import extract_app

app = typer.Typer(
    help="phxschema - reconstruct Phoenix DDL from live metadata",
    no_args_is_help=True,
)

app.add_typer(
    extract_app,
    name="extract",
    help="Extract CREATE statements / schema trees for tables, indexes and views.",
)


if __name__ == "__main__":
    app()
