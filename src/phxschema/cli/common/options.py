"""Common CLI options for the CLI."""

import typer

from phxschema.core.connection import DEFAULT_TIMEOUT_SECONDS

UrlOpt = typer.Option(
    None,
    "--url",
    envvar="PHXSCHEMA_URL",
    help="SQLAlchemy URL of the Phoenix Query Server (e.g. phoenix://host:8765/)",
)

HBaseRestUrlOpt = typer.Option(
    None,
    "--hbase-rest-url",
    envvar="PHXSCHEMA_HBASE_REST_URL",
    help="Base URL of the HBase REST server (e.g. http://host:8080)",
)

TimeoutOpt = typer.Option(
    DEFAULT_TIMEOUT_SECONDS,
    "--timeout",
    envvar="PHXSCHEMA_TIMEOUT",
    help="Timeout in seconds for HBase REST requests",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logging",
)

TableOpt = typer.Option(
    ...,
    "--table",
    "-t",
    help="Table, index or view name ex. table1",
)

SchemaOpt = typer.Option(
    None,
    "--schema",
    "-s",
    help="Schema name ex. schema",
)

TreeFileOpt = typer.Option(
    ...,
    "--tree-file",
    "-f",
    help="File to write the schema tree to (JSON); '-' prints it",
)
