"""Commands for extracting DDL and schema trees from Phoenix."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer
from sqlalchemy.exc import SQLAlchemyError

from phxschema.cli.common.context import SchemaAppContext, build_schema_context
from phxschema.cli.common.exits import exit_from_exc
from phxschema.cli.common.logs import setup_logging
from phxschema.cli.common.options import (
    HBaseRestUrlOpt,
    SchemaOpt,
    TableOpt,
    TimeoutOpt,
    TreeFileOpt,
    UrlOpt,
    VerboseOpt,
)
from phxschema.cli.common.output import out
from phxschema.core.connection import ConnectionSettings
from phxschema.core.ddl import extract_ddl_by_name
from phxschema.core.errors import SchemaExtractionError
from phxschema.core.models import PhoenixObject, qualified_name, split_qualified_name
from phxschema.core.tree import build_schema_tree, render_schema_tree, write_schema_tree

logger = logging.getLogger(__name__)

extract_app = typer.Typer(
    help="Extract DDL and schema trees from Phoenix.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@extract_app.callback()
def _init(
    ctx: typer.Context,
    url: str | None = UrlOpt,
    hbase_rest_url: str | None = HBaseRestUrlOpt,
    timeout: float = TimeoutOpt,
    verbose: bool = VerboseOpt,
):
    """Initialize Phoenix/HBase context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    setup_logging(verbose)
    settings = ConnectionSettings(
        url=url or "", hbase_rest_url=hbase_rest_url or "", timeout=timeout
    )
    ctx.obj = build_schema_context(settings)


def _fail(exc: Exception) -> NoReturn:
    """Convert a lookup or reconstruction failure into a CLI exit."""
    if isinstance(exc, SQLAlchemyError):
        exit_from_exc(exc, message=f"Phoenix catalog query failed: {exc}", code=1)
    if isinstance(exc, SchemaExtractionError):
        exit_from_exc(exc, message=str(exc), code=1)
    exit_from_exc(exc, message=str(exc), code=2)


def _resolve_or_exit(appctx: SchemaAppContext, full_name: str) -> PhoenixObject:
    """Resolve a catalog object and convert failures into CLI errors."""
    try:
        split_qualified_name(full_name)
        with out.status(f"Reading catalog for {full_name}..."):
            return appctx.catalog.resolve_object(full_name)
    except (ValueError, SchemaExtractionError, SQLAlchemyError) as exc:
        _fail(exc)


@extract_app.command("ddl")
def ddl(
    ctx: typer.Context,
    table: str = TableOpt,
    schema: str | None = SchemaOpt,
):
    """Print the CREATE statement of a table, index or view."""
    appctx: SchemaAppContext = ctx.obj
    full_name = qualified_name(schema, table)
    logger.info("Schema extraction initiated for %s", full_name)

    try:
        split_qualified_name(full_name)
        with out.status(f"Reconstructing DDL for {full_name}..."):
            statement = extract_ddl_by_name(
                appctx.catalog, appctx.storage, schema, table, defaults=appctx.defaults
            )
    except (ValueError, SchemaExtractionError, SQLAlchemyError) as exc:
        _fail(exc)

    out.result(statement)


@extract_app.command("tree")
def tree(
    ctx: typer.Context,
    table: str = TableOpt,
    schema: str | None = SchemaOpt,
    tree_file: str = TreeFileOpt,
):
    """Write the schema hierarchy of a table, index or view as JSON."""
    appctx: SchemaAppContext = ctx.obj
    full_name = qualified_name(schema, table)
    logger.info("Schema tree extraction initiated for %s", full_name)

    obj = _resolve_or_exit(appctx, full_name)
    try:
        node = build_schema_tree(appctx.catalog, obj)
    except (SchemaExtractionError, SQLAlchemyError) as exc:
        _fail(exc)

    if tree_file == "-":
        out.result(render_schema_tree(node))
        return

    path = Path(tree_file)
    try:
        write_schema_tree(node, path)
    except OSError as exc:
        exit_from_exc(
            exc, message=f"Error writing schema tree to file {path}: {exc}", code=1
        )

    out.kv({"Object": full_name, "Type": obj.kind.name, "Tree file": path})
    out.success("Schema tree written.")
