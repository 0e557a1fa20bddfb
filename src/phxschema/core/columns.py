"""Column rendering and column-name normalization.

Renders single column declarations, the parenthesized column clause shared by
CREATE TABLE and CREATE VIEW, and turns family-qualified index column names
into the `family.column` / bare form used in DDL.
"""

from __future__ import annotations

from typing import Sequence

from phxschema.core.models import Column, SortOrder

FAMILY_SEPARATOR = ":"
VIEW_INDEX_ID_COLUMN_NAME = "_INDEX_ID"
ROW_TIMESTAMP = "ROW_TIMESTAMP"


def format_column(column: Column) -> str:
    """Render `name type[(length[,scale])][ NOT NULL]`."""
    buf = f"{column.name} {column.type_name}"
    if column.max_length is not None:
        size = str(column.max_length)
        if column.scale is not None:
            size = f"{size},{column.scale}"
        buf = f"{buf}({size})"
    if not column.nullable:
        buf = f"{buf} NOT NULL"
    return buf


def pk_attributes(column: Column) -> str:
    """Render the sort-order and ROW_TIMESTAMP attributes of a key column."""
    buf = ""
    if column.sort_order != SortOrder.default():
        buf += f" {column.sort_order.value}"
    if column.row_timestamp:
        buf += f" {ROW_TIMESTAMP}"
    return buf


def pk_constraint(pk_columns: Sequence[Column], pk_name: str | None) -> str:
    """Render the trailing named constraint for a multi-column primary key."""
    cols = ", ".join(f"{c.name}{pk_attributes(c)}" for c in pk_columns)
    return f" CONSTRAINT {pk_name} PRIMARY KEY ({cols})"


def column_clause(
    columns: Sequence[Column],
    pk_columns: Sequence[Column],
    pk_name: str | None = None,
) -> str:
    """
    Render the parenthesized column clause of a CREATE TABLE/VIEW statement.

    A single key column gets `PRIMARY KEY` inline; several key columns are
    listed in a trailing `CONSTRAINT <pk_name> PRIMARY KEY (...)` clause in
    the order given.
    """
    single_pk = pk_columns[0] if len(pk_columns) == 1 else None
    defs: list[str] = []
    for col in columns:
        definition = format_column(col)
        if single_pk is not None and col == single_pk:
            definition += " PRIMARY KEY" + pk_attributes(col)
        defs.append(definition)

    clause = ", ".join(defs)
    if len(pk_columns) > 1:
        clause += pk_constraint(pk_columns, pk_name)
    return f"({clause})"


def normalize_column_name(name: str, default_family: str) -> str:
    """
    Turn a stored `family:column` name into its DDL form.

    Columns of the default family (or with an empty family prefix) come back
    bare; other families are kept as `family.column`. Names without a
    separator are already normalized and returned unchanged.
    """
    family, sep, column = name.partition(FAMILY_SEPARATOR)
    if not sep:
        return name
    if family == "" or _ascii_casefold(family) == _ascii_casefold(default_family):
        return column
    return name.replace(FAMILY_SEPARATOR, ".")


def _ascii_casefold(text: str) -> str:
    return text.translate(_ASCII_UPPER_TO_LOWER)


_ASCII_UPPER_TO_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)
