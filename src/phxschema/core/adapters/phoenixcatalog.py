from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping

from sqlalchemy import text
from sqlalchemy.engine import Engine

from phxschema.core.errors import NotFound, UnsupportedObjectKind
from phxschema.core.models import (
    Column,
    IndexType,
    ObjectKind,
    PhoenixObject,
    SortOrder,
    qualified_name,
    split_qualified_name,
)
from phxschema.core.properties import TABLE_PROPERTY_DEFAULTS

logger = logging.getLogger(__name__)

ARRAY_TYPE_BASE = 3000

# java.sql.Types codes (plus Phoenix's own UNSIGNED_* codes) -> SQL type names.
SQL_TYPE_NAMES: Mapping[int, str] = {
    1: "CHAR",
    3: "DECIMAL",
    4: "INTEGER",
    5: "SMALLINT",
    6: "FLOAT",
    8: "DOUBLE",
    9: "UNSIGNED_INT",
    10: "UNSIGNED_LONG",
    11: "UNSIGNED_TINYINT",
    12: "VARCHAR",
    13: "UNSIGNED_SMALLINT",
    14: "UNSIGNED_FLOAT",
    15: "UNSIGNED_DOUBLE",
    16: "BOOLEAN",
    18: "UNSIGNED_TIME",
    19: "UNSIGNED_DATE",
    20: "UNSIGNED_TIMESTAMP",
    91: "DATE",
    92: "TIME",
    93: "TIMESTAMP",
    -2: "BINARY",
    -3: "VARBINARY",
    -5: "BIGINT",
    -6: "TINYINT",
}

_SORT_ORDERS = {1: SortOrder.DESC, 2: SortOrder.ASC}
_INDEX_TYPES = {1: IndexType.GLOBAL, 2: IndexType.LOCAL}
_STORAGE_SCHEMES = {0: "ONE_CELL_PER_COLUMN", 1: "SINGLE_CELL_ARRAY_WITH_OFFSETS"}

LINK_PHYSICAL_TABLE = 2
LINK_PARENT_TABLE = 3

# SYSTEM.CATALOG header column -> table property name.
_PROPERTY_COLUMNS: Mapping[str, str] = {
    "IMMUTABLE_ROWS": "IMMUTABLE_ROWS",
    "DISABLE_WAL": "DISABLE_WAL",
    "MULTI_TENANT": "MULTI_TENANT",
    "STORE_NULLS": "STORE_NULLS",
    "APPEND_ONLY_SCHEMA": "APPEND_ONLY_SCHEMA",
    "UPDATE_CACHE_FREQUENCY": "UPDATE_CACHE_FREQUENCY",
    "USE_STATS_FOR_PARALLELIZATION": "USE_STATS_FOR_PARALLELIZATION",
    "IMMUTABLE_STORAGE_SCHEME": "IMMUTABLE_STORAGE_SCHEME",
    "ENCODING_SCHEME": "COLUMN_ENCODED_BYTES",
    "TRANSACTIONAL": "TRANSACTIONAL",
    "SALT_BUCKETS": "SALT_BUCKETS",
    "GUIDE_POSTS_WIDTH": "GUIDE_POSTS_WIDTH",
}

_CATALOG_QUERY = """
SELECT TABLE_SCHEM, TABLE_NAME, COLUMN_NAME, COLUMN_FAMILY, TABLE_TYPE,
       DATA_TYPE, COLUMN_SIZE, DECIMAL_DIGITS, NULLABLE, SORT_ORDER, KEY_SEQ,
       ORDINAL_POSITION, IS_ROW_TIMESTAMP, PK_NAME, INDEX_TYPE, VIEW_STATEMENT,
       LINK_TYPE, DATA_TABLE_NAME, DEFAULT_COLUMN_FAMILY, {properties}
FROM SYSTEM.CATALOG
WHERE TENANT_ID IS NULL
  AND {schema_predicate}
  AND TABLE_NAME = :name
"""


def sql_type_name(code: int) -> str:
    """Map a catalog DATA_TYPE code to its SQL type name."""
    if code >= ARRAY_TYPE_BASE:
        return f"{sql_type_name(code - ARRAY_TYPE_BASE)} ARRAY"
    name = SQL_TYPE_NAMES.get(code)
    if name is None:
        logger.warning("Unknown DATA_TYPE code %s", code)
        return str(code)
    return name


def _property_value(column: str, value: Any) -> str | None:
    """Render a header value the way Phoenix reports table properties."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if column == "IMMUTABLE_STORAGE_SCHEME":
        return _STORAGE_SCHEMES.get(int(value), str(value))
    return str(value)


def column_from_row(row: Mapping[str, Any]) -> Column:
    """Convert one SYSTEM.CATALOG column row into a Column."""
    max_length = row.get("COLUMN_SIZE")
    scale = row.get("DECIMAL_DIGITS") if max_length is not None else None
    return Column(
        name=row["COLUMN_NAME"],
        type_name=sql_type_name(int(row["DATA_TYPE"])),
        max_length=int(max_length) if max_length is not None else None,
        scale=int(scale) if scale is not None else None,
        nullable=row.get("NULLABLE") != 0,
        sort_order=_SORT_ORDERS.get(row.get("SORT_ORDER"), SortOrder.default()),
        row_timestamp=bool(row.get("IS_ROW_TIMESTAMP")),
        family=row.get("COLUMN_FAMILY") or None,
    )


def object_from_rows(rows: Iterable[Mapping[str, Any]]) -> PhoenixObject:
    """
    Build a PhoenixObject from the SYSTEM.CATALOG rows of one object.

    The rows are the header row (no column name, no family), one row per
    column, and link rows (no column name, family holds the linked name).

    Raises:
        NotFound: If there is no header row.
    """
    header: Mapping[str, Any] | None = None
    column_rows: list[Mapping[str, Any]] = []
    links: dict[int, str] = {}

    for row in rows:
        if row.get("COLUMN_NAME") is not None:
            column_rows.append(row)
        elif row.get("COLUMN_FAMILY") is None:
            header = row
        elif row.get("LINK_TYPE") is not None:
            links[int(row["LINK_TYPE"])] = row["COLUMN_FAMILY"]

    if header is None:
        raise NotFound("Object not found in SYSTEM.CATALOG.")

    schema = header.get("TABLE_SCHEM") or None
    try:
        kind = ObjectKind(header["TABLE_TYPE"])
    except ValueError as exc:
        raise UnsupportedObjectKind(
            f"Unknown TABLE_TYPE {header['TABLE_TYPE']!r} for '{header['TABLE_NAME']}'."
        ) from exc

    column_rows.sort(key=lambda r: r.get("ORDINAL_POSITION") or 0)
    columns = tuple(column_from_row(r) for r in column_rows)
    pk_rows = sorted(
        (r for r in column_rows if r.get("KEY_SEQ") is not None),
        key=lambda r: r["KEY_SEQ"],
    )
    pk_columns = tuple(column_from_row(r) for r in pk_rows)

    parent_name = None
    index_type = None
    if kind == ObjectKind.INDEX:
        if header.get("DATA_TABLE_NAME"):
            parent_name = qualified_name(schema, header["DATA_TABLE_NAME"])
        index_type = _INDEX_TYPES.get(header.get("INDEX_TYPE"), IndexType.GLOBAL)
    elif kind == ObjectKind.VIEW:
        parent_name = links.get(LINK_PARENT_TABLE) or links.get(LINK_PHYSICAL_TABLE)

    properties = {
        prop: _property_value(col, header.get(col))
        for col, prop in _PROPERTY_COLUMNS.items()
    }

    return PhoenixObject(
        schema=schema,
        name=header["TABLE_NAME"],
        kind=kind,
        columns=columns,
        pk_columns=pk_columns,
        pk_name=header.get("PK_NAME"),
        parent_name=parent_name,
        index_type=index_type,
        view_statement=header.get("VIEW_STATEMENT"),
        properties=properties,
        default_values=TABLE_PROPERTY_DEFAULTS,
        default_family=header.get("DEFAULT_COLUMN_FAMILY") or "0",
        physical_name=links.get(LINK_PHYSICAL_TABLE),
    )


def inherit_parent_columns(view: PhoenixObject, parent: PhoenixObject) -> PhoenixObject:
    """Prepend the parent's columns the view does not redefine."""
    own = {c.name for c in view.columns}
    own_pk = {c.name for c in view.pk_columns}
    return replace(
        view,
        columns=tuple(c for c in parent.columns if c.name not in own) + view.columns,
        pk_columns=tuple(c for c in parent.pk_columns if c.name not in own_pk)
        + view.pk_columns,
    )


class PhoenixCatalogAdapter:
    """Adapter that reads object descriptors from Phoenix's SYSTEM.CATALOG."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._resolved: dict[str, PhoenixObject] = {}

    def _fetch_rows(self, schema: str | None, name: str) -> list[Mapping[str, Any]]:
        """Run the catalog query for one object."""
        if schema:
            schema_predicate = "TABLE_SCHEM = :schema"
        else:
            schema_predicate = "TABLE_SCHEM IS NULL"
        sql = _CATALOG_QUERY.format(
            properties=", ".join(_PROPERTY_COLUMNS),
            schema_predicate=schema_predicate,
        )
        params = {"name": name}
        if schema:
            params["schema"] = schema
        with self.engine.connect() as conn:
            return list(conn.execute(text(sql), params).mappings())

    def resolve_object(self, qualified_name: str) -> PhoenixObject:
        """Return the descriptor of `[schema.]name` (fetched at most once)."""
        cached = self._resolved.get(qualified_name)
        if cached is not None:
            return cached

        schema, name = split_qualified_name(qualified_name)
        logger.debug("Reading SYSTEM.CATALOG rows for %s", qualified_name)
        rows = self._fetch_rows(schema, name)
        if not rows:
            raise NotFound(f"'{qualified_name}' does not exist in the Phoenix catalog.")
        obj = object_from_rows(rows)

        if obj.kind == ObjectKind.VIEW and obj.parent_name:
            obj = inherit_parent_columns(obj, self.resolve_object(obj.parent_name))

        self._resolved[qualified_name] = obj
        return obj
