"""Hierarchical (JSON) export of a table, index or view."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from phxschema.core.columns import normalize_column_name
from phxschema.core.ddl import CatalogReader, covered_columns, resolve_parent, where_clause
from phxschema.core.errors import UnsupportedObjectKind
from phxschema.core.models import Column, ObjectKind, PhoenixObject


def _column_node(column: Column) -> dict[str, Any]:
    return {
        "name": column.name,
        "type": column.type_name,
        "length": column.max_length,
        "scale": column.scale,
        "nullable": column.nullable,
        "sortOrder": column.sort_order.value,
        "rowTimestamp": column.row_timestamp,
        "family": column.family,
    }


def _object_node(obj: PhoenixObject) -> dict[str, Any]:
    return {
        "name": obj.qualified_name,
        "type": obj.kind.name,
        "columns": [_column_node(c) for c in obj.columns],
        "primaryKey": [c.name for c in obj.pk_columns],
    }


def build_schema_tree(catalog: CatalogReader, obj: PhoenixObject) -> dict[str, Any]:
    """
    Build the schema tree of an object.

    Indexes and views embed the node of their parent table.

    Raises:
        UnsupportedObjectKind: If the object is not a table, index or view.
        NotFound: If the parent of an index or view does not exist.
    """
    if obj.kind == ObjectKind.TABLE:
        return _object_node(obj)

    if obj.kind == ObjectKind.INDEX:
        parent = resolve_parent(catalog, obj)
        node = _object_node(obj)
        node["indexType"] = obj.index_type.value if obj.index_type else None
        node["indexedColumns"] = [
            normalize_column_name(c.name, obj.default_family) for c in obj.pk_columns
        ]
        covered = covered_columns(obj)
        node["coveredColumns"] = covered.split(", ") if covered else []
        node["parent"] = _object_node(parent)
        return node

    if obj.kind == ObjectKind.VIEW:
        parent = resolve_parent(catalog, obj)
        node = _object_node(obj)
        node["where"] = where_clause(obj.view_statement)
        node["parent"] = _object_node(parent)
        return node

    raise UnsupportedObjectKind(
        f"Cannot build a schema tree for {obj.kind.name} object '{obj.qualified_name}'."
    )


def render_schema_tree(node: dict[str, Any]) -> str:
    """Render a schema tree as indented JSON."""
    return json.dumps(node, indent=2)


def write_schema_tree(node: dict[str, Any], path: Path) -> None:
    """Write a schema tree to `path` as indented JSON."""
    path.write_text(render_schema_tree(node) + "\n", encoding="utf-8")
