"""DDL reconstruction for Phoenix tables, indexes and views.

This module turns catalog descriptors (plus physical storage properties for
tables) back into CREATE statements. It is free of CLI concerns and talks to
the catalog and HBase only through the `CatalogReader` and `StorageReader`
interfaces, so every builder can be tested with plain stubs.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Protocol

from phxschema.core.columns import (
    VIEW_INDEX_ID_COLUMN_NAME,
    column_clause,
    normalize_column_name,
)
from phxschema.core.diff import symmetric_difference
from phxschema.core.errors import NotFound, StorageLookupFailure, UnsupportedObjectKind
from phxschema.core.models import (
    IndexType,
    ObjectKind,
    PhoenixObject,
    SortOrder,
    StorageDescriptor,
    qualified_name,
)
from phxschema.core.properties import PropertyReconciler

logger = logging.getLogger(__name__)

CREATE_TABLE = "CREATE TABLE {name}{columns}{properties}"
CREATE_INDEX = "CREATE {local}INDEX {name} ON {parent}({indexed}){include}"
CREATE_VIEW = "CREATE VIEW {name}{columns} AS SELECT * FROM {parent}{where}"


class CatalogReader(Protocol):
    """Interface for resolving catalog objects by qualified name."""

    def resolve_object(self, qualified_name: str) -> PhoenixObject:
        """Return the descriptor of an object, raising NotFound if missing."""
        ...


class StorageReader(Protocol):
    """Interface for resolving the physical storage of an object."""

    def resolve_storage(self, obj: PhoenixObject) -> StorageDescriptor:
        """Return the storage descriptor, raising StorageLookupFailure on error."""
        ...


def table_ddl(
    table: PhoenixObject,
    storage: StorageDescriptor,
    defaults: Mapping[str, str],
) -> str:
    """
    Build a CREATE TABLE statement.

    Properties are emitted only when they override a default. Values are
    recorded from the HBase table descriptor, then the default column family,
    then the Phoenix catalog (highest precedence).

    Raises:
        StorageLookupFailure: If the default column family is not in storage.
    """
    family = storage.family(table.default_family)
    if family is None:
        raise StorageLookupFailure(
            f"Column family '{table.default_family}' not found in HBase table "
            f"'{storage.name}'."
        )

    reconciler = PropertyReconciler(defaults)
    reconciler.seed(table.default_values)
    reconciler.record_storage_object(storage.properties)
    reconciler.record_storage_family(family)
    reconciler.record_object(table.properties)

    return CREATE_TABLE.format(
        name=table.qualified_name,
        columns=column_clause(table.columns, table.pk_columns, table.pk_name),
        properties=reconciler.render(),
    )


def indexed_columns(index: PhoenixObject, parent: PhoenixObject) -> str:
    """
    Render the indexed columns of an index.

    These are the index key columns that are not simply the parent's key
    columns appended by Phoenix. Only non-default sort orders are annotated.
    """
    sort_orders: dict[str, SortOrder] = {}
    for col in index.pk_columns:
        name = normalize_column_name(col.name, index.default_family)
        if name.upper() == VIEW_INDEX_ID_COLUMN_NAME:
            continue
        sort_orders[name] = col.sort_order

    parent_pk = [col.name for col in parent.pk_columns]
    parts: list[str] = []
    for name in symmetric_difference(sort_orders, parent_pk):
        order = sort_orders.get(name, SortOrder.default())
        if order != SortOrder.default():
            parts.append(f"{name} {order.value}")
        else:
            parts.append(name)
    return ", ".join(parts)


def covered_columns(index: PhoenixObject) -> str:
    """Render the INCLUDE list: every index column that lives in a family."""
    return ", ".join(
        normalize_column_name(col.name, index.default_family)
        for col in index.columns
        if col.family
    )


def index_ddl(index: PhoenixObject, parent: PhoenixObject) -> str:
    """Build a CREATE [LOCAL ]INDEX statement against the parent table."""
    covered = covered_columns(index)
    return CREATE_INDEX.format(
        local="LOCAL " if index.index_type == IndexType.LOCAL else "",
        name=index.name,
        parent=parent.qualified_name,
        indexed=indexed_columns(index, parent),
        include=f" INCLUDE ({covered})" if covered else "",
    )


def where_clause(view_statement: str | None) -> str | None:
    """Return the view filter starting at its first WHERE, or None."""
    if view_statement is None:
        return None
    pos = view_statement.find("WHERE")
    if pos < 0:
        return None
    return view_statement[pos:]


def view_ddl(view: PhoenixObject, parent: PhoenixObject) -> str:
    """
    Build a CREATE VIEW statement.

    Only columns the view adds (or redefines) relative to its parent are
    declared; the stored filter becomes the trailing WHERE clause.
    """
    columns = symmetric_difference(parent.columns, view.columns)
    pk_columns = symmetric_difference(parent.pk_columns, view.pk_columns)
    where = where_clause(view.view_statement)
    return CREATE_VIEW.format(
        name=view.qualified_name,
        columns=column_clause(columns, pk_columns, view.pk_name),
        parent=parent.qualified_name,
        where=f" {where}" if where else "",
    )


def resolve_parent(catalog: CatalogReader, obj: PhoenixObject) -> PhoenixObject:
    """Resolve the base table of an index or view."""
    if not obj.parent_name:
        raise NotFound(f"{obj.kind.name.title()} '{obj.qualified_name}' has no parent table.")
    logger.debug("Resolving parent %s of %s", obj.parent_name, obj.qualified_name)
    return catalog.resolve_object(obj.parent_name)


def _table_handler(
    catalog: CatalogReader,
    storage: StorageReader,
    obj: PhoenixObject,
    defaults: Mapping[str, str],
) -> str:
    """Tables need the HBase descriptor for their property clause."""
    return table_ddl(obj, storage.resolve_storage(obj), defaults)


def _index_handler(
    catalog: CatalogReader,
    storage: StorageReader,
    obj: PhoenixObject,
    defaults: Mapping[str, str],
) -> str:
    """Indexes are rendered against their parent table."""
    return index_ddl(obj, resolve_parent(catalog, obj))


def _view_handler(
    catalog: CatalogReader,
    storage: StorageReader,
    obj: PhoenixObject,
    defaults: Mapping[str, str],
) -> str:
    """Views are rendered against their parent table."""
    return view_ddl(obj, resolve_parent(catalog, obj))


_HANDLERS: dict[
    ObjectKind,
    Callable[[CatalogReader, StorageReader, PhoenixObject, Mapping[str, str]], str],
] = {
    ObjectKind.TABLE: _table_handler,
    ObjectKind.INDEX: _index_handler,
    ObjectKind.VIEW: _view_handler,
}


def extract_ddl(
    catalog: CatalogReader,
    storage: StorageReader,
    obj: PhoenixObject,
    *,
    defaults: Mapping[str, str],
) -> str:
    """
    Reconstruct the CREATE statement of a catalog object.

    Args:
        catalog: Catalog reader used to resolve the parent of indexes/views.
        storage: Storage reader used to resolve HBase properties of tables.
        obj: Descriptor of the object to reconstruct.
        defaults: Default property table (see `load_default_properties`).

    Returns:
        The CREATE TABLE, CREATE INDEX or CREATE VIEW statement.

    Raises:
        UnsupportedObjectKind: If the object is not a table, index or view.
        NotFound: If the parent of an index or view does not exist.
        StorageLookupFailure: If the HBase properties of a table are unavailable.
    """
    handler = _HANDLERS.get(obj.kind)
    if handler is None:
        raise UnsupportedObjectKind(
            f"Cannot extract DDL for {obj.kind.name} object '{obj.qualified_name}'."
        )
    return handler(catalog, storage, obj, defaults)


def extract_ddl_by_name(
    catalog: CatalogReader,
    storage: StorageReader,
    schema: str | None,
    name: str,
    *,
    defaults: Mapping[str, str],
) -> str:
    """Resolve `schema.name` and reconstruct its CREATE statement."""
    obj = catalog.resolve_object(qualified_name(schema, name))
    return extract_ddl(catalog, storage, obj, defaults=defaults)
