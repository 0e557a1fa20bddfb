"""Core domain models for Phoenix catalog objects.

These models represent tables, indexes, views and their physical storage in a
simple, immutable form. They are intentionally free of SQLAlchemy/HTTP types
and UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class ObjectKind(str, Enum):
    """
    Kind of a catalog object, valued by the catalog's one-letter TABLE_TYPE code.

    Only TABLE, INDEX and VIEW can be turned back into DDL.
    """

    SYSTEM = "s"
    TABLE = "u"
    VIEW = "v"
    INDEX = "i"
    PROJECTED = "p"
    SUBQUERY = "q"


class IndexType(str, Enum):
    """Placement mode of a secondary index."""

    GLOBAL = "GLOBAL"
    LOCAL = "LOCAL"


class SortOrder(str, Enum):
    """Sort order of a key column."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def default(cls) -> SortOrder:
        return cls.ASC


def qualified_name(schema: str | None, name: str) -> str:
    """Return `schema.name`, or just `name` when there is no schema."""
    if not schema:
        return name
    return f"{schema}.{name}"


def split_qualified_name(full_name: str) -> tuple[str | None, str]:
    """Split `[schema.]name` into (schema, name)."""
    parts = full_name.strip().split(".")
    if len(parts) == 1 and parts[0]:
        return None, parts[0]
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError("Object name must be in the form `name` or `schema.name`.")
    return parts[0], parts[1]


@dataclass(frozen=True)
class Column:
    """
    One column of a catalog object.

    Attributes:
        name: Column name as stored. Index columns carry a `family:column`
              qualifier; an empty family prefix means the default family.
        type_name: SQL type name (e.g. VARCHAR, DECIMAL, INTEGER ARRAY).
        max_length: Optional maximum length.
        scale: Optional numeric scale, only valid together with max_length.
        nullable: Whether the column accepts NULL.
        sort_order: Sort order; ASC is the system default.
        row_timestamp: Marks the column as a ROW_TIMESTAMP key component.
        family: Column family, or None for key columns.
    """

    name: str
    type_name: str
    max_length: int | None = None
    scale: int | None = None
    nullable: bool = True
    sort_order: SortOrder = SortOrder.ASC
    row_timestamp: bool = False
    family: str | None = None

    def __post_init__(self) -> None:
        if self.scale is not None and self.max_length is None:
            raise ValueError(f"Column {self.name} has a scale but no length.")


@dataclass(frozen=True)
class PhoenixObject:
    """
    A table, secondary index or view as described by the catalog.

    `properties` holds object-level values (values may be None) and
    `default_values` the defaults the metadata layer applies to this kind of
    object. `parent_name` is the qualified name of the base table for
    indexes and views.
    """

    schema: str | None
    name: str
    kind: ObjectKind
    columns: tuple[Column, ...] = ()
    pk_columns: tuple[Column, ...] = ()
    pk_name: str | None = None
    parent_name: str | None = None
    index_type: IndexType | None = None
    view_statement: str | None = None
    properties: Mapping[str, str | None] = field(default_factory=dict)
    default_values: Mapping[str, str] = field(default_factory=dict)
    default_family: str = "0"
    physical_name: str | None = None

    @property
    def qualified_name(self) -> str:
        return qualified_name(self.schema, self.name)

    @property
    def storage_name(self) -> str:
        """Name of the underlying HBase table."""
        return self.physical_name or self.qualified_name


@dataclass(frozen=True)
class StorageDescriptor:
    """Physical properties of an HBase table and its column families."""

    name: str
    properties: Mapping[str, str] = field(default_factory=dict)
    families: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def family(self, name: str) -> Mapping[str, str] | None:
        """Return the property map of a column family, or None if absent."""
        return self.families.get(name)
