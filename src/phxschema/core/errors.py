"""Errors raised while reconstructing DDL.

All of them are fatal for one invocation: the core never retries and never
returns partial output. The CLI decides how to present them.
"""


class SchemaExtractionError(RuntimeError):
    """Base class for DDL reconstruction failures."""


class NotFound(SchemaExtractionError):
    """Raised when an object, or the parent of an index/view, is not in the catalog."""


class StorageLookupFailure(SchemaExtractionError):
    """Raised when the physical storage properties of an object cannot be resolved."""


class UnsupportedObjectKind(SchemaExtractionError):
    """Raised for catalog objects that are not a table, index or view."""
