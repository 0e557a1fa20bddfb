"""Default property values and property reconciliation.

The reconciler compares the values actually stored for an object (Phoenix
header row, HBase table descriptor and default column family) against the
defaults that would apply anyway, and renders only the explicit overrides as
the `key=value,...` suffix of a CREATE TABLE statement.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)

BLOOMFILTER = "BLOOMFILTER"
COMPRESSION = "COMPRESSION"
DATA_BLOCK_ENCODING = "DATA_BLOCK_ENCODING"
IS_META = "IS_META"
COPROCESSOR = "coprocessor"

# Phoenix creates tables with FAST_DIFF unless configured otherwise.
DEFAULT_DATA_BLOCK_ENCODING = "FAST_DIFF"

# phoenix.stats.guidepost.width (100 MB).
DEFAULT_GUIDE_POSTS_WIDTH = str(100 * 1024 * 1024)

# Literal HBase column family defaults.
HBASE_COLUMN_FAMILY_DEFAULTS: Mapping[str, str] = MappingProxyType(
    {
        BLOOMFILTER: "ROW",
        "REPLICATION_SCOPE": "0",
        "VERSIONS": "1",
        "MIN_VERSIONS": "0",
        COMPRESSION: "NONE",
        "TTL": "2147483647",
        "BLOCKSIZE": "65536",
        "IN_MEMORY": "false",
        "BLOCKCACHE": "true",
        "KEEP_DELETED_CELLS": "FALSE",
        DATA_BLOCK_ENCODING: "NONE",
        "CACHE_DATA_ON_WRITE": "false",
        "CACHE_DATA_IN_L1": "false",
        "CACHE_INDEX_ON_WRITE": "false",
        "CACHE_BLOOMS_ON_WRITE": "false",
        "EVICT_BLOCKS_ON_CLOSE": "false",
        "PREFETCH_BLOCKS_ON_OPEN": "false",
    }
)

# Defaults Phoenix applies to table-level options.
TABLE_PROPERTY_DEFAULTS: Mapping[str, str] = MappingProxyType(
    {
        "DISABLE_WAL": "false",
        "IMMUTABLE_ROWS": "false",
        "MULTI_TENANT": "false",
        "STORE_NULLS": "false",
        "APPEND_ONLY_SCHEMA": "false",
        "UPDATE_CACHE_FREQUENCY": "0",
        "USE_STATS_FOR_PARALLELIZATION": "true",
        "IMMUTABLE_STORAGE_SCHEME": "ONE_CELL_PER_COLUMN",
        "COLUMN_ENCODED_BYTES": "2",
        "TRANSACTIONAL": "false",
        "SALT_BUCKETS": "0",
        "GUIDE_POSTS_WIDTH": DEFAULT_GUIDE_POSTS_WIDTH,
    }
)


def load_default_properties(
    data_block_encoding: str = DEFAULT_DATA_BLOCK_ENCODING,
) -> Mapping[str, str]:
    """
    Build the read-only default property table.

    Starts from the HBase column family defaults and applies Phoenix's own
    view of them: no bloom filter, no compression, and the configured data
    block encoding.

    Args:
        data_block_encoding: Data block encoding Phoenix uses for new tables.

    Returns:
        An immutable mapping of property name to default value.
    """
    defaults = dict(HBASE_COLUMN_FAMILY_DEFAULTS)
    defaults[BLOOMFILTER] = "NONE"
    defaults[COMPRESSION] = "NONE"
    defaults[DATA_BLOCK_ENCODING] = str(data_block_encoding)
    return MappingProxyType(defaults)


class PropertyReconciler:
    """
    Working state of one reconstruction: a default map and a defined map.

    Values are recorded in precedence order (storage table, storage family,
    catalog object) and consumed once by `render`.
    """

    def __init__(self, defaults: Mapping[str, str]):
        self.default: dict[str, str] = dict(defaults)
        self.defined: dict[str, str] = {}

    def seed(self, object_defaults: Mapping[str, str]) -> None:
        """Overlay the object-kind defaults on top of the engine defaults."""
        self.default.update(object_defaults)

    def record_storage_object(self, props: Mapping[str, str]) -> None:
        """
        Record HBase table-level values.

        Coprocessor attachments and the IS_META marker are skipped. Every
        other key gets a forced default of "false", so any stored value other
        than "false" is emitted.
        """
        for key, value in props.items():
            if COPROCESSOR in key or IS_META in key:
                continue
            # FIXME: non-boolean table attributes always count as overridden.
            self.default[key] = "false"
            self.defined[key] = value

    def record_storage_family(self, props: Mapping[str, str]) -> None:
        """Record the values of the default column family."""
        for key, value in props.items():
            self.defined[key] = value

    def record_object(self, props: Mapping[str, str | None]) -> None:
        """Record non-null catalog values; these win over storage values."""
        for key, value in props.items():
            if value is not None:
                self.defined[key] = value

    def overrides(self) -> list[tuple[str, str]]:
        """Return (key, value) pairs that differ from a known default."""
        out: list[tuple[str, str]] = []
        for key, value in self.defined.items():
            default = self.default.get(key)
            if value is None or default is None or value == default:
                continue
            out.append((key, value))
        return out

    def render(self) -> str:
        """Render overrides as `key=value` joined by commas (empty if none)."""
        overrides = self.overrides()
        logger.debug("Property overrides: %s", overrides)
        return ",".join(f"{k}={v}" for k, v in overrides)
