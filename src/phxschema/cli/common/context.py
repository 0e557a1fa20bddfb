"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from phxschema.cli.common.exits import die
from phxschema.core.adapters.hbaserest import HBaseRestAdapter
from phxschema.core.adapters.phoenixcatalog import PhoenixCatalogAdapter
from phxschema.core.connection import (
    ConnectionFailure,
    ConnectionSettings,
    get_engine,
    hbase_rest_base_url,
)
from phxschema.core.properties import load_default_properties


@dataclass
class SchemaAppContext:
    """Application context holding the catalog/storage adapters and default properties."""

    catalog: PhoenixCatalogAdapter
    storage: HBaseRestAdapter
    defaults: Mapping[str, str]


def build_schema_context(settings: ConnectionSettings) -> SchemaAppContext:
    """Build and return the application context for schema extraction commands.

    Args:
        settings: Phoenix and HBase REST connection settings.

    Returns:
        SchemaAppContext: Context with configured adapters and the default property table.
    """
    try:
        engine = get_engine(settings)
        base_url = hbase_rest_base_url(settings)
    except ConnectionFailure as exc:
        die(str(exc), code=1)
    return SchemaAppContext(
        catalog=PhoenixCatalogAdapter(engine),
        storage=HBaseRestAdapter(base_url, timeout=settings.timeout),
        defaults=load_default_properties(),
    )
