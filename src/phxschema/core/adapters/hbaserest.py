from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

import requests

from phxschema.core.errors import StorageLookupFailure
from phxschema.core.models import PhoenixObject, StorageDescriptor

logger = logging.getLogger(__name__)

_NAME_KEY = "name"
_FAMILIES_KEY = "ColumnSchema"


def storage_from_schema(payload: Mapping[str, Any]) -> StorageDescriptor:
    """
    Convert an HBase REST table schema document into a StorageDescriptor.

    Top-level attributes (other than `name` and `ColumnSchema`) are table
    properties; each `ColumnSchema` entry holds one column family.
    """
    if not isinstance(payload, Mapping) or _NAME_KEY not in payload:
        raise StorageLookupFailure("Malformed HBase table schema: missing table name.")

    properties = {
        str(k): str(v)
        for k, v in payload.items()
        if k not in (_NAME_KEY, _FAMILIES_KEY)
    }
    families: dict[str, dict[str, str]] = {}
    entries = payload.get(_FAMILIES_KEY) or []
    if not isinstance(entries, list):
        raise StorageLookupFailure(
            "Malformed HBase table schema: ColumnSchema must be a list."
        )
    for family in entries:
        if not isinstance(family, Mapping):
            raise StorageLookupFailure(
                "Malformed HBase table schema: column family entry is not an object."
            )
        name = family.get(_NAME_KEY)
        if name is None:
            continue
        families[str(name)] = {
            str(k): str(v) for k, v in family.items() if k != _NAME_KEY
        }
    return StorageDescriptor(
        name=str(payload[_NAME_KEY]),
        properties=properties,
        families=families,
    )


class HBaseRestAdapter:
    """Adapter around the HBase REST gateway (table schema lookups)."""

    def __init__(
        self,
        base_url: str,
        *,
        session: requests.Session | None = None,
        timeout: float = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def schema_url(self, table_name: str) -> str:
        """Return the REST URL of an HBase table's schema."""
        return f"{self.base_url}/{quote(table_name, safe='')}/schema"

    def resolve_storage(self, obj: PhoenixObject) -> StorageDescriptor:
        """Return the HBase table and column family properties of `obj`."""
        table_name = obj.storage_name
        url = self.schema_url(table_name)
        logger.debug("Fetching HBase schema from %s", url)
        try:
            resp = self.session.get(
                url, headers={"Accept": "application/json"}, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise StorageLookupFailure(
                f"Could not reach HBase REST server for '{table_name}': {exc}"
            ) from exc

        if resp.status_code == 404:
            raise StorageLookupFailure(f"HBase table '{table_name}' does not exist.")
        try:
            resp.raise_for_status()
            payload = resp.json()
        except requests.HTTPError as exc:
            raise StorageLookupFailure(
                f"HBase REST lookup for '{table_name}' failed: {exc}"
            ) from exc
        except ValueError as exc:
            raise StorageLookupFailure(
                f"HBase REST returned invalid JSON for '{table_name}'."
            ) from exc

        return storage_from_schema(payload)
