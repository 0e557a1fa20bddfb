"""Connection helpers for Phoenix and HBase.

This module centralizes creation of the SQLAlchemy engine used to read the
Phoenix catalog and applies small normalization rules to the HBase REST URL
to avoid malformed request paths.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError

DEFAULT_TIMEOUT_SECONDS = 30


class ConnectionFailure(RuntimeError):
    """Raised when a Phoenix or HBase connection cannot be configured."""


@dataclass(frozen=True)
class ConnectionSettings:
    """
    Where to find the Phoenix Query Server and the HBase REST gateway.

    Attributes:
        url: SQLAlchemy URL of the Phoenix Query Server (e.g. `phoenix://host:8765/`).
        hbase_rest_url: Base URL of the HBase REST server (e.g. `http://host:8080`).
        timeout: Timeout in seconds for HBase REST requests.
    """

    url: str
    hbase_rest_url: str
    timeout: float = DEFAULT_TIMEOUT_SECONDS


def _format_connection_error(message: str, url: str) -> str:
    """Return a user-friendly connection error message."""
    if "Can't load plugin" in message:
        return (
            f"No SQLAlchemy dialect available for '{url}'.\n"
            "Install the Phoenix driver with:\n  $ pip install 'phxschema[phoenix]'"
        )
    return f"Invalid Phoenix connection URL '{url}': {message}"


def _sanitize_url(url: str | None) -> str | None:
    """
    Normalize a base URL.

    - Removes query strings (e.g. '?user.name=hbase')
    - Removes trailing slashes
    """
    if not url:
        return url
    url = url.strip().split("?", 1)[0]
    return url.rstrip("/")


def get_engine(settings: ConnectionSettings) -> Engine:
    """
    Create the SQLAlchemy engine for the Phoenix catalog.

    The engine is lazy: no connection is opened until the catalog is queried.
    """
    if not settings.url:
        raise ConnectionFailure(
            "No Phoenix URL configured. Pass --url or set PHXSCHEMA_URL."
        )
    try:
        return create_engine(settings.url)
    except ArgumentError as exc:
        raise ConnectionFailure(_format_connection_error(str(exc), settings.url)) from exc


def hbase_rest_base_url(settings: ConnectionSettings) -> str:
    """Return the sanitized HBase REST base URL."""
    base = _sanitize_url(settings.hbase_rest_url)
    if not base:
        raise ConnectionFailure(
            "No HBase REST URL configured. Pass --hbase-rest-url or set "
            "PHXSCHEMA_HBASE_REST_URL."
        )
    return base
