from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from phxschema.core.models import Column, ObjectKind, PhoenixObject  # noqa: E402
from phxschema.core.properties import (  # noqa: E402
    TABLE_PROPERTY_DEFAULTS,
    load_default_properties,
)


@pytest.fixture
def defaults():
    return load_default_properties()


@pytest.fixture
def base_table() -> PhoenixObject:
    """S.T(ID VARCHAR PRIMARY KEY, NAME VARCHAR(50), FLAG INTEGER)."""
    id_col = Column(name="ID", type_name="VARCHAR")
    return PhoenixObject(
        schema="S",
        name="T",
        kind=ObjectKind.TABLE,
        columns=(
            id_col,
            Column(name="NAME", type_name="VARCHAR", max_length=50, family="0"),
            Column(name="FLAG", type_name="INTEGER", family="0"),
        ),
        pk_columns=(id_col,),
        pk_name="PK",
        properties={"IMMUTABLE_ROWS": "false", "SALT_BUCKETS": None},
        default_values=TABLE_PROPERTY_DEFAULTS,
    )
