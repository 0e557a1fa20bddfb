import json

import pytest
from typer.testing import CliRunner

from phxschema.cli import cli
from phxschema.cli.commands import extract
from phxschema.cli.common.context import SchemaAppContext
from phxschema.core.errors import NotFound
from phxschema.core.models import ObjectKind, PhoenixObject, StorageDescriptor
from phxschema.core.properties import load_default_properties

runner = CliRunner()

CONNECTION_ARGS = ["extract", "--url", "phoenix://pqs:8765/", "--hbase-rest-url", "http://hbase:8080"]


class _Catalog:
    def __init__(self, *objects: PhoenixObject):
        self.objects = {o.qualified_name: o for o in objects}

    def resolve_object(self, qualified_name: str) -> PhoenixObject:
        if qualified_name not in self.objects:
            raise NotFound(f"'{qualified_name}' does not exist in the Phoenix catalog.")
        return self.objects[qualified_name]


class _Storage:
    def resolve_storage(self, obj: PhoenixObject) -> StorageDescriptor:
        return StorageDescriptor(name=obj.storage_name, families={"0": {"COMPRESSION": "GZ"}})


@pytest.fixture
def stub_context(monkeypatch, base_table):
    captured = {}

    def _build(settings):
        captured["settings"] = settings
        return SchemaAppContext(
            catalog=_Catalog(base_table),
            storage=_Storage(),
            defaults=load_default_properties(),
        )

    monkeypatch.setattr(extract, "build_schema_context", _build)
    return captured


def test_ddl_prints_statement(stub_context):
    result = runner.invoke(cli.app, CONNECTION_ARGS + ["ddl", "--table", "T", "--schema", "S"])

    assert result.exit_code == 0, result.output
    assert (
        "CREATE TABLE S.T(ID VARCHAR PRIMARY KEY, NAME VARCHAR(50), FLAG INTEGER)COMPRESSION=GZ"
        in result.output
    )
    settings = stub_context["settings"]
    assert settings.url == "phoenix://pqs:8765/"
    assert settings.hbase_rest_url == "http://hbase:8080"


def test_ddl_reads_connection_from_environment(stub_context, monkeypatch):
    monkeypatch.setenv("PHXSCHEMA_URL", "phoenix://env:8765/")
    monkeypatch.setenv("PHXSCHEMA_HBASE_REST_URL", "http://env:8080")
    monkeypatch.setenv("PHXSCHEMA_TIMEOUT", "7")

    result = runner.invoke(cli.app, ["extract", "ddl", "-t", "T", "-s", "S"])

    assert result.exit_code == 0, result.output
    assert stub_context["settings"].url == "phoenix://env:8765/"
    assert stub_context["settings"].timeout == 7


def test_ddl_unknown_object_exits_with_error(stub_context):
    result = runner.invoke(cli.app, CONNECTION_ARGS + ["ddl", "-t", "MISSING", "-s", "S"])

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_ddl_malformed_name_exits_with_usage_error(stub_context):
    result = runner.invoke(cli.app, CONNECTION_ARGS + ["ddl", "-t", "A.B", "-s", "S"])

    assert result.exit_code == 2


def test_ddl_unsupported_kind_exits_with_error(monkeypatch):
    system = PhoenixObject(schema="SYSTEM", name="STATS", kind=ObjectKind.SYSTEM)
    monkeypatch.setattr(
        extract,
        "build_schema_context",
        lambda settings: SchemaAppContext(
            catalog=_Catalog(system),
            storage=_Storage(),
            defaults=load_default_properties(),
        ),
    )

    result = runner.invoke(cli.app, CONNECTION_ARGS + ["ddl", "-t", "STATS", "-s", "SYSTEM"])

    assert result.exit_code == 1
    assert "SYSTEM" in result.output


def test_ddl_without_url_fails(monkeypatch):
    monkeypatch.delenv("PHXSCHEMA_URL", raising=False)
    monkeypatch.delenv("PHXSCHEMA_HBASE_REST_URL", raising=False)

    result = runner.invoke(cli.app, ["extract", "ddl", "-t", "T"])

    assert result.exit_code == 1
    assert "No Phoenix URL configured" in result.output


def test_tree_writes_json_file(stub_context, tmp_path):
    path = tmp_path / "tree.json"

    result = runner.invoke(
        cli.app, CONNECTION_ARGS + ["tree", "-t", "T", "-s", "S", "--tree-file", str(path)]
    )

    assert result.exit_code == 0, result.output
    node = json.loads(path.read_text(encoding="utf-8"))
    assert node["name"] == "S.T"
    assert node["type"] == "TABLE"


def test_tree_to_stdout(stub_context):
    result = runner.invoke(cli.app, CONNECTION_ARGS + ["tree", "-t", "T", "-s", "S", "-f", "-"])

    assert result.exit_code == 0, result.output
    assert '"name": "S.T"' in result.output


def test_tree_unwritable_path(stub_context, tmp_path):
    path = tmp_path / "missing" / "tree.json"

    result = runner.invoke(
        cli.app, CONNECTION_ARGS + ["tree", "-t", "T", "-s", "S", "-f", str(path)]
    )

    assert result.exit_code == 1
    assert "Error writing schema tree" in result.output
