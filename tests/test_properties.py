import pytest

from phxschema.core.properties import (
    HBASE_COLUMN_FAMILY_DEFAULTS,
    PropertyReconciler,
    load_default_properties,
)


def test_load_default_properties_applies_phoenix_corrections():
    defaults = load_default_properties()

    assert HBASE_COLUMN_FAMILY_DEFAULTS["BLOOMFILTER"] == "ROW"
    assert defaults["BLOOMFILTER"] == "NONE"
    assert defaults["COMPRESSION"] == "NONE"
    assert defaults["DATA_BLOCK_ENCODING"] == "FAST_DIFF"
    assert defaults["VERSIONS"] == "1"


def test_load_default_properties_uses_configured_encoding():
    assert load_default_properties("PREFIX")["DATA_BLOCK_ENCODING"] == "PREFIX"


def test_default_property_table_is_read_only():
    defaults = load_default_properties()
    with pytest.raises(TypeError):
        defaults["VERSIONS"] = "3"  # type: ignore[index]


def test_only_keys_in_both_maps_with_unequal_values_are_rendered(defaults):
    reconciler = PropertyReconciler(defaults)
    reconciler.record_storage_family(
        {
            "BLOOMFILTER": "NONE",  # equal to default
            "COMPRESSION": "GZ",  # override
            "UNKNOWN_KEY": "x",  # no default
        }
    )

    assert reconciler.render() == "COMPRESSION=GZ"


def test_render_is_empty_without_overrides(defaults):
    reconciler = PropertyReconciler(defaults)
    reconciler.record_storage_family({"VERSIONS": "1"})

    assert reconciler.render() == ""


def test_object_defaults_take_precedence_over_engine_defaults(defaults):
    reconciler = PropertyReconciler(defaults)
    reconciler.seed({"VERSIONS": "3"})
    reconciler.record_storage_family({"VERSIONS": "3"})

    assert reconciler.render() == ""


def test_storage_object_properties_force_false_default(defaults):
    reconciler = PropertyReconciler(defaults)
    reconciler.record_storage_object(
        {
            "DURABILITY": "ASYNC_WAL",
            "REGION_REPLICATION": "false",
            "coprocessor$1": "|org.apache.phoenix.coprocessor.ScanRegionObserver|",
            "IS_META": "false",
        }
    )

    assert reconciler.default["DURABILITY"] == "false"
    assert "coprocessor$1" not in reconciler.defined
    assert "IS_META" not in reconciler.defined
    assert reconciler.render() == "DURABILITY=ASYNC_WAL"


def test_catalog_values_override_storage_values(defaults):
    reconciler = PropertyReconciler(defaults)
    reconciler.record_storage_family({"TTL": "100"})
    reconciler.record_object({"TTL": "200", "SALT_BUCKETS": None})

    assert reconciler.render() == "TTL=200"
    assert "SALT_BUCKETS" not in reconciler.defined


def test_render_keeps_defined_insertion_order(defaults):
    reconciler = PropertyReconciler(defaults)
    reconciler.seed({"IMMUTABLE_ROWS": "false"})
    reconciler.record_storage_family({"VERSIONS": "5", "COMPRESSION": "SNAPPY"})
    reconciler.record_object({"IMMUTABLE_ROWS": "true"})

    assert reconciler.render() == "VERSIONS=5,COMPRESSION=SNAPPY,IMMUTABLE_ROWS=true"
