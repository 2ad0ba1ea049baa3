import pytest

from sonata.io.paths import (
    attribute_path,
    is_partition_name,
    kind_root_path,
    partition_path,
    population_path,
)


def test_kind_root_path():
    assert kind_root_path("node") == "/nodes"
    assert kind_root_path("edge") == "/edges"
    with pytest.raises(ValueError):
        kind_root_path("synapse")


def test_population_layout_helpers():
    assert population_path("node", "default") == "/nodes/default"
    assert partition_path("node", "default") == "/nodes/default/0"
    assert partition_path("edge", "e", "3") == "/edges/e/3"
    assert attribute_path("edge", "e", "delay") == "/edges/e/0/delay"


def test_names_must_not_contain_separators():
    with pytest.raises(ValueError):
        population_path("node", "a/b")
    with pytest.raises(ValueError):
        population_path("node", "")
    with pytest.raises(ValueError):
        attribute_path("node", "default", "x/y")


def test_is_partition_name():
    assert is_partition_name("0")
    assert is_partition_name("12")
    assert not is_partition_name("indices")
    assert not is_partition_name("-1")
    assert not is_partition_name("")
