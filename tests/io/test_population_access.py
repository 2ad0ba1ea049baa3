from __future__ import annotations

from pathlib import Path

import h5py
import numpy as np
import polars as pl
import pytest

from sonata.core.errors import (
    SelectionError,
    SonataIoError,
    SonataNotFoundError,
    SonataStructureError,
    SonataUnsupportedError,
)
from sonata.core.selection import Selection
from sonata.io.h5 import H5Column
from sonata.io.population import EdgePopulation, NodePopulation, Population

DEFAULT_ATTRIBUTES = {"x", "mtype", "model_type", "afferent", "dynamics_params"}


def test_open_population_caches_attribute_names(nodes_h5: Path):
    with NodePopulation(nodes_h5, "", "default") as pop:
        assert pop.name == "default"
        assert pop.prefix == "node"
        assert pop.attribute_names == DEFAULT_ATTRIBUTES
        assert pop.size == 10


def test_fixed_attribute_matches_direct_indexing(nodes_h5: Path):
    rows = [0, 1, 2, 5, 8, 9]
    with h5py.File(nodes_h5, "r") as fh:
        expected_x = fh["nodes/default/0/x"][:][rows]
        expected_mtype = fh["nodes/default/0/mtype"][:][rows]

    with NodePopulation(nodes_h5, "", "default") as pop:
        x = pop.get_attribute("x", Selection.from_values(rows))
        mtype = pop.get_attribute("mtype", Selection.from_values(rows))

    assert isinstance(x, np.ndarray)
    assert x.tolist() == expected_x.tolist()
    assert mtype.dtype == np.int32
    assert mtype.tolist() == expected_mtype.tolist()


def test_string_attribute_is_decoded(nodes_h5: Path):
    with NodePopulation(nodes_h5, "", "default") as pop:
        out = pop.get_attribute("model_type", Selection.from_values([1, 3, 4]))
    assert out == ["model_1", "model_3", "model_4"]


def test_vlen_attribute_rows(nodes_h5: Path):
    with NodePopulation(nodes_h5, "", "default") as pop:
        out = pop.get_attribute("afferent", Selection.from_values([2, 7]))
    assert [row.tolist() for row in out] == [[2, 3, 4], [7, 8]]


def test_variable_attribute_read_calls(nodes_h5: Path, monkeypatch):
    calls: list[tuple[int, int]] = []
    real_read = H5Column.read

    def spy(self, start, stop):
        calls.append((start, stop))
        return real_read(self, start, stop)

    monkeypatch.setattr(H5Column, "read", spy)
    with NodePopulation(nodes_h5, "", "default") as pop:
        single = pop.get_attribute("model_type", Selection([(2, 6)]))
        assert len(calls) == 1
        assert len(single) == 4

        calls.clear()
        sel = Selection.from_values([0, 3, 4, 9])
        multi = pop.get_attribute("model_type", sel)
        assert len(calls) == 3
        assert len(multi) == sel.flat_size


def test_empty_selection(nodes_h5: Path):
    with NodePopulation(nodes_h5, "", "default") as pop:
        assert pop.get_attribute("x", Selection()).shape == (0,)
        assert pop.get_attribute("model_type", Selection()) == []


def test_unknown_attribute_is_not_found(nodes_h5: Path):
    with NodePopulation(nodes_h5, "", "default") as pop:
        with pytest.raises(SonataNotFoundError, match="No such attribute: 'missing'"):
            pop.get_attribute("missing", Selection.from_values([0]))


def test_group_attribute_is_structural_error(nodes_h5: Path):
    with NodePopulation(nodes_h5, "", "default") as pop:
        with pytest.raises(SonataStructureError):
            pop.get_attribute("dynamics_params", Selection.from_values([0]))


def test_selection_past_end(nodes_h5: Path):
    with NodePopulation(nodes_h5, "", "default") as pop:
        with pytest.raises(SelectionError):
            pop.get_attribute("x", Selection.from_values([9, 10]))


def test_get_attributes_frame(nodes_h5: Path):
    with NodePopulation(nodes_h5, "", "default") as pop:
        df = pop.get_attributes(["model_type", "x"], Selection.from_values([0, 4]))
    assert isinstance(df, pl.DataFrame)
    assert df.columns == ["model_type", "x"]
    assert df.height == 2
    assert df["model_type"].to_list() == ["model_0", "model_4"]
    assert df["x"].to_list() == [0.0, 2.0]


@pytest.mark.parametrize("name", ["two_parts", "only_one", "no_partition"])
def test_unsupported_partition_layouts(layouts_h5: Path, name: str):
    with pytest.raises(SonataStructureError, match="single-group"):
        NodePopulation(layouts_h5, "", name)


def test_failed_construction_releases_file(layouts_h5: Path):
    with pytest.raises(SonataStructureError):
        NodePopulation(layouts_h5, "", "two_parts")
    # A leaked read-only handle would make a read-write reopen fail.
    with h5py.File(layouts_h5, "a") as fh:
        assert "nodes" in fh


def test_missing_population(nodes_h5: Path):
    with pytest.raises(SonataNotFoundError, match="No such population: 'nope'"):
        NodePopulation(nodes_h5, "", "nope")


@pytest.mark.parametrize("name", ["default/0", "/nodes", ""])
def test_nested_population_name_is_not_found(nodes_h5: Path, name: str):
    with pytest.raises(SonataNotFoundError, match="No such population"):
        NodePopulation(nodes_h5, "", name)


def test_missing_kind_root(nodes_h5: Path):
    with pytest.raises(SonataStructureError):
        EdgePopulation(nodes_h5, "", "default")


def test_csv_path_rejected_before_open(tmp_path: Path):
    with pytest.raises(SonataUnsupportedError):
        NodePopulation(tmp_path / "does_not_exist.h5", "nodes.csv", "default")


def test_missing_file_is_io_error(tmp_path: Path):
    with pytest.raises(SonataIoError):
        NodePopulation(tmp_path / "does_not_exist.h5", "", "default")


def test_unknown_prefix(nodes_h5: Path):
    with pytest.raises(ValueError):
        Population(nodes_h5, "", "default", "synapse")


def test_empty_population(nodes_h5: Path):
    with NodePopulation(nodes_h5, None, "empty") as pop:
        assert pop.attribute_names == frozenset()
        assert pop.size == 0
        assert pop.describe().attribute_names == []


def test_edge_population_ignores_non_partition_groups(edges_h5: Path):
    with EdgePopulation(edges_h5, "", "default") as pop:
        assert pop.attribute_names == {"delay", "syn_type"}
        assert pop.size == 4
        assert pop.get_attribute("syn_type", Selection.from_values([1, 3])) == ["inh", "inh"]
        assert pop.get_attribute("delay", Selection([(0, 1), (2, 4)])).tolist() == [0.1, 0.3, 0.4]


def test_describe(nodes_h5: Path):
    with NodePopulation(nodes_h5, "", "default") as pop:
        info = pop.describe()
    assert info.name == "default"
    assert info.kind == "node"
    assert info.size == 10
    assert info.attribute_names == sorted(DEFAULT_ATTRIBUTES)
