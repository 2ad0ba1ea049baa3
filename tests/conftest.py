from __future__ import annotations

from pathlib import Path

import h5py
import numpy as np
import pytest

N_NODES = 10


def _write_default_nodes(fh: h5py.File, name: str = "default") -> None:
    grp = fh.create_group(f"nodes/{name}/0")
    grp.create_dataset("x", data=np.arange(N_NODES, dtype=np.float64) * 0.5)
    grp.create_dataset("mtype", data=np.arange(100, 100 + N_NODES, dtype=np.int32))
    grp.create_dataset(
        "model_type",
        data=[f"model_{i}" for i in range(N_NODES)],
        dtype=h5py.string_dtype(),
    )
    vlen = grp.create_dataset("afferent", (N_NODES,), dtype=h5py.vlen_dtype(np.int64))
    for i in range(N_NODES):
        vlen[i] = np.arange(i % 3 + 1, dtype=np.int64) + i
    grp.create_group("dynamics_params")
    # Non-partition sibling groups are ignored by the partition check.
    fh.create_group(f"nodes/{name}/indices")


@pytest.fixture
def nodes_h5(tmp_path: Path) -> Path:
    """Node file with two well-formed populations: "default" (10 rows) and "empty"."""
    path = tmp_path / "nodes.h5"
    with h5py.File(path, "w") as fh:
        _write_default_nodes(fh)
        fh.create_group("nodes/empty/0")
    return path


@pytest.fixture
def layouts_h5(tmp_path: Path) -> Path:
    """Node file mixing a valid population with unsupported partition layouts."""
    path = tmp_path / "layouts.h5"
    with h5py.File(path, "w") as fh:
        _write_default_nodes(fh)
        fh.create_group("nodes/two_parts/0")
        fh.create_group("nodes/two_parts/1")
        fh.create_group("nodes/only_one/1")
        fh.create_group("nodes/no_partition")
    return path


@pytest.fixture
def edges_h5(tmp_path: Path) -> Path:
    """Edge file with one population; source/target ids sit next to partition "0"."""
    path = tmp_path / "edges.h5"
    with h5py.File(path, "w") as fh:
        pop = fh.create_group("edges/default")
        pop.create_dataset("source_node_id", data=np.array([0, 0, 1, 2], dtype=np.uint64))
        pop.create_dataset("target_node_id", data=np.array([1, 2, 2, 0], dtype=np.uint64))
        pop.create_group("indices/source_to_target")
        grp = pop.create_group("0")
        grp.create_dataset("delay", data=np.array([0.1, 0.2, 0.3, 0.4]))
        grp.create_dataset("syn_type", data=["exc", "inh", "exc", "inh"], dtype=h5py.string_dtype())
    return path
