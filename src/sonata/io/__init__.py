"""
sonata.io — Read-only IO layer for SONATA-style population files (HDF5).

## Responsibilities
- Open node/edge files read-only and enumerate their populations (NodeStorage, EdgeStorage).
- Validate each population's layout once at open time: exactly one partition, named "0".
- Read attribute columns for a Selection with one positional read per range, placing
  fixed-size rows directly into a pre-allocated numpy array and appending
  variable-length rows range by range.

## Public API
- ReaderSettings — File open options (driver, chunk cache, locking, log level).
- NodeStorage / EdgeStorage — Population listing and opening for /nodes and /edges.
- NodePopulation / EdgePopulation — Attribute names, get_attribute(), get_attributes().
- read_selection — The chunked reader, usable on any column implementing its protocol.

## Import DAG discipline
- Depends only on stdlib, h5py/numpy, polars, and sonata.core.*.

## Examples
```python
from sonata.core import Selection
from sonata.io import NodeStorage

with NodeStorage("nodes.h5") as storage:  # doctest: +SKIP
    with storage.open_population("default") as pop:  # doctest: +SKIP
        pop.get_attribute("x", Selection.from_values([0, 1, 5]))  # doctest: +SKIP
```

## Notes
- No write path and no row caching across calls.
- The legacy CSV companion format is rejected with SonataUnsupportedError.
"""

from __future__ import annotations

from .config import ReaderSettings
from .population import EdgePopulation, NodePopulation, Population
from .reader import ElementLayout, element_layout, read_selection
from .storage import EdgeStorage, NodeStorage, PopulationStorage, storage_for_kind

__all__ = [
    "ReaderSettings",
    "Population",
    "NodePopulation",
    "EdgePopulation",
    "PopulationStorage",
    "NodeStorage",
    "EdgeStorage",
    "storage_for_kind",
    "ElementLayout",
    "element_layout",
    "read_selection",
]
