"""
Population accessor for sonata.io.

Provides Population, a read-only view over one named population of a node or edge file,
with NodePopulation/EdgePopulation fixing the prefix. A population is validated once at
construction:
- the population root ``/<prefix>s/<name>`` must exist,
- it must hold exactly one partition (child group named by decimal digits), and that
  partition must be ``PARTITION_ID`` ("0").
The entries of partition "0" are then cached as the population's attribute names.

Source of truth
- Layout strings: sonata.io.paths; prefixes/partition id: sonata.core.constants.
- Summary models: sonata.core.schema.PopulationInfo.

Import DAG discipline
- Depends on stdlib, h5py, polars, and sonata.core / sonata.io helpers.

Notes
- Each instance owns its own read-only h5py.File; opening the same population twice
  yields two independent instances and two handles.
- attribute_names is a snapshot; later changes to the file are not observed.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from typing import Any, ClassVar

import h5py
import numpy as np
import polars as pl

from sonata.core.constants import EDGE_PREFIX, NODE_PREFIX, PARTITION_ID
from sonata.core.errors import (
    SonataNotFoundError,
    SonataStructureError,
    SonataUnsupportedError,
)
from sonata.core.schema import PopulationInfo
from sonata.core.selection import Selection

from .config import ReaderSettings
from .h5 import H5Column, get_group, list_children, open_file
from .paths import is_partition_name, kind_root_path, population_path
from .reader import read_selection

logger = logging.getLogger(__name__)

CSV_UNSUPPORTED = "CSV not supported at the moment"


def check_csv_path(csv_path: str | os.PathLike[str] | None) -> None:
    """
    Reject the legacy CSV companion file.

    Raises:
        SonataUnsupportedError: If csv_path is non-empty.
    """
    if csv_path:
        raise SonataUnsupportedError(CSV_UNSUPPORTED)


class Population:
    """
    Read-only accessor over one population.

    Args:
        h5_path: Path of the HDF5 file.
        csv_path: Legacy CSV companion path; must be empty.
        name (str): Population name (child group of the kind root).
        prefix (str): "node" or "edge".
        settings (ReaderSettings | None): File open options.

    Raises:
        SonataUnsupportedError: csv_path is non-empty.
        SonataIoError: The file cannot be opened.
        SonataNotFoundError: No population ``name`` under the kind root.
        SonataStructureError: Kind root missing, or partition layout other than a single "0".
    """

    H5_PREFIX: ClassVar[str]

    def __init__(
        self,
        h5_path: str | os.PathLike[str],
        csv_path: str | os.PathLike[str] | None,
        name: str,
        prefix: str,
        *,
        settings: ReaderSettings | None = None,
    ) -> None:
        check_csv_path(csv_path)
        self._name = name
        self._prefix = prefix
        self._h5_path = os.fspath(h5_path)
        self._settings = settings or ReaderSettings()
        # Validate the layout strings before touching the file. Only the name can fail
        # population_path once the prefix is known.
        kind_root_path(prefix)
        try:
            root_path = population_path(prefix, name)
        except ValueError:
            raise SonataNotFoundError(f"No such population: '{name}'") from None

        self._file = open_file(self._h5_path, self._settings)
        try:
            self._root, self._partition = self._open_root(root_path)
            self._attribute_names = frozenset(list_children(self._partition))
        except BaseException:
            self._file.close()
            raise
        logger.debug(
            "opened population %s (%d attributes)", root_path, len(self._attribute_names)
        )

    def _open_root(self, root_path: str) -> tuple[h5py.Group, h5py.Group]:
        if get_group(self._file, kind_root_path(self._prefix)) is None:
            raise SonataStructureError(
                f"{self._h5_path!r} has no {kind_root_path(self._prefix)!r} group"
            )
        root = get_group(self._file, root_path)
        if root is None:
            raise SonataNotFoundError(f"No such population: '{self._name}'")
        partitions = {n for n in list_children(root, groups_only=True) if is_partition_name(n)}
        if partitions != {PARTITION_ID}:
            raise SonataStructureError("Only single-group populations are supported at the moment")
        return root, root[PARTITION_ID]

    # ---------------------------------------------------------------------
    # Identity
    # ---------------------------------------------------------------------
    @property
    def name(self) -> str:
        return self._name

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def h5_path(self) -> str:
        return self._h5_path

    @property
    def attribute_names(self) -> frozenset[str]:
        """Entry names of partition "0", captured at construction."""
        return self._attribute_names

    @property
    def size(self) -> int:
        """
        Number of rows in the population's attribute columns.

        Notes:
            Taken from the first attribute dataset in name order; 0 when partition "0"
            holds no datasets.
        """
        for attr in sorted(self._attribute_names):
            obj = self._partition.get(attr)
            if isinstance(obj, h5py.Dataset):
                return len(H5Column(obj))
        return 0

    # ---------------------------------------------------------------------
    # Read
    # ---------------------------------------------------------------------
    def _column(self, name: str) -> H5Column:
        if name not in self._attribute_names:
            raise SonataNotFoundError(f"No such attribute: '{name}'")
        obj = self._partition.get(name)
        if not isinstance(obj, h5py.Dataset):
            raise SonataStructureError(
                f"attribute '{name}' of population '{self._name}' is not a dataset"
            )
        return H5Column(obj)

    def get_attribute(self, name: str, selection: Selection) -> np.ndarray | list[Any]:
        """
        Read one attribute for the selected rows.

        Args:
            name (str): Attribute name (must be in attribute_names).
            selection (Selection): Rows to read.

        Returns:
            np.ndarray | list[Any]: numpy array for fixed-size element types, list for
            variable-length ones (strings decoded to str); ``selection.flat_size`` rows
            in ascending row order.

        Raises:
            SonataNotFoundError: Unknown attribute name.
            SonataStructureError: The attribute entry is a group, not a dataset.
            sonata.core.errors.SelectionError: Selection past the end of the column.
            sonata.core.errors.SonataIoError: A range read failed.
        """
        return read_selection(self._column(name), selection)

    def get_attributes(self, names: Sequence[str], selection: Selection) -> pl.DataFrame:
        """
        Read several attributes for the same rows into a Polars DataFrame.

        Args:
            names (Sequence[str]): Attribute names; column order follows this sequence.
            selection (Selection): Rows to read.

        Returns:
            pl.DataFrame: One column per attribute, ``selection.flat_size`` rows.

        Raises:
            Same as get_attribute(), for the first failing attribute.
        """
        columns = [pl.Series(name, self.get_attribute(name, selection)) for name in names]
        return pl.DataFrame(columns)

    def describe(self) -> PopulationInfo:
        """Summarize this population as a PopulationInfo model."""
        return PopulationInfo(
            name=self._name,
            kind=self._prefix,
            size=self.size,
            attribute_names=list(self._attribute_names),
        )

    # ---------------------------------------------------------------------
    # Lifetime
    # ---------------------------------------------------------------------
    def close(self) -> None:
        """Close the underlying file handle."""
        self._file.close()

    def __enter__(self) -> Population:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, h5_path={self._h5_path!r})"


class NodePopulation(Population):
    """Population stored under /nodes."""

    H5_PREFIX: ClassVar[str] = NODE_PREFIX

    def __init__(
        self,
        h5_path: str | os.PathLike[str],
        csv_path: str | os.PathLike[str] | None,
        name: str,
        *,
        settings: ReaderSettings | None = None,
    ) -> None:
        super().__init__(h5_path, csv_path, name, self.H5_PREFIX, settings=settings)


class EdgePopulation(Population):
    """Population stored under /edges."""

    H5_PREFIX: ClassVar[str] = EDGE_PREFIX

    def __init__(
        self,
        h5_path: str | os.PathLike[str],
        csv_path: str | os.PathLike[str] | None,
        name: str,
        *,
        settings: ReaderSettings | None = None,
    ) -> None:
        super().__init__(h5_path, csv_path, name, self.H5_PREFIX, settings=settings)
