"""
Population storage facade for sonata.io.

Provides PopulationStorage, bound to one HDF5 file and one entity kind, which lists the
populations under the kind root and opens them by name. NodeStorage and EdgeStorage bind
the kind to NodePopulation (/nodes) and EdgePopulation (/edges).

Source of truth
- Kind root paths: sonata.io.paths; prefixes: sonata.core.constants.
- Summary models: sonata.core.schema.StorageInfo.

Notes
- The legacy CSV companion path is validated before the file is opened and always
  rejected when non-empty.
- Populations are not cached: each open_population() call builds a new instance that
  re-validates its partition layout and opens its own file handle.
"""

from __future__ import annotations

import logging
import os
from typing import Any, ClassVar, Generic, TypeVar

from sonata.core.errors import SonataNotFoundError, SonataStructureError
from sonata.core.schema import StorageInfo

from .config import ReaderSettings
from .h5 import get_group, list_children, open_file
from .paths import kind_root_path
from .population import EdgePopulation, NodePopulation, Population, check_csv_path

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=Population)


class PopulationStorage(Generic[P]):
    """
    Read-only view over all populations of one kind in an HDF5 file.

    Subclasses set ``population_cls`` (whose ``H5_PREFIX`` selects /nodes or /edges).

    Args:
        h5_path: Path of the HDF5 file.
        csv_path: Legacy CSV companion path; must be empty.
        settings (ReaderSettings | None): File open options, forwarded to populations.

    Raises:
        SonataUnsupportedError: csv_path is non-empty (checked before any file access).
        SonataIoError: The file cannot be opened.
        SonataStructureError: The file has no kind root group.
    """

    population_cls: ClassVar[type[Population]]

    def __init__(
        self,
        h5_path: str | os.PathLike[str],
        csv_path: str | os.PathLike[str] | None = "",
        *,
        settings: ReaderSettings | None = None,
    ) -> None:
        check_csv_path(csv_path)
        self._h5_path = os.fspath(h5_path)
        self._csv_path = os.fspath(csv_path) if csv_path else ""
        self._settings = settings or ReaderSettings()

        self._file = open_file(self._h5_path, self._settings)
        root = get_group(self._file, kind_root_path(self.prefix))
        if root is None:
            self._file.close()
            raise SonataStructureError(
                f"{self._h5_path!r} has no {kind_root_path(self.prefix)!r} group"
            )
        self._root = root

    @property
    def prefix(self) -> str:
        return self.population_cls.H5_PREFIX

    @property
    def h5_path(self) -> str:
        return self._h5_path

    @property
    def settings(self) -> ReaderSettings:
        return self._settings

    @property
    def population_names(self) -> set[str]:
        """Names of the population groups under the kind root (unordered)."""
        return list_children(self._root, groups_only=True)

    def open_population(self, name: str) -> P:
        """
        Open a population by name.

        Args:
            name (str): Population name.

        Returns:
            P: A new, independently-owned population instance.

        Raises:
            SonataNotFoundError: No population group ``name`` under the kind root.
            SonataStructureError: The population's partition layout is unsupported.
        """
        if name not in self.population_names:
            raise SonataNotFoundError(f"No such population: '{name}'")
        logger.debug("opening %s population %r from %s", self.prefix, name, self._h5_path)
        return self.population_cls(  # type: ignore[return-value]
            self._h5_path, self._csv_path, name, settings=self._settings
        )

    def describe(self) -> StorageInfo:
        """
        Summarize every population of this storage.

        Returns:
            StorageInfo: Populations ordered by name.

        Raises:
            SonataStructureError: A population has an unsupported partition layout.
        """
        infos = []
        for name in sorted(self.population_names):
            with self.open_population(name) as pop:
                infos.append(pop.describe())
        return StorageInfo(h5_path=self._h5_path, kind=self.prefix, populations=infos)

    def close(self) -> None:
        """Close the underlying file handle."""
        self._file.close()

    def __enter__(self) -> PopulationStorage[P]:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class NodeStorage(PopulationStorage[NodePopulation]):
    """Populations stored under /nodes."""

    population_cls = NodePopulation


class EdgeStorage(PopulationStorage[EdgePopulation]):
    """Populations stored under /edges."""

    population_cls = EdgePopulation


def storage_for_kind(kind: str) -> type[PopulationStorage[Any]]:
    """
    Storage class for a population kind.

    Args:
        kind (str): "node" or "edge".

    Returns:
        type[PopulationStorage]: NodeStorage or EdgeStorage.

    Raises:
        ValueError: If kind is unknown.
    """
    for cls in (NodeStorage, EdgeStorage):
        if cls.population_cls.H5_PREFIX == kind:
            return cls
    raise ValueError(f"kind must be 'node' or 'edge'; got {kind!r}")
