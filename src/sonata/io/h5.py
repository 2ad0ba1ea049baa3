"""
HDF5 container helpers for sonata.io (h5py baseline).

Responsibilities
- Open files read-only with ReaderSettings and surface container failures as SonataIoError.
- Resolve and enumerate groups (kind roots, population roots, partitions).
- Wrap attribute datasets in H5Column, the positional-read surface used by the chunked reader:
  ``read(start, stop)`` returns a fresh sequence, ``read_into(dest, start, stop, offset)``
  places rows directly into a pre-allocated array.

Source of truth
- Element layout categories (fixed vs variable) come from sonata.io.reader.element_layout.

Import DAG discipline
- h5py, numpy, and sonata.core only.

Notes
- All helpers are synchronous; callers own the file handle lifetime.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import h5py
import numpy as np

from sonata.core.errors import SonataIoError

from .config import ReaderSettings
from .reader import ElementLayout, element_layout

logger = logging.getLogger(__name__)


def open_file(path: str | os.PathLike[str], settings: ReaderSettings | None = None) -> h5py.File:
    """
    Open an HDF5 file read-only.

    Args:
        path: File path.
        settings (ReaderSettings | None): Driver/cache/locking options (defaults if None).

    Returns:
        h5py.File: Read-only file handle; the caller must close it.

    Raises:
        SonataIoError: If the file is missing, unreadable, or not HDF5.
    """
    settings = settings or ReaderSettings()
    try:
        fh = h5py.File(path, "r", **settings.h5_open_kwargs())
    except OSError as exc:
        raise SonataIoError(f"cannot open {os.fspath(path)!r}: {exc}") from exc
    logger.debug("opened %s (driver=%s)", os.fspath(path), fh.driver)
    return fh


def get_group(parent: h5py.Group, name: str) -> h5py.Group | None:
    """
    Return the child group ``name`` (or absolute path) of parent, or None.

    Notes:
        Returns None when the entry is missing or is a dataset.
    """
    obj = parent.get(name)
    return obj if isinstance(obj, h5py.Group) else None


def list_children(group: h5py.Group, *, groups_only: bool = False) -> set[str]:
    """
    Names of the immediate children of a group.

    Args:
        group (h5py.Group): Group to list.
        groups_only (bool): Keep only child groups (skip datasets).

    Returns:
        set[str]: Child names (no ordering guarantee).
    """
    if not groups_only:
        return set(group.keys())
    return {name for name, obj in group.items() if isinstance(obj, h5py.Group)}


class H5Column:
    """
    Positional-read view over one attribute dataset.

    Notes:
        Variable-length strings are decoded to str on read; other variable-length
        element types are returned as the per-row numpy arrays h5py produces.
    """

    def __init__(self, dataset: h5py.Dataset) -> None:
        self._dataset = dataset

    @property
    def name(self) -> str:
        return self._dataset.name

    @property
    def dtype(self) -> np.dtype:
        return self._dataset.dtype

    @property
    def shape(self) -> tuple[int, ...]:
        return self._dataset.shape

    @property
    def layout(self) -> ElementLayout:
        return element_layout(self.dtype)

    def __len__(self) -> int:
        return self._dataset.shape[0] if self._dataset.shape else 0

    def read(self, start: int, stop: int) -> list[Any]:
        """Read rows [start, stop) into a new list."""
        try:
            if h5py.check_string_dtype(self.dtype) is not None:
                return self._dataset.asstr()[start:stop].tolist()
            return list(self._dataset[start:stop])
        except OSError as exc:
            raise SonataIoError(f"failed to read {self.name}[{start}:{stop}]: {exc}") from exc

    def read_into(self, dest: np.ndarray, start: int, stop: int, offset: int) -> None:
        """Read rows [start, stop) directly into dest[offset:offset + (stop - start)]."""
        try:
            self._dataset.read_direct(
                dest,
                source_sel=np.s_[start:stop],
                dest_sel=np.s_[offset : offset + (stop - start)],
            )
        except OSError as exc:
            raise SonataIoError(f"failed to read {self.name}[{start}:{stop}]: {exc}") from exc
