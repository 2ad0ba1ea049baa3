"""
Chunked selection reader for attribute columns.

Overview
- read_selection(): Maps a Selection onto one positional read per range and gathers the
  rows in ascending index order. Output length is always ``selection.flat_size``.

Strategies (keyed by ElementLayout, derived from the column dtype)
- FIXED: fixed-size numpy dtypes. One destination array of ``flat_size`` rows is
  allocated up front; every range is read directly into it at the running offset.
- VARIABLE: variable-length strings, vlen sequences, object dtypes. A single range is
  read and returned as is; several ranges are read one by one and their rows appended to
  the result list in range order.

Column protocol
- ``layout``, ``dtype``, ``shape``, ``len()``, ``read(start, stop)`` and
  ``read_into(dest, start, stop, offset)``; sonata.io.h5.H5Column implements it over h5py.

Notes
- A failing range read aborts the whole call; nothing partial is returned.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

import h5py
import numpy as np

from sonata.core.errors import SelectionError
from sonata.core.selection import Selection

logger = logging.getLogger(__name__)


class ElementLayout(str, Enum):
    """Memory layout category of a column's element type."""

    FIXED = "fixed"
    VARIABLE = "variable"


def element_layout(dtype: np.dtype) -> ElementLayout:
    """
    Classify a dataset dtype.

    Args:
        dtype (np.dtype): Dataset dtype as reported by h5py.

    Returns:
        ElementLayout: FIXED for numeric, boolean, compound and fixed-length string dtypes;
        VARIABLE for variable-length strings, vlen sequences and object dtypes.
    """
    string_info = h5py.check_string_dtype(dtype)
    if string_info is not None:
        return ElementLayout.FIXED if string_info.length is not None else ElementLayout.VARIABLE
    if h5py.check_vlen_dtype(dtype) is not None or dtype.hasobject:
        return ElementLayout.VARIABLE
    return ElementLayout.FIXED


def _read_bulk(column: Any, selection: Selection) -> np.ndarray:
    result = np.empty((selection.flat_size, *column.shape[1:]), dtype=column.dtype)
    offset = 0
    for r in selection.ranges:
        column.read_into(result, r.first, r.last, offset)
        offset += len(r)
    return result


def _read_general(column: Any, selection: Selection) -> list[Any]:
    ranges = selection.ranges
    if len(ranges) == 1:
        return column.read(ranges[0].first, ranges[0].last)

    result: list[Any] = []
    for r in ranges:
        result.extend(column.read(r.first, r.last))
    return result


_READERS: dict[ElementLayout, Callable[[Any, Selection], Any]] = {
    ElementLayout.FIXED: _read_bulk,
    ElementLayout.VARIABLE: _read_general,
}


def read_selection(column: Any, selection: Selection) -> np.ndarray | list[Any]:
    """
    Read the selected rows of a column.

    Args:
        column: Column implementing the reader protocol (see module notes), typically
            sonata.io.h5.H5Column.
        selection (Selection): Rows to read.

    Returns:
        np.ndarray | list[Any]: numpy array for FIXED columns (shape
        ``(flat_size, *row_shape)``), list for VARIABLE columns; rows in ascending order.

    Raises:
        SelectionError: If the selection reaches past the end of the column.
        sonata.core.errors.SonataIoError: If any range read fails.
    """
    if selection.ranges and selection.ranges[-1].last > len(column):
        raise SelectionError(
            f"selection ends at row {selection.ranges[-1].last} but {column.name} has {len(column)} rows"
        )
    layout = column.layout
    logger.debug(
        "reading %s: layout=%s ranges=%d rows=%d",
        column.name,
        layout.value,
        len(selection.ranges),
        selection.flat_size,
    )
    return _READERS[layout](column, selection)
