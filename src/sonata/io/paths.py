"""
Path and layout helpers for sonata.io.

Overview (HDF5 group layout)
- /<prefix>s                                   kind root ("/nodes", "/edges")
- /<prefix>s/<population>                      population root
- /<prefix>s/<population>/<partition>          partition group (only "0" is supported)
- /<prefix>s/<population>/<partition>/<name>   attribute dataset

Source of truth
- Prefixes and the partition discriminator come from sonata.core.constants.

Import DAG discipline
- stdlib + sonata.core only. No h5py; these helpers build strings only.
"""

from __future__ import annotations

import posixpath
import re
from typing import Final

from sonata.core.constants import PARTITION_ID, POPULATION_PREFIXES

_PARTITION_RE: Final[re.Pattern[str]] = re.compile(r"^[0-9]+$")


def _check_prefix(prefix: str) -> str:
    if prefix not in POPULATION_PREFIXES:
        raise ValueError(f"prefix must be one of {sorted(POPULATION_PREFIXES)!r}; got {prefix!r}")
    return prefix


def _check_name(name: str, what: str) -> str:
    if not name or "/" in name:
        raise ValueError(f"{what} must be a non-empty name without '/'; got {name!r}")
    return name


def kind_root_path(prefix: str) -> str:
    """
    Kind root group path.

    Args:
        prefix (str): "node" or "edge".

    Returns:
        str: "/nodes" or "/edges".

    Raises:
        ValueError: If prefix is unknown.
    """
    return f"/{_check_prefix(prefix)}s"


def population_path(prefix: str, name: str) -> str:
    """
    Population root group path.

    Returns:
        str: Path "/<prefix>s/<name>".
    """
    return posixpath.join(kind_root_path(prefix), _check_name(name, "population"))


def partition_path(prefix: str, name: str, partition: str = PARTITION_ID) -> str:
    """
    Partition group path (defaults to the single supported partition "0").

    Returns:
        str: Path "/<prefix>s/<name>/<partition>".
    """
    return posixpath.join(population_path(prefix, name), _check_name(partition, "partition"))


def attribute_path(prefix: str, name: str, attribute: str, partition: str = PARTITION_ID) -> str:
    """
    Attribute dataset path under a partition.

    Returns:
        str: Path "/<prefix>s/<name>/<partition>/<attribute>".
    """
    return posixpath.join(partition_path(prefix, name, partition), _check_name(attribute, "attribute"))


def is_partition_name(name: str) -> bool:
    """
    Check whether a child group name is a partition id (decimal digits, e.g. "0", "12").

    Args:
        name (str): Child name under a population root.

    Returns:
        bool: True for partition ids. Other children (e.g. "indices") are not partitions.
    """
    return bool(_PARTITION_RE.match(name))
