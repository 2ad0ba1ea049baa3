"""
Typed summary models for populations and population storages.

Provides pydantic models describing what a file holds without reading any rows:
- PopulationInfo: one population (kind, row count, attribute names).
- StorageInfo: one HDF5 file viewed through a node or edge storage.

Notes:
    - Zero-IO (stdlib + pydantic only); sonata.io fills these in via describe().
    - Field names are lower_snake; attribute names are kept verbatim and sorted.

Examples:
    >>> from sonata.core.schema import PopulationInfo
    >>> PopulationInfo(name="default", kind="node", size=3, attribute_names=["x", "model_type"])
    PopulationInfo(name='default', kind='node', size=3, attribute_names=['model_type', 'x'])
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import POPULATION_PREFIXES

__all__ = [
    "PopulationInfo",
    "StorageInfo",
]


def _check_kind(value: str) -> str:
    if value not in POPULATION_PREFIXES:
        raise ValueError(f"kind must be one of {sorted(POPULATION_PREFIXES)!r}; got {value!r}")
    return value


class PopulationInfo(BaseModel):
    """
    Summary of one population.

    Attributes:
        name (str): Population name (child group of /nodes or /edges).
        kind (str): "node" or "edge".
        size (int): Number of rows in the population's attribute columns (>= 0).
        attribute_names (list[str]): Entries of partition "0", sorted.

    Raises:
        pydantic.ValidationError: If kind is unknown or size is negative.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    kind: str
    size: int = Field(..., ge=0)
    attribute_names: list[str] = Field(default_factory=list)

    @field_validator("kind")
    @classmethod
    def _kind_is_known(cls, v: str) -> str:
        return _check_kind(v)

    @field_validator("attribute_names")
    @classmethod
    def _sorted_names(cls, v: list[str]) -> list[str]:
        return sorted(v)


class StorageInfo(BaseModel):
    """
    Summary of one HDF5 file seen through a node or edge storage.

    Attributes:
        h5_path (str): Path of the HDF5 file.
        kind (str): "node" or "edge".
        populations (list[PopulationInfo]): One entry per population, ordered by name.
    """

    model_config = ConfigDict(extra="forbid")

    h5_path: str
    kind: str
    populations: list[PopulationInfo] = Field(default_factory=list)

    @field_validator("kind")
    @classmethod
    def _kind_is_known(cls, v: str) -> str:
        return _check_kind(v)
