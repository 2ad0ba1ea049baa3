"""
Sonata core layout constants.

Defines the population kinds, the partition discriminator, and the reader defaults
consumed by the IO layer. This module is zero-IO and uses only the Python standard
library.

Notes:
    - Storage layout is ``/<prefix>s/<population>/<partition>/<attribute>``.
    - Only the partition named ``PARTITION_ID`` is supported; a population holding any
      other partition layout is rejected at open time.
    - Reader defaults are forwarded to h5py.File by sonata.io.config.ReaderSettings.
"""

from __future__ import annotations

__all__ = [
    "NODE_PREFIX",
    "EDGE_PREFIX",
    "POPULATION_PREFIXES",
    "PARTITION_ID",
    "RDCC_NBYTES",
    "RDCC_NSLOTS",
    "LOG_LEVEL",
]

# Entity kinds; the kind root group is the plural ("/nodes", "/edges").
NODE_PREFIX: str = "node"
EDGE_PREFIX: str = "edge"
POPULATION_PREFIXES: frozenset[str] = frozenset({NODE_PREFIX, EDGE_PREFIX})

# The single supported partition. Reserved for future multi-partition populations.
PARTITION_ID: str = "0"

# HDF5 raw data chunk cache defaults (h5py.File rdcc_nbytes / rdcc_nslots).
RDCC_NBYTES: int = 1024 * 1024
RDCC_NSLOTS: int = 521

LOG_LEVEL: str = "WARNING"
