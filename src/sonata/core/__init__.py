"""
Core package for sonata contracts (selections, errors, layout constants, summary models).

## Contracts (single source of truth)
- Selection — range-compressed row selections (Range, Selection).
- Errors — SonataError and its kinds (structure, not-found, unsupported, IO, selection).
- Constants — population prefixes, the partition discriminator, reader defaults.
- Schema — pydantic summaries (PopulationInfo, StorageInfo).

## Notes
- Zero-IO policy: stdlib + numpy + pydantic only; never imports h5py or polars.

## Downstream usage
- sonata.io — reads attribute columns for a Selection and raises core errors.
- sonata.cli — prints StorageInfo summaries and frames built from selections.

## Examples
```python
from sonata.core import Selection
sel = Selection.from_values([0, 1, 2, 10])
sel.ranges  # (Range(first=0, last=3), Range(first=10, last=11))
sel.flat_size  # 4
```
"""

from __future__ import annotations

from .errors import (
    SelectionError,
    SonataError,
    SonataIoError,
    SonataNotFoundError,
    SonataStructureError,
    SonataUnsupportedError,
)
from .schema import PopulationInfo, StorageInfo
from .selection import Range, Selection

__all__ = [
    "Range",
    "Selection",
    "PopulationInfo",
    "StorageInfo",
    "SonataError",
    "SonataStructureError",
    "SonataNotFoundError",
    "SonataUnsupportedError",
    "SonataIoError",
    "SelectionError",
]
