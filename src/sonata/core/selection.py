"""
Range-compressed row selections.

A Selection is the canonical encoding of an ascending, duplicate-free set of row
indices as a tuple of half-open ranges ``[first, last)``. Ranges are sorted,
non-overlapping and maximally merged: ``ranges[i].last < ranges[i + 1].first`` always
holds, so two adjacent ranges never coexist.

Notes:
    - Zero-IO; depends on stdlib and numpy (for flatten()).
    - Selections are immutable once built. flat_size is computed once and cached.
    - Selection.from_values() does not sort or deduplicate its input. Unsorted or
      duplicated values yield ranges that fail the structural checks and raise
      SelectionError.

Examples:
    >>> from sonata.core.selection import Selection
    >>> Selection.from_values([1, 2, 4, 5, 7]).ranges
    (Range(first=1, last=3), Range(first=4, last=6), Range(first=7, last=8))
    >>> Selection.from_values([1, 2, 4, 5, 7]).flat_size
    5
    >>> Selection([(0, 2), (10, 12)]).flatten().tolist()
    [0, 1, 10, 11]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from functools import cached_property

import numpy as np

from .errors import SelectionError

__all__ = [
    "Range",
    "Selection",
]


@dataclass(frozen=True, slots=True)
class Range:
    """
    Half-open interval of row indices.

    Attributes:
        first (int): First index included (>= 0).
        last (int): One past the last index included (> first).

    Raises:
        SelectionError: If first < 0 or last <= first.
    """

    first: int
    last: int

    def __post_init__(self) -> None:
        if self.first < 0:
            raise SelectionError(f"range start must be >= 0; got {self.first}")
        if self.last <= self.first:
            raise SelectionError(f"empty range [{self.first}, {self.last})")

    def __len__(self) -> int:
        return self.last - self.first

    def __iter__(self) -> Iterator[int]:
        # Unpacks as a (first, last) pair, matching the explicit-range representation.
        yield self.first
        yield self.last


def _as_range(value: Range | tuple[int, int]) -> Range:
    if isinstance(value, Range):
        return value
    first, last = value
    return Range(int(first), int(last))


@dataclass(frozen=True)
class Selection:
    """
    Immutable, ordered set of row ranges.

    Attributes:
        ranges (tuple[Range, ...]): Sorted, non-overlapping, non-adjacent ranges.
            Explicit ``(start, end)`` pairs are accepted and converted to Range.

    Raises:
        SelectionError: If a range is empty, or ranges are unsorted, overlapping or
            adjacent (adjacent ranges must be merged by the caller).

    Notes:
        Equality is structural (same ordered range sequence).
    """

    ranges: tuple[Range, ...] = field(default=())

    def __post_init__(self) -> None:
        ranges = tuple(_as_range(r) for r in self.ranges)
        for prev, curr in zip(ranges, ranges[1:]):
            if prev.last >= curr.first:
                raise SelectionError(
                    f"ranges must be sorted, disjoint and non-adjacent: "
                    f"[{prev.first}, {prev.last}) then [{curr.first}, {curr.last})"
                )
        object.__setattr__(self, "ranges", ranges)

    @classmethod
    def from_values(cls, values: Iterable[int]) -> Selection:
        """
        Build a Selection from ascending, duplicate-free row indices.

        Args:
            values (Iterable[int]): Row indices in ascending order without duplicates
                (lists, ranges, numpy integer arrays).

        Returns:
            Selection: Range-compressed selection with flat_size == number of values.

        Raises:
            SelectionError: If the input was not ascending/unique (detected through the
                resulting ranges) or contains negative values.
        """
        ranges: list[Range] = []
        first, last = 0, 0
        for value in values:
            x = int(value)
            if x == last:
                last = x + 1
                continue
            if first < last:
                ranges.append(Range(first, last))
            first, last = x, x + 1
        if first < last:
            ranges.append(Range(first, last))
        return cls(tuple(ranges))

    @cached_property
    def flat_size(self) -> int:
        """Total number of row indices covered by the selection."""
        return sum(len(r) for r in self.ranges)

    def flatten(self) -> np.ndarray:
        """Expand the selection into an ascending int64 array of row indices."""
        if not self.ranges:
            return np.empty(0, dtype=np.int64)
        return np.concatenate([np.arange(r.first, r.last, dtype=np.int64) for r in self.ranges])
