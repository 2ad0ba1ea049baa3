"""
Exception types raised by sonata.

Provides a single domain base class carrying a human-readable message, plus one
subclass per failure kind:
- SonataStructureError for files whose group layout breaks a structural rule
  (partition layout, missing kind root, attribute entry that is not a dataset).
- SonataNotFoundError for unknown population or attribute names.
- SonataUnsupportedError for recognized but unimplemented capabilities (CSV).
- SonataIoError for failures reported by the HDF5 container (open, positional read).
- SelectionError for Range/Selection invariant violations.

Notes:
    - Callers distinguish cases by type or message only; there are no error codes.
    - This module uses only the Python standard library and has no side effects.

Examples:
    >>> from sonata.core.errors import SonataError, SonataNotFoundError
    >>> try:
    ...     raise SonataNotFoundError("No such population: 'missing'")
    ... except SonataError as e:
    ...     msg = str(e)
    >>> msg
    "No such population: 'missing'"
"""

from __future__ import annotations

__all__ = [
    "SonataError",
    "SonataStructureError",
    "SonataNotFoundError",
    "SonataUnsupportedError",
    "SonataIoError",
    "SelectionError",
]


class SonataError(Exception):
    """Base class for all sonata errors."""


class SonataStructureError(SonataError):
    """File layout does not match the population storage rules."""


class SonataNotFoundError(SonataError, KeyError):
    """
    Requested population or attribute does not exist.

    Notes:
        Also a KeyError so mapping-style callers can catch it; ``str()`` keeps the
        plain message instead of KeyError's quoted repr.
    """

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class SonataUnsupportedError(SonataError):
    """Recognized but unimplemented capability was requested."""


class SonataIoError(SonataError):
    """The HDF5 container failed to open a file or read a range."""


class SelectionError(SonataError, ValueError):
    """Range or Selection invariant violation (empty range, unsorted/overlapping ranges)."""
