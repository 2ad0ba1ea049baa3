"""
Configuration for the sonata.io module.

Defines ReaderSettings, a frozen dataclass carrying runtime configuration for opening
HDF5 files read-only. Defaults are sourced from sonata.core.constants (the single source
of truth).

Source of truth
- sonata.core.constants.RDCC_NBYTES, RDCC_NSLOTS, LOG_LEVEL

Import DAG discipline
- Depends only on stdlib and sonata.core.constants.

Notes
- Settings only tune how files are opened (driver, chunk cache, locking); they never
  relax the structural rules enforced by Population/PopulationStorage.
- Precedence when loading: env > TOML > defaults.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from sonata.core.constants import LOG_LEVEL as CORE_LOG_LEVEL
from sonata.core.constants import RDCC_NBYTES as CORE_RDCC_NBYTES
from sonata.core.constants import RDCC_NSLOTS as CORE_RDCC_NSLOTS

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


@dataclass(frozen=True)
class ReaderSettings:
    """
    Runtime settings for opening population files.

    Attributes:
        driver (str | None): h5py low-level file driver (None = library default, "sec2").
        rdcc_nbytes (int): Raw data chunk cache size in bytes per open dataset.
        rdcc_nslots (int): Number of chunk slots in the raw data chunk cache.
        locking (bool | None): HDF5 file locking; None keeps the library default.
        log_level (str): Logging level name applied by the CLI.

    Examples:
        >>> from sonata.io import ReaderSettings
        >>> ReaderSettings(rdcc_nbytes=4 * 1024 * 1024).h5_open_kwargs()["rdcc_nbytes"]
        4194304
    """

    driver: str | None = None
    rdcc_nbytes: int = CORE_RDCC_NBYTES
    rdcc_nslots: int = CORE_RDCC_NSLOTS
    locking: bool | None = None
    log_level: str = CORE_LOG_LEVEL

    def h5_open_kwargs(self) -> dict[str, Any]:
        """
        Keyword arguments for h5py.File(path, "r", **kwargs).

        Returns:
            dict[str, Any]: driver/rdcc_* always; locking only when set explicitly.
        """
        kwargs: dict[str, Any] = {
            "driver": self.driver,
            "rdcc_nbytes": self.rdcc_nbytes,
            "rdcc_nslots": self.rdcc_nslots,
        }
        if self.locking is not None:
            kwargs["locking"] = self.locking
        return kwargs

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: ReaderSettings, cfg: dict[str, Any] | None) -> ReaderSettings:
        """Apply a loose config mapping onto ReaderSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        # driver ("" or "default" resets to the library default)
        if "driver" in cfg and isinstance(cfg["driver"], str):
            drv = cfg["driver"].strip()
            s = replace(s, driver=None if drv in ("", "default") else drv)

        for key in ("rdcc_nbytes", "rdcc_nslots"):
            if key in cfg:
                try:
                    value = int(cfg[key])
                except (TypeError, ValueError):
                    continue
                if value >= 0:
                    s = replace(s, **{key: value})

        # locking: bool, or "auto"/"default" for the library default
        if "locking" in cfg:
            v = cfg["locking"]
            if isinstance(v, bool):
                s = replace(s, locking=v)
            elif isinstance(v, str):
                lo = v.strip().lower()
                if lo in _TRUE:
                    s = replace(s, locking=True)
                elif lo in _FALSE:
                    s = replace(s, locking=False)
                elif lo in ("auto", "default"):
                    s = replace(s, locking=None)

        if "log_level" in cfg and isinstance(cfg["log_level"], str):
            level = cfg["log_level"].strip().upper()
            if isinstance(logging.getLevelName(level), int):
                s = replace(s, log_level=level)

        return s

    @classmethod
    def from_env(
        cls, base: ReaderSettings | None = None, prefix: str = "SONATA_IO_"
    ) -> ReaderSettings:
        """
        Build ReaderSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - SONATA_IO_DRIVER
            - SONATA_IO_RDCC_NBYTES
            - SONATA_IO_RDCC_NSLOTS
            - SONATA_IO_LOCKING (1/0/true/false/yes/no/on/off/auto)
            - SONATA_IO_LOG_LEVEL
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in ("driver", "rdcc_nbytes", "rdcc_nslots", "locking", "log_level"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> ReaderSettings:
        """
        Build ReaderSettings from a TOML file.

        Search order when `path` is None:
            1) ./sonata.toml (with either top-level [io] or direct keys)
            2) ./pyproject.toml under [tool.sonata.io]

        Returns defaults if no file is present or none can be parsed.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "sonata.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("sonata", {}).get("io", {}) if isinstance(tool, dict) else None
            elif isinstance(data.get("io"), dict):
                cfg = data["io"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> ReaderSettings:
        """
        Load ReaderSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (sonata.toml, pyproject.toml).

        Returns:
            ReaderSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
