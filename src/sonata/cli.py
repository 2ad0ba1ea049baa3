from __future__ import annotations

import argparse
import logging
import re
import sys
from typing import Any

import polars as pl

from sonata.core.errors import SonataError
from sonata.core.selection import Selection
from sonata.io.config import ReaderSettings
from sonata.io.storage import storage_for_kind


def _configure_logging(settings: ReaderSettings, level: str | None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


_IDS_RE = re.compile(r"^(\d+)(?:\s*-\s*(\d+))?$", re.ASCII)


def _parse_ids(text: str) -> list[int]:
    """
    Parse "0,1,5-9" into ascending unique row ids (ranges are inclusive).

    Raises:
        ValueError: On a non-numeric or negative id, or a range whose end precedes its start.
    """
    ids: set[int] = set()
    for raw in text.split(","):
        part = raw.strip()
        if not part:
            continue
        m = _IDS_RE.match(part)
        if m is None:
            raise ValueError(f"invalid row id or range: {part!r}")
        start = int(m.group(1))
        stop = int(m.group(2)) if m.group(2) is not None else start
        if stop < start:
            raise ValueError(f"range end precedes its start: {part!r}")
        ids.update(range(start, stop + 1))
    return sorted(ids)


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("h5", type=str, help="Path to the population HDF5 file.")
    p.add_argument("--kind", choices=["node", "edge"], default="node", help="Population kind.")
    p.add_argument("--config", type=str, default=None, help="Optional sonata.toml path.")
    p.add_argument("--log-level", type=str, default=None, help="Override the configured log level.")


def _cmd_inspect(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="inspect", description="Print populations and attribute names as JSON."
    )
    _add_common(p)
    p.add_argument("--population", type=str, default=None, help="Only describe this population.")
    args = p.parse_args(argv)

    settings = ReaderSettings.load(args.config)
    _configure_logging(settings, args.log_level)

    with storage_for_kind(args.kind)(args.h5, settings=settings) as storage:
        if args.population is None:
            info: Any = storage.describe()
        else:
            with storage.open_population(args.population) as pop:
                info = pop.describe()
    print(info.model_dump_json(indent=2))
    return 0


def _cmd_show(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="show", description="Show attribute values for selected rows.")
    _add_common(p)
    p.add_argument("--population", type=str, required=True, help="Population name.")
    p.add_argument(
        "--attribute",
        dest="attributes",
        action="append",
        required=True,
        help="Attribute to read (repeatable).",
    )
    p.add_argument("--ids", type=str, default="", help='Row ids, e.g. "0,1,5-9" (default: all).')
    p.add_argument("--n", type=int, default=5, help="Rows to display.")
    args = p.parse_args(argv)

    try:
        ids = _parse_ids(args.ids)
    except ValueError as exc:
        p.error(f"--ids: {exc}")

    settings = ReaderSettings.load(args.config)
    _configure_logging(settings, args.log_level)

    with storage_for_kind(args.kind)(args.h5, settings=settings) as storage:
        with storage.open_population(args.population) as pop:
            if ids:
                selection = Selection.from_values(ids)
            else:
                selection = Selection.from_values(range(pop.size))
            df: pl.DataFrame = pop.get_attributes(args.attributes, selection)
    print(df.head(args.n))
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sonata", description="SONATA population file utilities.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("inspect")
    sub.add_parser("show")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    try:
        if cmd == "inspect":
            code = _cmd_inspect(rest)
        elif cmd == "show":
            code = _cmd_show(rest)
        else:
            print(f"Unknown command: {cmd}", file=sys.stderr)
            code = 2
    except SonataError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
