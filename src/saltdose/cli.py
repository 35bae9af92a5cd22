#!/usr/bin/env python3
"""
saltdose command line entry point.

Usage:
  saltdose ion_contributions.txt targets.txt
  saltdose ion_contributions.txt targets.txt --volume 20 --seed 1
  python -m saltdose ion_contributions.txt targets.txt --iterations 100000

Press Ctrl-C during the search to stop early and print the best plan so far.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import signal
import sys
import threading
import time
from pathlib import Path

from .__about__ import __version__
from .config import OptimizerConfig
from .errors import ConfigError, DataError
from .loaders import read_constraints, read_salt_table
from .optimizer import optimize
from .reports import render_report

logger = logging.getLogger(__name__)

# CLI option name -> OptimizerConfig field
_CONFIG_OPTIONS = {
    "eps": "eps",
    "iterations": "iterations",
    "report_every": "report_every",
    "seed": "seed",
    "volume": "water_volume_l",
}


def build_config(cli_args: dict, base: OptimizerConfig | None = None) -> OptimizerConfig:
    """
    Build configuration: defaults -> CLI overrides (only non-None values).
    """
    base = base or OptimizerConfig()
    overrides = {
        field: cli_args[option]
        for option, field in _CONFIG_OPTIONS.items()
        if cli_args.get(option) is not None
    }
    return dataclasses.replace(base, **overrides).validate()


def build_parser() -> argparse.ArgumentParser:
    defaults = OptimizerConfig()
    parser = argparse.ArgumentParser(
        prog="saltdose",
        description="Find salt additions (g/L) that hit target ion concentrations.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Target file records (one per line, '#' starts a comment):
  Ca2+ 60            exact target, mg/L
  SO4-- 50 - 150     inclusive range
  Na+ *              unconstrained
  Cl- : SO4-- 0.5    ratio of two ions
        """,
    )
    parser.add_argument("salt_table", type=Path, help="ion contribution table (mg/L per g/L)")
    parser.add_argument("targets", type=Path, help="target constraint file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    g = parser.add_argument_group("Search parameters (all have defaults)")
    g.add_argument("--volume", type=float, default=None,
                   help=f"Water volume in litres for the additions (default: {defaults.water_volume_l:g})")
    g.add_argument("--iterations", type=int, default=None,
                   help=f"Number of search iterations (default: {defaults.iterations})")
    g.add_argument("--eps", type=float, default=None,
                   help=f"Step size in g/L (default: {defaults.eps:g})")
    g.add_argument("--report-every", dest="report_every", type=int, default=None,
                   help=f"Print the best error every N iterations (default: {defaults.report_every})")
    g.add_argument("--seed", type=int, default=None,
                   help="Random seed for a reproducible run")

    out = parser.add_argument_group("Output")
    out.add_argument("--output", "-o", type=Path, default=None,
                     help="Also write the report to this file")
    out.add_argument("--quiet", "-q", action="store_true",
                     help="Do not print progress lines")
    out.add_argument("--verbose", "-v", action="count", default=0,
                     help="More log output (-v info, -vv debug)")
    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        cfg = build_config(vars(args))
        table = read_salt_table(args.salt_table)
        constraints = read_constraints(args.targets, table)
    except (DataError, ConfigError) as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    print(f"Loaded {len(table.salts)} salts, {len(table.ions)} ions, {len(constraints)} constraints")

    def _progress(i: int, err: float) -> None:
        print(f"ERR @{i}: {err}")

    cancel = threading.Event()
    # signal handlers can only be installed from the main thread
    in_main = threading.current_thread() is threading.main_thread()
    previous = signal.signal(signal.SIGINT, lambda *_: cancel.set()) if in_main else None
    t0 = time.time()
    try:
        result = optimize(
            table,
            constraints,
            cfg,
            progress=None if args.quiet else _progress,
            cancel=cancel,
        )
    finally:
        if in_main:
            signal.signal(signal.SIGINT, previous)
    logger.info("Search took %.2fs", time.time() - t0)

    report = render_report(
        table,
        constraints,
        result,
        water_volume_l=cfg.water_volume_l,
        alkalinity_ion=cfg.alkalinity_ion,
    )
    print(report)

    if args.output is not None:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(report, encoding="utf-8")
        except OSError as e:
            print(f"✗ Failed to write report to {args.output}: {e}", file=sys.stderr)
            return 1
        print(f"Report saved: {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
