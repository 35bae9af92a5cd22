# examples/basic_usage.py

# ---------------------------------------------------------------------
# What this example demonstrates
#
# This is a BASIC, end-to-end saltdose example.
#
# It shows:
# 1) How to load the salt contribution table shipped next to this file
# 2) How to load target constraints (exact, range, ratio)
# 3) How to run a seeded, reproducible search
# 4) How to inspect results via built-in reporting tables
#
# NOTES:
# - The targets below are reachable with the listed salts, but the search
#   is a local one: it does not guarantee every constraint passes.
# - A smaller iteration budget than the CLI default keeps the run short.
# ---------------------------------------------------------------------

from pathlib import Path

import numpy as np

from saltdose import OptimizerConfig, optimize, read_constraints, read_salt_table
from saltdose.reports import build_report_tables

HERE = Path(__file__).resolve().parent


def main() -> None:
    table = read_salt_table(HERE / "ion_contributions.txt")
    constraints = read_constraints(HERE / "targets.txt", table)

    print("\n=== Salt table (mg/L per g/L) ===")
    print(table.frame.to_string())

    # -----------------------------------------------------------------
    # Run the search
    # -----------------------------------------------------------------
    config = OptimizerConfig(iterations=100_000, report_every=20_000, water_volume_l=20.0)
    result = optimize(
        table,
        constraints,
        config,
        rng=np.random.default_rng(7),
        progress=lambda i, err: print(f"ERR @{i}: {err:g}"),
    )

    # -----------------------------------------------------------------
    # Build reporting tables
    # -----------------------------------------------------------------
    tables = build_report_tables(
        table,
        constraints,
        result,
        water_volume_l=config.water_volume_l,
    )

    print("\n=== Concentrations ===")
    print(tables.concentrations.to_string(index=False))

    print("\n=== Constraints ===")
    print(tables.constraints.to_string(index=False))

    if tables.alkalinity is not None:
        print(f"\nAlkalinity: {tables.alkalinity:.1f} mg/L as CaCO3")

    print("\n=== Salt additions ===")
    print(tables.dosing.to_string(index=False))


if __name__ == "__main__":
    main()
