# src/saltdose/reports.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from saltdose.constraints import ConstraintSet
from saltdose.types import DosingResult, SaltTable
from saltdose.utils import format_mass_with_unit, hco3_to_caco3

PASS_MARK = "✓"
FAIL_MARK = "✗"


def _mark(ok: bool | None) -> str:
    if ok is None:
        return ""
    return PASS_MARK if ok else FAIL_MARK


def alkalinity(
    table: SaltTable,
    concentrations: Sequence[float],
    *,
    ion: str = "HCO3-",
) -> float | None:
    """
    Alkalinity in mg/L as CaCO3, or None if the table has no bicarbonate column.
    """
    if not table.has_ion(ion):
        return None
    return hco3_to_caco3(concentrations[table.ion_index(ion)])


def build_concentration_table(
    table: SaltTable,
    constraints: ConstraintSet,
    result: DosingResult,
    *,
    decimals: int = 2,
) -> pd.DataFrame:
    """
    One row per ion: target (from single-ion constraints), achieved mg/L and a pass mark.

    Ions without a single-ion constraint show "*" as target and no mark.
    Ratio constraints are listed in the constraint table instead.
    """
    cols = ["Ion", "Target [mg/L]", "Achieved [mg/L]", "Pass"]
    rows = []
    for idx, ion in enumerate(table.ions):
        own = [c for c in constraints.for_ion(idx) if c.kind != "ratio"]
        target = ", ".join(c.target_text() for c in own) if own else "*"
        ok = all(c.satisfied(result.concentrations) for c in own) if own else None
        rows.append(
            {
                "Ion": ion,
                "Target [mg/L]": target,
                "Achieved [mg/L]": round(float(result.concentrations[idx]), decimals),
                "Pass": _mark(ok),
            }
        )
    return pd.DataFrame(rows, columns=cols)


def build_constraint_table(
    constraints: ConstraintSet,
    concentrations: Sequence[float],
    *,
    decimals: int = 2,
) -> pd.DataFrame:
    cols = ["Constraint", "Kind", "Target", "Achieved", "Penalty", "Pass"]
    rows = [
        {
            "Constraint": c.describe(),
            "Kind": c.kind,
            "Target": c.target_text(),
            "Achieved": round(c.achieved(concentrations), decimals),
            "Penalty": round(c.penalty(concentrations), decimals + 2),
            "Pass": _mark(c.satisfied(concentrations)),
        }
        for c in constraints
    ]
    return pd.DataFrame(rows, columns=cols)


def build_dosing_table(
    table: SaltTable,
    result: DosingResult,
    water_volume_l: float,
    *,
    decimals: int = 3,
) -> pd.DataFrame:
    """
    Salt additions: per-litre dose (raw and human-readable) and grams for the batch volume.
    """
    total_col = f"Addition for {water_volume_l:g} L [g]"
    cols = ["Salt", "Dose [g/L]", "Dose", "Unit", total_col]

    doses = np.asarray(result.quantities, dtype=float)
    formatted = [format_mass_with_unit(q, decimals=decimals) for q in doses]

    df = pd.DataFrame(
        {
            "Salt": table.salts,
            "Dose [g/L]": doses,
            "Dose": [v for v, _ in formatted],
            "Unit": [u for _, u in formatted],
            total_col: np.round(doses * float(water_volume_l), decimals),
        },
        columns=cols,
    )
    return df.reset_index(drop=True)


@dataclass(frozen=True, slots=True)
class DosingTables:
    concentrations: pd.DataFrame
    constraints: pd.DataFrame
    dosing: pd.DataFrame
    alkalinity: float | None


def build_report_tables(
    table: SaltTable,
    constraints: ConstraintSet,
    result: DosingResult,
    *,
    water_volume_l: float,
    alkalinity_ion: str = "HCO3-",
    decimals: int = 2,
) -> DosingTables:
    return DosingTables(
        concentrations=build_concentration_table(table, constraints, result, decimals=decimals),
        constraints=build_constraint_table(constraints, result.concentrations, decimals=decimals),
        dosing=build_dosing_table(table, result, water_volume_l, decimals=decimals + 1),
        alkalinity=alkalinity(table, result.concentrations, ion=alkalinity_ion),
    )


def _section(title: str, df: pd.DataFrame) -> list[str]:
    body = "(none)" if df.empty else df.to_string(index=False)
    return ["", f"{title}:", "", body]


def render_report(
    table: SaltTable,
    constraints: ConstraintSet,
    result: DosingResult,
    *,
    water_volume_l: float,
    alkalinity_ion: str = "HCO3-",
    decimals: int = 2,
) -> str:
    """Plain-text report of targets, achieved concentrations and salt additions."""
    tables = build_report_tables(
        table,
        constraints,
        result,
        water_volume_l=water_volume_l,
        alkalinity_ion=alkalinity_ion,
        decimals=decimals,
    )

    lines = _section("Achieved concentrations", tables.concentrations)
    lines += _section("Constraints", tables.constraints)

    lines.append("")
    if tables.alkalinity is not None:
        lines.append(f"Alkalinity: {tables.alkalinity:.{decimals}f} mg/L as CaCO3")
    lines.append(f"Error: {result.error:g} after {result.iterations:,} iterations")
    if result.cancelled:
        lines.append("Search was cancelled before the iteration budget was used up.")

    lines += _section(f"Salt additions for {water_volume_l:g} L of water", tables.dosing)
    lines.append("")
    return "\n".join(lines)
