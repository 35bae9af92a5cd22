# src/saltdose/loaders.py

from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Iterable, Iterator

import pandas as pd

from .constraints import Constraint, ConstraintSet, Exact, Range, Ratio
from .errors import ConstraintParseError, DataError
from .types import SaltTable

logger = logging.getLogger(__name__)

_NUMBER = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_RANGE_RE = re.compile(rf"^({_NUMBER})\s*-\s*({_NUMBER})$")


def _records(lines: Iterable[str]) -> Iterator[tuple[int, list[str]]]:
    """
    Yield (line number, fields) for every non-empty line.

    Everything after a '#' is a comment.
    """
    for lineno, raw in enumerate(lines, start=1):
        line = raw.split("#", 1)[0].strip()
        if line:
            yield lineno, line.split()


def _read_lines(path: str | Path) -> list[str]:
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError as e:
        raise DataError(f"File not found: {p}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DataError(f"Failed to read file: {p}") from e


def _to_number(text: str, *, where: str, error: type[DataError] = DataError) -> float:
    try:
        value = float(text)
    except ValueError as e:
        raise error(f"{where}: not a number: {text!r}") from e
    if not math.isfinite(value):
        raise error(f"{where}: not a finite number: {text!r}")
    return value


# ---------------------------------------------------------------------
# Salt table
# ---------------------------------------------------------------------

def parse_salt_table(lines: Iterable[str], *, source: str = "<salt table>") -> SaltTable:
    """
    Parse a whitespace-separated contribution table.

    The first record lists the ion names. Each following record is a salt
    name followed by one non-negative contribution per ion.
    """
    records = list(_records(lines))
    if not records:
        raise DataError(f"{source}: salt table is empty")

    _, ions = records[0]
    dupes = sorted({ion for ion in ions if ions.count(ion) > 1})
    if dupes:
        raise DataError(f"{source}: duplicate ion names: {dupes}")

    salts: list[str] = []
    rows: list[list[float]] = []
    for lineno, fields in records[1:]:
        where = f"{source}:{lineno}"
        if len(fields) != len(ions) + 1:
            raise DataError(
                f"{where}: expected salt name and {len(ions)} values, got {len(fields)} fields"
            )
        salt, values = fields[0], fields[1:]
        if salt in salts:
            raise DataError(f"{where}: duplicate salt name {salt!r}")
        row = [_to_number(v, where=where) for v in values]
        negative = [ion for ion, v in zip(ions, row) if v < 0]
        if negative:
            raise DataError(f"{where}: negative contribution of {salt!r} to {negative}")
        salts.append(salt)
        rows.append(row)

    frame = pd.DataFrame(rows, index=pd.Index(salts, name="Salt"), columns=ions, dtype=float)
    frame.columns.name = "Ion"

    logger.debug("Loaded %d salts x %d ions from %s", len(salts), len(ions), source)
    return SaltTable(frame=frame)


def read_salt_table(path: str | Path) -> SaltTable:
    return parse_salt_table(_read_lines(path), source=str(path))


# ---------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------

def _ion_index(table: SaltTable, name: str, where: str) -> int:
    if not table.has_ion(name):
        raise ConstraintParseError(f"{where}: unknown ion {name!r}; known ions: {table.ions}")
    return table.ion_index(name)


def _non_negative(text: str, where: str) -> float:
    value = _to_number(text, where=where, error=ConstraintParseError)
    if value < 0:
        raise ConstraintParseError(f"{where}: value cannot be negative: {text!r}")
    return value


def parse_constraint(fields: list[str], table: SaltTable, *, where: str = "<target>") -> Constraint | None:
    """
    Turn one target record into a constraint.

      <ion> <value>               exact target
      <ion> <min> - <max>         inclusive range
      <ion> *                     unconstrained (returns None)
      <ion_a> : <ion_b> <ratio>   ratio of two ions

    Raises ConstraintParseError on anything else.
    """
    if len(fields) < 2:
        raise ConstraintParseError(f"{where}: expected an ion name and a target, got {fields}")

    name = fields[0]

    # Ratio
    if len(fields) == 4 and fields[1] == ":":
        a = _ion_index(table, name, where)
        b = _ion_index(table, fields[2], where)
        return Ratio(
            numerator=a,
            denominator=b,
            target_ratio=_non_negative(fields[3], where),
            numerator_name=name,
            denominator_name=fields[2],
        )

    ion = _ion_index(table, name, where)
    rest = " ".join(fields[1:])

    if rest == "*":
        return None

    m = _RANGE_RE.match(rest)
    if m:
        return _range(name, ion, m, where)

    if len(fields) == 2:
        return Exact(ion=ion, target=_non_negative(rest, where), name=name)

    raise ConstraintParseError(f"{where}: unrecognised target record: {' '.join(fields)!r}")


def _range(name: str, ion: int, m: re.Match, where: str) -> Range:
    low = _non_negative(m.group(1), where)
    high = _non_negative(m.group(2), where)
    if low > high:
        raise ConstraintParseError(f"{where}: range minimum {low:g} exceeds maximum {high:g}")
    return Range(ion=ion, minimum=low, maximum=high, name=name)


def parse_constraints(
    lines: Iterable[str],
    table: SaltTable,
    *,
    source: str = "<targets>",
) -> ConstraintSet:
    constraints: list[Constraint] = []
    for lineno, fields in _records(lines):
        constraint = parse_constraint(fields, table, where=f"{source}:{lineno}")
        if constraint is not None:
            constraints.append(constraint)

    logger.debug("Loaded %d constraints from %s", len(constraints), source)
    return ConstraintSet(constraints)


def read_constraints(path: str | Path, table: SaltTable) -> ConstraintSet:
    return parse_constraints(_read_lines(path), table, source=str(path))
