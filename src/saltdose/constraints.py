# src/saltdose/constraints.py

"""
Target constraints on ion concentrations and the error they add up to.

Each constraint turns a concentration vector into a non-negative penalty.
The error minimised by the optimizer is the sum of all penalties; it is
zero only when every constraint is met exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple

import numpy as np

# Ratio denominators below this are treated as zero.
RATIO_DENOMINATOR_FLOOR = 0.01
RATIO_GUARD_PENALTY = 10_000.0

# Pass/fail tolerances used by the report.
EXACT_TOLERANCE = 1.0
RATIO_TOLERANCE = 0.1


class Constraint:
    __slots__ = ()

    kind: str = ""

    def ions(self) -> Tuple[int, ...]:
        raise NotImplementedError

    def penalty(self, concentrations: Sequence[float]) -> float:
        raise NotImplementedError

    def achieved(self, concentrations: Sequence[float]) -> float:
        raise NotImplementedError

    def satisfied(self, concentrations: Sequence[float]) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def target_text(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Exact(Constraint):
    ion: int
    target: float
    name: str = ""

    kind = "exact"

    def ions(self) -> Tuple[int, ...]:
        return (self.ion,)

    def penalty(self, concentrations: Sequence[float]) -> float:
        diff = float(concentrations[self.ion]) - self.target
        return diff * diff

    def achieved(self, concentrations: Sequence[float]) -> float:
        return float(concentrations[self.ion])

    def satisfied(self, concentrations: Sequence[float]) -> bool:
        return abs(self.achieved(concentrations) - self.target) < EXACT_TOLERANCE

    def describe(self) -> str:
        return f"{self.name or self.ion} = {self.target:g}"

    def target_text(self) -> str:
        return f"{self.target:g}"


@dataclass(frozen=True, slots=True)
class Range(Constraint):
    ion: int
    minimum: float
    maximum: float
    name: str = ""

    kind = "range"

    def ions(self) -> Tuple[int, ...]:
        return (self.ion,)

    def penalty(self, concentrations: Sequence[float]) -> float:
        c = float(concentrations[self.ion])
        if c < self.minimum:
            return (c - self.minimum) ** 2
        if c > self.maximum:
            return (c - self.maximum) ** 2
        return 0.0

    def achieved(self, concentrations: Sequence[float]) -> float:
        return float(concentrations[self.ion])

    def satisfied(self, concentrations: Sequence[float]) -> bool:
        return self.minimum <= self.achieved(concentrations) <= self.maximum

    def describe(self) -> str:
        return f"{self.minimum:g} <= {self.name or self.ion} <= {self.maximum:g}"

    def target_text(self) -> str:
        return f"{self.minimum:g} - {self.maximum:g}"


@dataclass(frozen=True, slots=True)
class Ratio(Constraint):
    numerator: int
    denominator: int
    target_ratio: float
    numerator_name: str = ""
    denominator_name: str = ""

    kind = "ratio"

    def ions(self) -> Tuple[int, ...]:
        return (self.numerator, self.denominator)

    def penalty(self, concentrations: Sequence[float]) -> float:
        below = float(concentrations[self.denominator])
        if below < RATIO_DENOMINATOR_FLOOR:
            return RATIO_GUARD_PENALTY
        diff = float(concentrations[self.numerator]) / below - self.target_ratio
        return diff * diff

    def achieved(self, concentrations: Sequence[float]) -> float:
        below = float(concentrations[self.denominator])
        if below < RATIO_DENOMINATOR_FLOOR:
            return float("nan")
        return float(concentrations[self.numerator]) / below

    def satisfied(self, concentrations: Sequence[float]) -> bool:
        ratio = self.achieved(concentrations)
        return bool(np.isfinite(ratio)) and abs(ratio - self.target_ratio) < RATIO_TOLERANCE

    def describe(self) -> str:
        a = self.numerator_name or self.numerator
        b = self.denominator_name or self.denominator
        return f"{a} : {b} = {self.target_ratio:g}"

    def target_text(self) -> str:
        return f"{self.target_ratio:g}"


class ConstraintSet:
    """Ordered, immutable collection of constraints."""

    __slots__ = ("_items",)

    def __init__(self, constraints: Iterable[Constraint] = ()) -> None:
        self._items: Tuple[Constraint, ...] = tuple(constraints)

    def __iter__(self) -> Iterator[Constraint]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Constraint:
        return self._items[index]

    def __repr__(self) -> str:
        return f"ConstraintSet({list(self._items)!r})"

    def for_ion(self, ion: int) -> list[Constraint]:
        """Constraints that read the given ion index."""
        return [c for c in self._items if ion in c.ions()]

    def error(self, concentrations: Sequence[float]) -> float:
        return total_error(self._items, concentrations)

    def all_satisfied(self, concentrations: Sequence[float]) -> bool:
        return all(c.satisfied(concentrations) for c in self._items)


def total_error(constraints: Iterable[Constraint], concentrations: Sequence[float]) -> float:
    """Sum of constraint penalties for a concentration vector."""
    total = 0.0
    for constraint in constraints:
        total += constraint.penalty(concentrations)
    return total
