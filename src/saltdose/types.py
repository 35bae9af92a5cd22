from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True, eq=False)
class SaltTable:
    """
    Contribution table: one row per salt, one column per ion.

    Values are the ion concentration (mg/L) produced by 1 g/L of the salt.
    Row and column positions are the stable salt and ion indices.
    """
    frame: pd.DataFrame

    @property
    def ions(self) -> List[str]:
        return [str(c) for c in self.frame.columns]

    @property
    def salts(self) -> List[str]:
        return [str(i) for i in self.frame.index]

    @property
    def matrix(self) -> np.ndarray:
        m = self.frame.to_numpy(dtype=float, copy=True).reshape(len(self.frame.index), len(self.frame.columns))
        m.setflags(write=False)
        return m

    def ion_index(self, ion: str) -> int:
        return self.ions.index(ion)

    def has_ion(self, ion: str) -> bool:
        return ion in self.ions


@dataclass(frozen=True, eq=False)
class DosingResult:
    quantities: np.ndarray
    concentrations: np.ndarray
    error: float
    iterations: int
    cancelled: bool = False
    history: List[Tuple[int, float]] = field(default_factory=list)
