# src/saltdose/concentration.py

from __future__ import annotations

import numpy as np


def concentrations(
    matrix: np.ndarray,
    quantities: np.ndarray,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """
    Ion concentrations produced by dissolving the given salt quantities.

        c[i] = sum_s matrix[s, i] * quantities[s]

    `matrix` is salts x ions, `quantities` has one entry per salt.
    If `out` is given the result is written into it and returned.
    """
    return np.matmul(quantities, matrix, out=out)
