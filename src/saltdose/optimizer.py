# src/saltdose/optimizer.py

"""
Greedy stochastic hill climbing over salt quantities.

Each iteration nudges the best quantity vector with Gaussian noise of
mean -eps and standard deviation eps, clamps at zero, and keeps the
trial only if its error is strictly lower. The iteration budget is
fixed; there is no early exit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

import numpy as np

from .concentration import concentrations
from .config import OptimizerConfig
from .constraints import ConstraintSet
from .types import DosingResult, SaltTable

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, float], None]


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


@dataclass(slots=True)
class SearchState:
    best_quantities: np.ndarray
    best_concentrations: np.ndarray
    best_error: float
    trial_quantities: np.ndarray
    trial_concentrations: np.ndarray
    trial_error: float = float("inf")

    def accept_trial(self) -> None:
        """Promote the trial triple to best by swapping buffers."""
        self.best_quantities, self.trial_quantities = self.trial_quantities, self.best_quantities
        self.best_concentrations, self.trial_concentrations = (
            self.trial_concentrations,
            self.best_concentrations,
        )
        self.best_error = self.trial_error


def nudge(rng: np.random.Generator, eps: float, source: np.ndarray, out: np.ndarray) -> np.ndarray:
    """
    out = max(0, source + N(-eps, eps)), drawn independently per salt.
    """
    rng.standard_normal(out=out)
    out *= eps
    out -= eps
    out += source
    np.maximum(out, 0.0, out=out)
    return out


def initial_state(
    matrix: np.ndarray,
    constraints: ConstraintSet,
    quantities: np.ndarray,
) -> SearchState:
    best_q = np.array(quantities, dtype=float)
    best_c = concentrations(matrix, best_q)
    return SearchState(
        best_quantities=best_q,
        best_concentrations=best_c,
        best_error=constraints.error(best_c),
        trial_quantities=np.empty_like(best_q),
        trial_concentrations=np.empty_like(best_c),
    )


def optimize(
    table: SaltTable,
    constraints: ConstraintSet,
    config: OptimizerConfig | None = None,
    *,
    rng: np.random.Generator | None = None,
    progress: ProgressCallback | None = None,
    cancel: CancelToken | None = None,
    initial_quantities: np.ndarray | None = None,
) -> DosingResult:
    config = (config or OptimizerConfig()).validate()
    rng = rng if rng is not None else np.random.default_rng(config.seed)

    matrix = table.matrix
    n_salts = matrix.shape[0]

    if initial_quantities is None:
        start = rng.uniform(config.initial_low, config.initial_high, size=n_salts)
    else:
        start = np.asarray(initial_quantities, dtype=float)
        if start.shape != (n_salts,):
            raise ValueError(f"initial_quantities must have shape ({n_salts},), got {start.shape}")
        if not (np.isfinite(start).all() and (start >= 0).all()):
            raise ValueError(f"initial_quantities must be finite and non-negative, got {start}")

    state = initial_state(matrix, constraints, start)
    history: list[tuple[int, float]] = []

    logger.info(
        "Starting search: %d salts, %d ions, %d constraints, %d iterations (eps=%g)",
        n_salts,
        matrix.shape[1],
        len(constraints),
        config.iterations,
        config.eps,
    )
    logger.debug("Initial error %g", state.best_error)

    eps = config.eps
    report_every = config.report_every
    cancelled = False
    done = 0

    for i in range(1, config.iterations + 1):
        if cancel is not None and cancel.is_set():
            cancelled = True
            break

        nudge(rng, eps, state.best_quantities, state.trial_quantities)
        concentrations(matrix, state.trial_quantities, out=state.trial_concentrations)
        state.trial_error = constraints.error(state.trial_concentrations)

        if state.trial_error < state.best_error:
            state.accept_trial()

        done = i
        if i % report_every == 0:
            history.append((i, state.best_error))
            logger.info("ERR @%d: %g", i, state.best_error)
            if progress is not None:
                progress(i, state.best_error)

    if cancelled:
        logger.warning("Search cancelled after %d of %d iterations", done, config.iterations)
    logger.info("Search finished: best error %g", state.best_error)

    return DosingResult(
        quantities=state.best_quantities.copy(),
        concentrations=state.best_concentrations.copy(),
        error=float(state.best_error),
        iterations=done,
        cancelled=cancelled,
        history=history,
    )
