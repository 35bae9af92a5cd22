# src/saltdose/__init__.py

"""saltdose - Salt additions for target water chemistry by stochastic local search."""

from .__about__ import __version__
from .concentration import concentrations
from .config import OptimizerConfig
from .constraints import ConstraintSet, Exact, Range, Ratio, total_error
from .loaders import read_constraints, read_salt_table
from .optimizer import optimize
from .reports import alkalinity, build_report_tables, render_report
from .types import DosingResult, SaltTable

__all__ = [
    "__version__",
    "concentrations",
    "OptimizerConfig",
    "ConstraintSet",
    "Exact",
    "Range",
    "Ratio",
    "total_error",
    "read_salt_table",
    "read_constraints",
    "optimize",
    "alkalinity",
    "build_report_tables",
    "render_report",
    "DosingResult",
    "SaltTable",
]
