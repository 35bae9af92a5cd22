"""
Pytest configuration: put src/ on sys.path so 'import saltdose' works
without installing the package, plus shared fixtures.
"""
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

_src = str(Path(__file__).resolve().parents[1] / "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

from saltdose.types import SaltTable  # noqa: E402

EXAMPLES_DIR = Path(__file__).resolve().parents[1] / "examples"


def make_table(rows, ions, salts=None) -> SaltTable:
    salts = salts if salts is not None else [f"salt{i}" for i in range(len(rows))]
    frame = pd.DataFrame(rows, index=pd.Index(salts, name="Salt"), columns=ions, dtype=float)
    return SaltTable(frame=frame)


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def one_salt_table():
    # One salt contributing 10 mg/L of ion0 per g/L and nothing to ion1
    return make_table([[10.0, 0.0]], ["ion0", "ion1"])


@pytest.fixture
def unit_salts_table():
    return make_table([[1.0, 0.0], [0.0, 1.0]], ["ion0", "ion1"])


@pytest.fixture
def brewing_table():
    return make_table(
        [
            [232.8, 0.0, 0.0, 557.9, 0.0, 0.0],
            [272.6, 0.0, 0.0, 0.0, 482.3, 0.0],
            [0.0, 98.6, 0.0, 389.6, 0.0, 0.0],
            [0.0, 0.0, 393.4, 0.0, 606.6, 0.0],
            [0.0, 0.0, 273.7, 0.0, 0.0, 726.3],
        ],
        ["Ca2+", "Mg2+", "Na+", "SO4--", "Cl-", "HCO3-"],
        ["Gypsum", "CaCl2", "Epsom", "NaCl", "NaHCO3"],
    )


@pytest.fixture
def table_factory():
    return make_table
