# src/saltdose/utils.py

from __future__ import annotations

__all__ = [
    "format_mass_with_unit",
    "hco3_to_caco3",
]

# mg/L HCO3- -> mg/L as CaCO3 (equivalent weights 50 and 61)
_CACO3_PER_HCO3 = 50.0 / 61.0


def format_mass_with_unit(value_g_per_l: float, decimals: int = 2) -> tuple[float, str]:
    """Format g/L into a readable unit for display."""
    v = float(value_g_per_l)
    if v >= 1 or v == 0:
        return round(v, decimals), "g/L"
    if v >= 1e-3:
        return round(v * 1e3, decimals), "mg/L"
    if v >= 1e-6:
        return round(v * 1e6, decimals), "µg/L"
    return round(v * 1e9, decimals), "ng/L"


def hco3_to_caco3(hco3_mg_per_l: float) -> float:
    """Bicarbonate concentration expressed as alkalinity (mg/L as CaCO3)."""
    return float(hco3_mg_per_l) * _CACO3_PER_HCO3
