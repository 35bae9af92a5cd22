# src/saltdose/config.py

from __future__ import annotations

from dataclasses import dataclass

from .errors import ConfigError


@dataclass(frozen=True, slots=True)
class OptimizerConfig:
    # -----------------------------
    # Local search
    # -----------------------------
    eps: float = 0.0002  # step scale, g/L
    iterations: int = 400_000
    report_every: int = 10_000
    seed: int | None = None

    # -----------------------------
    # Initial quantities, g/L
    # -----------------------------
    initial_low: float = 0.0
    initial_high: float = 1.0

    # -----------------------------
    # Reporting
    # -----------------------------
    water_volume_l: float = 25.0
    alkalinity_ion: str = "HCO3-"

    def validate(self) -> OptimizerConfig:
        """Check ranges and return self so calls can be chained."""
        if not self.eps > 0:
            raise ConfigError(f"eps must be > 0, got {self.eps!r}")
        if self.iterations < 0:
            raise ConfigError(f"iterations cannot be negative, got {self.iterations!r}")
        if self.report_every <= 0:
            raise ConfigError(f"report_every must be > 0, got {self.report_every!r}")
        if self.initial_low < 0 or self.initial_low > self.initial_high:
            raise ConfigError(
                f"initial range must satisfy 0 <= low <= high, "
                f"got [{self.initial_low!r}, {self.initial_high!r})"
            )
        if not self.water_volume_l > 0:
            raise ConfigError(f"water_volume_l must be > 0, got {self.water_volume_l!r}")
        return self
