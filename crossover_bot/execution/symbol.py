"""Instrument metadata: pip size and lot/unit conversion."""

from __future__ import annotations

from dataclasses import dataclass
from math import floor, isfinite

from crossover_bot.config.constants import (
    DEFAULT_LOT_SIZE,
    DEFAULT_MIN_VOLUME,
    DEFAULT_PIP_SIZE,
    DEFAULT_SYMBOL,
    DEFAULT_VOLUME_STEP,
)
from crossover_bot.errors import MisconfigurationError


@dataclass(frozen=True)
class SymbolInfo:
    name: str = DEFAULT_SYMBOL
    pip_size: float = DEFAULT_PIP_SIZE
    lot_size: float = DEFAULT_LOT_SIZE
    volume_step: float = DEFAULT_VOLUME_STEP
    min_volume: float = DEFAULT_MIN_VOLUME

    def __post_init__(self) -> None:
        for field_name in ("pip_size", "lot_size", "volume_step", "min_volume"):
            value = getattr(self, field_name)
            if not isfinite(value) or value <= 0:
                raise MisconfigurationError(f"symbol.{field_name} must be a finite number > 0")

    def quantity_to_volume_in_units(self, lots: float) -> float:
        """Convert lots to instrument units, rounded down to the volume step."""
        if not isfinite(lots) or lots <= 0:
            raise MisconfigurationError(f"volume in lots must be a finite number > 0, got {lots}")
        # Small epsilon so 0.01 * 100000 does not round down a whole step.
        steps = floor(lots * self.lot_size / self.volume_step + 1e-9)
        units = steps * self.volume_step
        if units < self.min_volume:
            raise MisconfigurationError(
                f"{lots} lots is {units} units, below {self.name} minimum {self.min_volume}"
            )
        return units

    def pips_to_price(self, pips: float) -> float:
        return pips * self.pip_size
