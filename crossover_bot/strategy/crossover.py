"""Fast/slow dual-series crossover signal."""

from __future__ import annotations

from typing import Optional

from crossover_bot.data.series import LaggedSeries
from crossover_bot.execution.order import Position
from crossover_bot.strategy.signal import Direction


class DualSeriesCrossoverSignal:
    """The crossing is both exit and entry trigger.

    There is no per-position reversal test: on an upward cross every short
    is closed, on a downward cross every long is closed, and nothing is
    closed on a bar without a cross.
    """

    def __init__(self, fast: LaggedSeries, slow: LaggedSeries) -> None:
        self.fast = fast
        self.slow = slow
        self.name = f"crossover({fast.name}/{slow.name})"

    def evaluate_open(self) -> Optional[Direction]:
        fast_now, fast_prev = self.fast.value_at(0), self.fast.value_at(1)
        slow_now, slow_prev = self.slow.value_at(0), self.slow.value_at(1)
        if fast_now > slow_now and fast_prev <= slow_prev:
            return Direction.UP
        if fast_now < slow_now and fast_prev >= slow_prev:
            return Direction.DOWN
        return None

    def should_close(self, position: Position, direction: Optional[Direction]) -> bool:
        if direction is None:
            return False
        return position.trade_type is direction.trade_type.opposite
