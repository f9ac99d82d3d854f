"""Momentum oscillator zero-crossing signal."""

from __future__ import annotations

from typing import Optional

from crossover_bot.data.series import LaggedSeries
from crossover_bot.execution.order import Position, TradeType
from crossover_bot.strategy.signal import Direction


class ZeroCrossingSignal:
    """Opens on a zero cross, closes when momentum decelerates against the position."""

    def __init__(self, oscillator: LaggedSeries) -> None:
        self.oscillator = oscillator
        self.name = f"zero_crossing({oscillator.name})"

    def evaluate_open(self) -> Optional[Direction]:
        current = self.oscillator.value_at(0)
        previous = self.oscillator.value_at(1)
        if current > 0 and previous <= 0:
            return Direction.UP
        if current < 0 and previous >= 0:
            return Direction.DOWN
        return None

    def should_close(self, position: Position, direction: Optional[Direction]) -> bool:
        # Reversal is judged on the oscillator slope, independent of any crossing.
        current = self.oscillator.value_at(0)
        previous = self.oscillator.value_at(1)
        if position.trade_type is TradeType.BUY:
            return current < previous
        return current > previous
