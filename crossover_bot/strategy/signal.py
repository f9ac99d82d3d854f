"""Signal models shared between strategy and engine."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol

from crossover_bot.execution.order import Position, TradeType


class Direction(Enum):
    """Direction of a crossing event on the latest closed bar."""

    UP = "UP"
    DOWN = "DOWN"

    @property
    def trade_type(self) -> TradeType:
        return TradeType.BUY if self is Direction.UP else TradeType.SELL


class SignalSource(Protocol):
    """Entry/exit predicate the decision engine is parameterised by.

    Both methods read indicator values at lag 0 and lag 1 and may raise
    ``InsufficientHistory``.
    """

    name: str

    def evaluate_open(self) -> Optional[Direction]:
        """Crossing direction on the latest bar, or None."""
        ...

    def should_close(self, position: Position, direction: Optional[Direction]) -> bool:
        """Whether ``position`` must be closed given this bar's crossing."""
        ...
