"""Append-only indicator history queryable by lag."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, Protocol

from crossover_bot.config.constants import DEFAULT_MAX_HISTORY
from crossover_bot.errors import InsufficientHistory


class LaggedSeries(Protocol):
    """Read-only view a signal needs from an indicator."""

    name: str

    def value_at(self, lag: int) -> float:
        ...


class IndicatorSeries:
    """One value per closed bar; lag 0 is the most recent."""

    def __init__(self, name: str, max_history: int = DEFAULT_MAX_HISTORY) -> None:
        if max_history < 2:
            raise ValueError("max_history must be >= 2")
        self.name = name
        self._values: Deque[float] = deque(maxlen=max_history)

    def append(self, value: float) -> None:
        self._values.append(float(value))

    def value_at(self, lag: int) -> float:
        """Return the value ``lag`` bars back from the latest one."""
        if lag < 0:
            raise ValueError("lag must be >= 0")
        if lag >= len(self._values):
            raise InsufficientHistory(self.name, lag, len(self._values))
        return self._values[-1 - lag]

    def last(self) -> float:
        return self.value_at(0)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"IndicatorSeries(name={self.name!r}, bars={len(self._values)})"
