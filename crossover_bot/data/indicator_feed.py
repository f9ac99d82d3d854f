"""Per-bar indicator updaters that fill an :class:`IndicatorSeries`.

Each feed consumes closed candles and appends exactly one value to its
series once it has enough input bars. Until then lag queries on the series
fail with ``InsufficientHistory`` and the decision engine skips the bar.
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Optional, Protocol, Sequence

from crossover_bot.config.constants import DEFAULT_MAX_HISTORY, OSCILLATOR_KINDS
from crossover_bot.data.indicators import (
    AC_SMOOTHING_PERIOD,
    AO_SLOW_PERIOD,
    accelerator_oscillator,
    awesome_oscillator,
    ema_step,
    sma,
    wma,
)
from crossover_bot.data.market_feed import Candle
from crossover_bot.data.series import IndicatorSeries


class IndicatorFeed(Protocol):
    series: IndicatorSeries

    def on_bar(self, candle: Candle) -> None:
        ...


_WINDOWED_AVERAGES: dict[str, Callable[[Sequence[float], int], float]] = {
    "weighted": wma,
    "simple": sma,
}


class MovingAverageFeed:
    """Moving average of one price source over a fixed period."""

    def __init__(
        self,
        source: str,
        period: int,
        kind: str = "weighted",
        max_history: int = DEFAULT_MAX_HISTORY,
    ) -> None:
        if period <= 0:
            raise ValueError("period must be > 0")
        if kind not in _WINDOWED_AVERAGES and kind != "exponential":
            raise ValueError(f"unknown moving average kind: {kind}")
        self.source = source
        self.period = period
        self.kind = kind
        self._calc = _WINDOWED_AVERAGES.get(kind)
        self._inputs: Deque[float] = deque(maxlen=period)
        # Exponential average runs over the whole history, not a window.
        self._ema: Optional[float] = None
        self._bars_seen = 0
        self.series = IndicatorSeries(f"{kind}_ma({source},{period})", max_history=max_history)

    def on_bar(self, candle: Candle) -> None:
        value = candle.price(self.source)
        if self._calc is None:
            self._ema = value if self._ema is None else ema_step(self._ema, value, self.period)
            self._bars_seen += 1
            if self._bars_seen >= self.period:
                self.series.append(self._ema)
            return

        self._inputs.append(value)
        if len(self._inputs) == self.period:
            self.series.append(self._calc(list(self._inputs), self.period))


class OscillatorFeed:
    """Awesome or accelerator oscillator over median price."""

    def __init__(self, kind: str = "accelerator", max_history: int = DEFAULT_MAX_HISTORY) -> None:
        if kind not in OSCILLATOR_KINDS:
            raise ValueError(f"unknown oscillator kind: {kind}")
        self.kind = kind
        self._medians: Deque[float] = deque(maxlen=AO_SLOW_PERIOD)
        self._ao: Deque[float] = deque(maxlen=AC_SMOOTHING_PERIOD)
        self.series = IndicatorSeries(f"{kind}_oscillator", max_history=max_history)

    def on_bar(self, candle: Candle) -> None:
        self._medians.append(candle.price("median"))
        if len(self._medians) < AO_SLOW_PERIOD:
            return

        ao = awesome_oscillator(list(self._medians))
        if self.kind == "awesome":
            self.series.append(ao)
            return

        self._ao.append(ao)
        if len(self._ao) == AC_SMOOTHING_PERIOD:
            self.series.append(accelerator_oscillator(list(self._ao)))
