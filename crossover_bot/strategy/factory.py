"""Builds the configured signal source and the feeds that drive it."""

from __future__ import annotations

from typing import List, Tuple

from crossover_bot.config.constants import VARIANT_CROSSOVER
from crossover_bot.config.settings import StrategyConfig
from crossover_bot.data.indicator_feed import IndicatorFeed, MovingAverageFeed, OscillatorFeed
from crossover_bot.strategy.crossover import DualSeriesCrossoverSignal
from crossover_bot.strategy.signal import SignalSource
from crossover_bot.strategy.zero_crossing import ZeroCrossingSignal


def build_signal_source(cfg: StrategyConfig, max_history: int) -> Tuple[SignalSource, List[IndicatorFeed]]:
    """Return the signal source plus the feeds to update on every closed bar."""
    if cfg.variant == VARIANT_CROSSOVER:
        fast = MovingAverageFeed(cfg.fast_source, cfg.fast_period, cfg.moving_average, max_history)
        slow = MovingAverageFeed(cfg.slow_source, cfg.slow_period, cfg.moving_average, max_history)
        return DualSeriesCrossoverSignal(fast.series, slow.series), [fast, slow]

    oscillator = OscillatorFeed(cfg.oscillator, max_history)
    return ZeroCrossingSignal(oscillator.series), [oscillator]
