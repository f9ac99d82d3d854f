"""Engine configuration loaded from YAML and validated up front."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import logging
import math
from typing import Any, Mapping

import yaml

from crossover_bot.config.constants import (
    DEFAULT_BAR_INTERVAL_SECONDS,
    DEFAULT_FAST_PERIOD,
    DEFAULT_LABELS,
    DEFAULT_LOOP_SLEEP_SECONDS,
    DEFAULT_MAX_BARS,
    DEFAULT_MAX_HISTORY,
    DEFAULT_SLOW_PERIOD,
    DEFAULT_SOURCE,
    DEFAULT_START_PRICE,
    DEFAULT_STOP_LOSS_PIPS,
    DEFAULT_TAKE_PROFIT_PIPS,
    DEFAULT_VOLUME_IN_LOTS,
    DEFAULT_WARMUP_BARS,
    MAX_PROTECTION_PIPS,
    MIN_PROTECTION_PIPS,
    MOVING_AVERAGE_KINDS,
    OSCILLATOR_KINDS,
    PRICE_SOURCES,
    VARIANT_CROSSOVER,
    VARIANT_ZERO_CROSSING,
    VARIANTS,
)
from crossover_bot.errors import MisconfigurationError
from crossover_bot.execution.symbol import SymbolInfo
from crossover_bot.logging.event_log import get_signal_logger


def _positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise MisconfigurationError(f"{name} must be a positive integer, got {value!r}")


def _choice(name: str, value: Any, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        raise MisconfigurationError(f"{name} must be one of {', '.join(allowed)}, got {value!r}")


@dataclass(frozen=True)
class TradeConfig:
    label: str = DEFAULT_LABELS[VARIANT_ZERO_CROSSING]
    volume_in_lots: float = DEFAULT_VOLUME_IN_LOTS
    stop_loss_pips: float = DEFAULT_STOP_LOSS_PIPS
    take_profit_pips: float = DEFAULT_TAKE_PROFIT_PIPS

    def __post_init__(self) -> None:
        if not isinstance(self.label, str) or not self.label.strip():
            raise MisconfigurationError("label must be a non-empty string")
        if not math.isfinite(self.volume_in_lots) or self.volume_in_lots <= 0:
            raise MisconfigurationError(f"volume_in_lots must be a finite number > 0, got {self.volume_in_lots}")
        for name in ("stop_loss_pips", "take_profit_pips"):
            pips = getattr(self, name)
            if not MIN_PROTECTION_PIPS <= pips <= MAX_PROTECTION_PIPS:
                raise MisconfigurationError(
                    f"{name} must be within [{MIN_PROTECTION_PIPS:g}, {MAX_PROTECTION_PIPS:g}], got {pips}"
                )


@dataclass(frozen=True)
class StrategyConfig:
    variant: str = VARIANT_ZERO_CROSSING
    oscillator: str = "accelerator"
    moving_average: str = "weighted"
    fast_source: str = DEFAULT_SOURCE
    fast_period: int = DEFAULT_FAST_PERIOD
    slow_source: str = DEFAULT_SOURCE
    slow_period: int = DEFAULT_SLOW_PERIOD

    def __post_init__(self) -> None:
        _choice("variant", self.variant, VARIANTS)
        _choice("oscillator", self.oscillator, OSCILLATOR_KINDS)
        _choice("moving_average", self.moving_average, MOVING_AVERAGE_KINDS)
        _choice("fast_source", self.fast_source, PRICE_SOURCES)
        _choice("slow_source", self.slow_source, PRICE_SOURCES)
        _positive_int("fast_period", self.fast_period)
        _positive_int("slow_period", self.slow_period)
        if self.variant == VARIANT_CROSSOVER and self.fast_period > self.slow_period:
            # Accepted as configured; only flagged.
            get_signal_logger().warning(
                "config fast_period=%d is longer than slow_period=%d", self.fast_period, self.slow_period
            )


@dataclass(frozen=True)
class RunConfig:
    seed: int = 42
    max_bars: int = DEFAULT_MAX_BARS
    warmup_bars: int = DEFAULT_WARMUP_BARS
    loop_sleep_seconds: float = DEFAULT_LOOP_SLEEP_SECONDS
    max_history: int = DEFAULT_MAX_HISTORY
    start_price: float = DEFAULT_START_PRICE

    def __post_init__(self) -> None:
        _positive_int("max_bars", self.max_bars)
        _positive_int("max_history", self.max_history)
        if self.max_history < 2:
            raise MisconfigurationError("max_history must be >= 2")
        if self.warmup_bars < 0 or self.loop_sleep_seconds < 0:
            raise MisconfigurationError("warmup_bars and loop_sleep_seconds must be >= 0")


@dataclass(frozen=True)
class ExecutionConfig:
    reject_probability: float = 0.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.reject_probability <= 1.0:
            raise MisconfigurationError("reject_probability must be within [0, 1]")


@dataclass(frozen=True)
class FeedConfig:
    live_symbol: str = "btcusdt"
    bar_interval_seconds: int = DEFAULT_BAR_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        _positive_int("bar_interval_seconds", self.bar_interval_seconds)


@dataclass(frozen=True)
class EngineConfig:
    """Immutable per-instance configuration."""

    trade: TradeConfig = field(default_factory=TradeConfig)
    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    symbol: SymbolInfo = field(default_factory=SymbolInfo)
    run: RunConfig = field(default_factory=RunConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise MisconfigurationError(f"unknown log level {self.log_level!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "EngineConfig":
        data = data or {}
        try:
            strategy = StrategyConfig(**data.get("strategy", {}))
            trade_data = dict(data.get("trade", {}))
            trade_data.setdefault("label", DEFAULT_LABELS[strategy.variant])
            return cls(
                trade=TradeConfig(**trade_data),
                strategy=strategy,
                symbol=SymbolInfo(**data.get("symbol", {})),
                run=RunConfig(**data.get("run", {})),
                execution=ExecutionConfig(**data.get("execution", {})),
                feed=FeedConfig(**data.get("feed", {})),
                log_level=data.get("logging", {}).get("level", "INFO"),
            )
        except TypeError as exc:
            # Unknown keys or wrongly typed values in the YAML.
            raise MisconfigurationError(str(exc)) from exc

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EngineConfig":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_mapping(data)
