"""Indicator helpers used to drive the signal sources in paper runs."""

from __future__ import annotations

from statistics import mean
from typing import Sequence

AO_FAST_PERIOD = 5
AO_SLOW_PERIOD = 34
AC_SMOOTHING_PERIOD = 5


def _check(values: Sequence[float], period: int) -> None:
    if period <= 0:
        raise ValueError("period must be > 0")
    if len(values) < period:
        raise ValueError(f"need {period} values, got {len(values)}")


def sma(values: Sequence[float], period: int) -> float:
    """Simple moving average of the last ``period`` values."""
    _check(values, period)
    return mean(values[-period:])


def wma(values: Sequence[float], period: int) -> float:
    """Linearly weighted moving average; the newest value weighs ``period``."""
    _check(values, period)
    window = values[-period:]
    weighted = sum(weight * value for weight, value in enumerate(window, start=1))
    return weighted / (period * (period + 1) / 2.0)


def ema(values: Sequence[float], period: int) -> float:
    """Return EMA of the full series using the last value as current signal."""
    if period <= 0:
        raise ValueError("period must be > 0")
    if not values:
        raise ValueError("values cannot be empty")

    acc = values[0]
    for v in values[1:]:
        acc = ema_step(acc, v, period)
    return acc


def ema_step(previous: float, value: float, period: int) -> float:
    """Advance an EMA by one value."""
    k = 2.0 / (period + 1.0)
    return (value * k) + (previous * (1.0 - k))


def awesome_oscillator(medians: Sequence[float]) -> float:
    """SMA(5) minus SMA(34) of median prices."""
    return sma(medians, AO_FAST_PERIOD) - sma(medians, AO_SLOW_PERIOD)


def accelerator_oscillator(ao_values: Sequence[float]) -> float:
    """Latest awesome oscillator value minus its own 5-bar SMA."""
    return ao_values[-1] - sma(ao_values, AC_SMOOTHING_PERIOD)
