"""Project-wide constants for the crossover bot."""

from __future__ import annotations

VARIANT_ZERO_CROSSING = "zero_crossing"
VARIANT_CROSSOVER = "crossover"
VARIANTS = (VARIANT_ZERO_CROSSING, VARIANT_CROSSOVER)

DEFAULT_LABELS = {
    VARIANT_ZERO_CROSSING: "AcceleratorOscillatorSample",
    VARIANT_CROSSOVER: "WeightedMovingAverageSample",
}

# Trade parameters
DEFAULT_VOLUME_IN_LOTS = 0.01
DEFAULT_STOP_LOSS_PIPS = 10.0
DEFAULT_TAKE_PROFIT_PIPS = 10.0
MIN_PROTECTION_PIPS = 1.0
MAX_PROTECTION_PIPS = 100.0

# Crossover variant
DEFAULT_FAST_PERIOD = 9
DEFAULT_SLOW_PERIOD = 20
DEFAULT_SOURCE = "close"
PRICE_SOURCES = ("open", "high", "low", "close", "median", "typical", "weighted")
MOVING_AVERAGE_KINDS = ("weighted", "simple", "exponential")
OSCILLATOR_KINDS = ("accelerator", "awesome")

# Instrument defaults (EURUSD-like)
DEFAULT_SYMBOL = "EURUSD"
DEFAULT_PIP_SIZE = 0.0001
DEFAULT_LOT_SIZE = 100_000.0
DEFAULT_VOLUME_STEP = 1_000.0
DEFAULT_MIN_VOLUME = 1_000.0

# Engine behavior
DEFAULT_LOOP_SLEEP_SECONDS = 1.0
DEFAULT_MAX_HISTORY = 500
DEFAULT_WARMUP_BARS = 60
DEFAULT_MAX_BARS = 1_000
DEFAULT_BAR_INTERVAL_SECONDS = 60
DEFAULT_START_PRICE = 1.1000
