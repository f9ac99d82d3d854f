"""
Tests for crossover_bot/data/indicators.py and indicator_feed.py

Covers:
- moving average math (simple, weighted, exponential)
- awesome/accelerator oscillator warm-up lengths and values
- MovingAverageFeed source selection and warm-up
"""

import pytest

from crossover_bot.data.indicator_feed import MovingAverageFeed, OscillatorFeed
from crossover_bot.data.indicators import accelerator_oscillator, awesome_oscillator, ema, sma, wma

from conftest import candle


class TestMovingAverages:
    def test_sma_uses_last_period_values(self):
        assert sma([10.0, 1.0, 2.0, 3.0], 3) == pytest.approx(2.0)

    def test_wma_weights_newest_most(self):
        # (1*1 + 2*2 + 3*3) / 6
        assert wma([1.0, 2.0, 3.0], 3) == pytest.approx(14.0 / 6.0)

    def test_wma_period_one_is_last_value(self):
        assert wma([4.0, 7.0], 1) == pytest.approx(7.0)

    def test_ema_constant_series(self):
        assert ema([5.0] * 10, 4) == pytest.approx(5.0)

    def test_not_enough_values(self):
        with pytest.raises(ValueError):
            sma([1.0], 2)

    def test_non_positive_period(self):
        with pytest.raises(ValueError):
            wma([1.0, 2.0], 0)
        with pytest.raises(ValueError):
            ema([1.0], 0)


class TestOscillators:
    def test_awesome_oscillator_flat_market_is_zero(self):
        assert awesome_oscillator([1.5] * 34) == pytest.approx(0.0)

    def test_awesome_oscillator_rising_market_is_positive(self):
        assert awesome_oscillator([float(i) for i in range(34)]) > 0

    def test_accelerator_oscillator(self):
        assert accelerator_oscillator([1.0, 2.0, 3.0, 4.0, 5.0]) == pytest.approx(2.0)


class TestMovingAverageFeed:
    def test_appends_once_warm(self):
        feed = MovingAverageFeed("close", 3, kind="simple")
        for i, close in enumerate([1.0, 2.0]):
            feed.on_bar(candle(i, close))
        assert len(feed.series) == 0
        feed.on_bar(candle(2, 3.0))
        feed.on_bar(candle(3, 4.0))
        assert len(feed.series) == 2
        assert feed.series.value_at(0) == pytest.approx(3.0)
        assert feed.series.value_at(1) == pytest.approx(2.0)

    def test_source_selection(self):
        feed = MovingAverageFeed("high", 1)
        feed.on_bar(candle(0, 1.0, high=2.0, low=0.5))
        assert feed.series.last() == pytest.approx(2.0)

    def test_exponential_tracks_full_history(self):
        closes = [5.0] * 10 + [1.0] * 10 + [2.0] * 5
        feed = MovingAverageFeed("close", 9, kind="exponential")
        for i, close in enumerate(closes):
            feed.on_bar(candle(i, close))
        assert feed.series.last() == pytest.approx(ema(closes, 9))
        assert feed.series.value_at(1) == pytest.approx(ema(closes[:-1], 9))
        assert len(feed.series) == len(closes) - 8

    def test_series_name(self):
        assert MovingAverageFeed("close", 9).series.name == "weighted_ma(close,9)"

    def test_rejects_unknown_kind(self):
        with pytest.raises(ValueError):
            MovingAverageFeed("close", 9, kind="hull")


class TestOscillatorFeed:
    def test_awesome_first_value_after_34_bars(self):
        feed = OscillatorFeed("awesome")
        for i in range(33):
            feed.on_bar(candle(i, 1.0))
        assert len(feed.series) == 0
        feed.on_bar(candle(33, 1.0))
        assert len(feed.series) == 1

    def test_accelerator_needs_four_more_bars(self):
        feed = OscillatorFeed("accelerator")
        for i in range(37):
            feed.on_bar(candle(i, 1.0 + i * 0.01))
        assert len(feed.series) == 0
        feed.on_bar(candle(37, 1.37))
        assert len(feed.series) == 1

    def test_rejects_unknown_kind(self):
        with pytest.raises(ValueError):
            OscillatorFeed("macd")
