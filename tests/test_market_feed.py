"""
Tests for crossover_bot/data/market_feed.py

Covers:
- Candle price source selection
- MarketFeed determinism
- LiveMarketFeed trade aggregation into closed bars (no network)
"""

import asyncio
from datetime import timedelta

import pytest

from crossover_bot.data.market_feed import SYNTHETIC_START_TS, Candle, LiveMarketFeed, MarketFeed

from conftest import T0


def trade(price, ts_ms, qty="1"):
    return {"p": str(price), "q": qty, "T": ts_ms}


class TestCandlePrice:
    def setup_method(self):
        self.bar = Candle(ts=T0, open=1.0, high=4.0, low=2.0, close=3.0, volume=1.0)

    def test_plain_sources(self):
        assert self.bar.price("open") == 1.0
        assert self.bar.price("high") == 4.0
        assert self.bar.price("low") == 2.0
        assert self.bar.price("close") == 3.0

    def test_derived_sources(self):
        assert self.bar.price("median") == pytest.approx(3.0)
        assert self.bar.price("typical") == pytest.approx(3.0)
        assert self.bar.price("weighted") == pytest.approx(3.0)

    def test_unknown_source(self):
        with pytest.raises(ValueError):
            self.bar.price("vwap")


class TestMarketFeed:
    def test_same_seed_same_prices(self):
        a = [c.close for c in MarketFeed(seed=7).warmup(20)]
        b = [c.close for c in MarketFeed(seed=7).warmup(20)]
        assert a == b

    def test_default_start_ignores_wall_clock(self):
        first = MarketFeed(seed=7).next_candle()
        assert first.ts == SYNTHETIC_START_TS

    def test_explicit_start_time(self):
        start = SYNTHETIC_START_TS + timedelta(days=3)
        a = [c.close for c in MarketFeed(seed=7, start_ts=start).warmup(5)]
        b = [c.close for c in MarketFeed(seed=7, start_ts=start).warmup(5)]
        assert a == b
        assert MarketFeed(seed=7, start_ts=start).next_candle().ts == start

    def test_bars_are_consistent(self):
        for bar in MarketFeed(seed=3).warmup(50):
            assert bar.low <= min(bar.open, bar.close)
            assert bar.high >= max(bar.open, bar.close)

    def test_bar_spacing(self):
        first, second = MarketFeed(bar_interval_seconds=300).warmup(2)
        assert (second.ts - first.ts).total_seconds() == 300


class TestLiveMarketFeed:
    def test_trades_in_one_interval_build_one_bar(self):
        feed = LiveMarketFeed(bar_interval_seconds=60)
        feed._handle_message(trade(100, 60_000))
        feed._handle_message(trade(102, 61_000, qty="2"))
        feed._handle_message(trade(99, 70_000))
        assert feed.get_candles() == []
        bar = feed.current_candle
        assert (bar.open, bar.high, bar.low, bar.close) == (100.0, 102.0, 99.0, 99.0)
        assert bar.volume == pytest.approx(4.0)

    def test_next_interval_closes_bar(self):
        feed = LiveMarketFeed(bar_interval_seconds=60)
        feed._handle_message(trade(100, 60_000))
        feed._handle_message(trade(101, 125_000))
        [closed] = feed.get_candles()
        assert closed.close == 100.0
        assert feed.get_latest_price() == 101.0
        assert asyncio.run(feed.next_candle()) == closed

    def test_full_queue_keeps_newest(self):
        feed = LiveMarketFeed(bar_interval_seconds=60, max_bars=1)
        feed._handle_message(trade(100, 60_000))
        feed._handle_message(trade(101, 120_000))
        feed._handle_message(trade(102, 180_000))
        assert asyncio.run(feed.next_candle()).close == 101.0

    def test_no_price_before_first_trade(self):
        assert LiveMarketFeed().get_latest_price() is None
