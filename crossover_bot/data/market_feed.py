"""Market feed abstractions for deterministic and live paper trading runs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import asyncio
import json
import math
import random
from collections import deque
from typing import Deque, List, Optional

import websockets

from crossover_bot.config.constants import (
    DEFAULT_BAR_INTERVAL_SECONDS,
    DEFAULT_MAX_HISTORY,
    DEFAULT_START_PRICE,
)

# Bars depend only on seed and start time, never on the wall clock.
SYNTHETIC_START_TS = datetime(2024, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Candle:
    """OHLCV bar."""

    ts: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float

    def price(self, source: str) -> float:
        """Return the price series selected by ``source``."""
        if source == "open":
            return self.open
        if source == "high":
            return self.high
        if source == "low":
            return self.low
        if source == "close":
            return self.close
        if source == "median":
            return (self.high + self.low) / 2.0
        if source == "typical":
            return (self.high + self.low + self.close) / 3.0
        if source == "weighted":
            return (self.high + self.low + 2.0 * self.close) / 4.0
        raise ValueError(f"unknown price source: {source}")


class MarketFeed:
    """Synthetic deterministic feed suitable for paper strategy validation."""

    def __init__(
        self,
        seed: int = 42,
        start_price: float = DEFAULT_START_PRICE,
        bar_interval_seconds: int = DEFAULT_BAR_INTERVAL_SECONDS,
        start_ts: datetime = SYNTHETIC_START_TS,
    ) -> None:
        self._rng = random.Random(seed)
        self._price = start_price
        self._interval = timedelta(seconds=bar_interval_seconds)
        self._ts = start_ts

    def next_candle(self) -> Candle:
        """Generate the next bar with bounded noise around a mild sinusoid."""
        wave = math.sin(self._ts.timestamp() / 2400.0) * 0.0004
        noise = self._rng.uniform(-0.0006, 0.0006)
        drift = wave + noise

        open_price = self._price
        close_price = max(1e-6, open_price * (1.0 + drift))
        high = max(open_price, close_price) * (1.0 + abs(self._rng.uniform(0.0, 0.0003)))
        low = min(open_price, close_price) * (1.0 - abs(self._rng.uniform(0.0, 0.0003)))
        volume = self._rng.uniform(100.0, 5000.0)

        candle = Candle(ts=self._ts, open=open_price, high=high, low=low, close=close_price, volume=volume)
        self._price = close_price
        self._ts += self._interval
        return candle

    def warmup(self, n: int) -> List[Candle]:
        """Generate initial bars for indicator warm-up."""
        return [self.next_candle() for _ in range(n)]


class LiveMarketFeed:
    """Live Binance.US trade stream aggregated into closed bars."""

    BINANCE_WS_URL = "wss://stream.binance.us:9443/ws"

    def __init__(
        self,
        symbol: str = "btcusdt",
        bar_interval_seconds: int = DEFAULT_BAR_INTERVAL_SECONDS,
        max_bars: int = DEFAULT_MAX_HISTORY,
    ) -> None:
        self.symbol = symbol.lower()
        self.bar_interval_seconds = bar_interval_seconds
        self.candles: Deque[Candle] = deque(maxlen=max_bars)
        self.current_candle: Optional[Candle] = None
        self._candle_queue: asyncio.Queue[Candle] = asyncio.Queue(maxsize=max_bars)

    async def connect(self) -> None:
        """Connect to the trade stream and aggregate ticks into bars."""
        url = f"{self.BINANCE_WS_URL}/{self.symbol}@trade"
        async with websockets.connect(url) as ws:
            async for message in ws:
                self._handle_message(json.loads(message))

    def _handle_message(self, msg: dict) -> None:
        price = float(msg["p"])
        qty = float(msg.get("q", 0.0))
        timestamp = int(msg["T"]) // 1000
        self._update_candle(price, qty, timestamp)

    def _update_candle(self, price: float, qty: float, timestamp: int) -> None:
        bar_start = timestamp - (timestamp % self.bar_interval_seconds)

        if self.current_candle is None:
            self.current_candle = self._new_candle(price, qty, bar_start)
            return

        current_start = int(self.current_candle.ts.timestamp())
        if bar_start > current_start:
            # A trade in a later interval closes the bar in progress.
            self._enqueue_candle(self.current_candle)
            self.current_candle = self._new_candle(price, qty, bar_start)
        else:
            self.current_candle = Candle(
                ts=self.current_candle.ts,
                open=self.current_candle.open,
                high=max(self.current_candle.high, price),
                low=min(self.current_candle.low, price),
                close=price,
                volume=self.current_candle.volume + qty,
            )

    def _new_candle(self, price: float, qty: float, timestamp: int) -> Candle:
        ts = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        return Candle(ts=ts, open=price, high=price, low=price, close=price, volume=qty)

    def _enqueue_candle(self, candle: Candle) -> None:
        self.candles.append(candle)
        if self._candle_queue.full():
            # Full queue: the oldest undelivered bar is dropped.
            self._candle_queue.get_nowait()
        self._candle_queue.put_nowait(candle)

    async def next_candle(self) -> Candle:
        """Await the next closed bar."""
        return await self._candle_queue.get()

    def get_candles(self) -> List[Candle]:
        """Return closed bars only."""
        return list(self.candles)

    def get_latest_price(self) -> Optional[float]:
        """Return the latest trade price if available."""
        if self.current_candle:
            return self.current_candle.close
        return None
