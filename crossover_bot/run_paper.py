"""Entry point for running the paper trading engine on synthetic bars."""

from __future__ import annotations

from pathlib import Path
import signal
import sys
import time

from crossover_bot.config.settings import EngineConfig
from crossover_bot.engine import PaperTradingEngine
from crossover_bot.errors import MisconfigurationError
from crossover_bot.logging.event_log import get_signal_logger

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "settings.yaml"

running = True


def shutdown_handler(sig, frame):
    global running
    print("\nGraceful shutdown initiated...")
    running = False


def load_config(argv: list[str]) -> EngineConfig:
    cfg_path = Path(argv[1]) if len(argv) > 1 else DEFAULT_CONFIG_PATH
    return EngineConfig.from_yaml(cfg_path)


def main(argv: list[str] | None = None) -> int:
    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    try:
        config = load_config(sys.argv if argv is None else argv)
        engine = PaperTradingEngine(config)
    except MisconfigurationError as exc:
        print(f"Invalid configuration: {exc.message}")
        return 2

    logger = get_signal_logger()
    print(f"Paper trading started ({config.strategy.variant}, label={config.trade.label}). Press CTRL+C to stop.")

    bars = 0
    while running and bars < engine.max_bars:
        try:
            engine.step()
            bars += 1
            if engine.loop_sleep_seconds:
                time.sleep(engine.loop_sleep_seconds)
        except Exception:
            logger.exception("runtime error, pausing before next bar")
            time.sleep(5)

    engine.shutdown()
    print("Paper trading stopped cleanly.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
