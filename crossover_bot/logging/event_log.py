"""Signal and trade event loggers."""

from __future__ import annotations

import logging

SIGNAL_LOGGER = "signal_log"
TRADE_LOGGER = "trade_log"


def _channel_logger(name: str, tag: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(f"%(asctime)s | {tag} | %(levelname)s | %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def get_signal_logger() -> logging.Logger:
    """Return configured signal logger instance."""
    return _channel_logger(SIGNAL_LOGGER, "SIGNAL")


def get_trade_logger() -> logging.Logger:
    """Return configured trade logger instance."""
    return _channel_logger(TRADE_LOGGER, "TRADE")


def set_log_level(level: str | int) -> None:
    """Apply one level to both channels."""
    if isinstance(level, str):
        level = level.upper()
    for logger in (get_signal_logger(), get_trade_logger()):
        logger.setLevel(level)
