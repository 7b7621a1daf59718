"""
Logging setup shared by the pipeline modules.
"""
import logging
import os
import sys
from typing import Optional


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to env RECEIPT_LEDGER_LOG_LEVEL or INFO.

    Returns:
        Configured logger instance
    """
    log_level = (level or os.getenv("RECEIPT_LEDGER_LOG_LEVEL", "INFO")).upper()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # One handler per named logger
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(handler)

    return logger


def set_level(level: str) -> None:
    """Change the level of every receipt_ledger logger already created."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    for name, obj in logging.Logger.manager.loggerDict.items():
        if name.startswith("receipt_ledger") and isinstance(obj, logging.Logger):
            obj.setLevel(numeric)
