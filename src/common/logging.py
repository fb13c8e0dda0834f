"""Logging helpers for the market-data client."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = Path("logs/derivs.log")


def setup_logging(log_level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    """Configure console and rotating file handlers.

    Args:
        log_level: Numeric logging level (e.g., ``logging.INFO``).
        log_file: Optional path to a log file. Defaults to ``logs/derivs.log``.
    """

    logger = logging.getLogger()
    if logger.handlers:
        # Avoid adding duplicate handlers when called multiple times.
        return

    logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_path = log_file or DEFAULT_LOG_PATH
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(file_path, maxBytes=2_000_000, backupCount=5)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logger.debug("Logging configured", extra={"log_file": str(file_path)})


def log_level_from_config(logging_cfg: dict) -> tuple[int, Optional[Path]]:
    """Resolve ``logging.level`` and ``logging.file`` config values."""

    level_name = str(logging_cfg.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    file_value = logging_cfg.get("file")
    log_file = Path(file_value) if isinstance(file_value, (str, Path)) else None
    return level, log_file


__all__ = ["log_level_from_config", "setup_logging"]
