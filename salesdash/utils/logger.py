from __future__ import annotations
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from salesdash.config.env import LogConfig, get_log_config

LOGGER_NAME = "salesdash"


def setup_logger(cfg: LogConfig | None = None) -> logging.Logger:
    """Configure the package logger.

    - Console output always
    - Daily rotating file under ``cfg.log_dir`` when one is configured
    - Safe to call repeatedly; handlers are only attached once
    """
    cfg = cfg or get_log_config()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, cfg.level, logging.INFO))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if cfg.log_dir:
        log_dir = Path(cfg.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=log_dir / "salesdash.log",
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logger initialized (level=%s)", cfg.level)
    return logger
