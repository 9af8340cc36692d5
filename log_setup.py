"""
Logging setup for FareSplitLedger
- console: INFO
- file: INFO, rotated daily under <app_dir>/logs
"""
from __future__ import annotations
import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from utils import app_dir

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7


def get_log_file_path(log_dir: Optional[str] = None) -> str:
    return os.path.join(log_dir or os.path.join(app_dir(), "logs"), "faresplit.log")


def setup_logging(
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """Configure the root logger once at startup and return it"""
    log_file = get_log_file_path(log_dir)
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # avoid duplicate handlers when called twice
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.suffix = "%Y-%m-%d"
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    root_logger.info(f"Logging to {log_file}")
    return root_logger
