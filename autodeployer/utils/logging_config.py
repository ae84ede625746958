"""
Centralized Logging Configuration
Console gets short WARNING+ lines; the rotating file keeps the full per-target trail
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)-22s | %(name)-40s | %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_dir: str = "data/logs",
    log_file: str = "autodeployer.log",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the root logger for a deployment run.

    Per-target status lines are printed by the console observer, so the
    console handler only shows problems unless console_level is lowered
    (--verbose). Records in the file carry the worker thread name, which is
    deploy-<target> for everything a target task logs.

    Args:
        log_dir: Directory for the log file (shared with the CSV reports)
        log_file: Name of the log file
        console_level: Logging level for console output
        file_level: Logging level for file output
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Root logger instance
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)  # handlers filter
    root.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console_handler)

    file_handler = RotatingFileHandler(
        log_path / log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(file_handler)

    root.info("=" * 80)
    root.info(f"Deployment log: {log_path / log_file}")
    root.info(
        f"Console level: {logging.getLevelName(console_level)}, "
        f"file level: {logging.getLevelName(file_level)}"
    )
    root.info("=" * 80)

    return root


def get_logger(name: str) -> logging.Logger:
    """Module logger (pass __name__)"""
    return logging.getLogger(name)
