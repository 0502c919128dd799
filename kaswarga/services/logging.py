"""Logging configuration for the dashboard server.

Provides dual output (stdout + file) with configurable level via LOG_LEVEL env var.
Default: INFO. Accepts level names (DEBUG, INFO, ...) as well as the numeric
levels used by the dashboard front end (0 = errors only ... 5 = trace).
"""

import logging
import os
import sys
from pathlib import Path

# Map string level names to logging constants
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    # Numeric front-end levels
    "0": logging.ERROR,
    "1": logging.WARNING,
    "2": logging.INFO,
    "3": logging.INFO,
    "4": logging.DEBUG,
    "5": logging.DEBUG,
}


def get_log_level(level_str: str | None = None) -> int:
    """Get logging level from an explicit value or the LOG_LEVEL environment variable.

    Args:
        level_str: Level name or number; read from LOG_LEVEL when omitted

    Returns:
        Logging level constant (default: INFO)
    """
    if level_str is None:
        level_str = os.getenv("LOG_LEVEL", "INFO")
    return LOG_LEVEL_MAP.get(level_str.strip().upper(), logging.INFO)


def setup_server_logging(log_file: str = "logs/server.log", level: str | None = None) -> None:
    """
    Configure root logger for the dashboard server.

    Args:
        log_file: Path to log file (default: logs/server.log)
        level: Optional level override (default: LOG_LEVEL env var)

    Behavior:
        - Sets up all loggers to output to both stdout and file
        - ISO format timestamps for consistency
    """
    # Create logs directory if it doesn't exist
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # ISO format: [YYYY-MM-DD HH:MM:SS]
    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    log_level = get_log_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    # Handler 1: stdout (console)
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    # Handler 2: file (logs/server.log)
    file_handler = logging.FileHandler(log_path)
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
