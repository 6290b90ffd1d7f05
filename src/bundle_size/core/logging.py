"""Logging configuration for bundle-size.

Log records go to stderr; stdout carries the size report itself.
"""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "bundle_size"

STANDARD_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
JSON_FORMAT = ('{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
               '"logger": "%(name)s", "message": "%(message)s"}')

# Chatty dependencies, raised to WARNING unless debugging
_NOISY_LOGGERS = ("urllib3",)


def _generate_timestamped_filename(log_file: str) -> str:
    """Insert a run timestamp before the suffix: ``{name}_{YYYYMMDD_HHMMSS}.{ext}``."""
    log_path = Path(log_file)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return str(log_path.parent / f"{log_path.stem}_{timestamp}{log_path.suffix}")


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        # One object per line for CI log collectors
        return logging.Formatter(JSON_FORMAT)
    return logging.Formatter(STANDARD_FORMAT)


def _add_file_handler(root_logger: logging.Logger, formatter: logging.Formatter,
                      level: int, log_file: str, max_file_size_mb: int,
                      backup_count: int) -> None:
    """Attach a rotating handler writing to a per-run timestamped file.

    Failures are reported on the console handler; file logging is optional.
    """
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.logging")
    try:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        timestamped_log_file = _generate_timestamped_filename(log_file)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=timestamped_log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        )
    except OSError as e:
        logger.warning(f"Failed to setup file logging to {log_file}: {e}")
        return

    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
    logger.info(f"File logging enabled: {timestamped_log_file} "
                f"(max: {max_file_size_mb}MB, backups: {backup_count})")


def setup_logging(level: str = "INFO", format_type: str = "standard",
                  log_file: Optional[str] = None, max_file_size_mb: int = 100,
                  backup_count: int = 10) -> logging.Logger:
    """Configure the root logger for a size tracking run.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL); unknown names mean INFO
        format_type: "standard" or "json"
        log_file: Optional log file path, enables rotating file logging
        max_file_size_mb: Maximum size of each log file in MB before rotation
        backup_count: Number of rotated log files to keep

    Returns:
        The ``bundle_size`` package logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = _build_formatter(format_type)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            numeric_level if numeric_level <= logging.DEBUG else max(numeric_level, logging.WARNING))

    if log_file:
        _add_file_handler(root_logger, formatter, numeric_level, log_file,
                          max_file_size_mb, backup_count)

    return logging.getLogger(ROOT_LOGGER_NAME)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``bundle_size`` namespace.

    Module names already inside the package are used as-is.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
