"""
Logger utility for consistent logging across the repository layer.

Features:
- Consistent log format across all modules
- Log level driven by the LOG_LEVEL and DEBUG settings
- Stream handler to stdout for easy viewing in console/terminal
- Rotating file handler for errors
- Prevents duplicate log handlers when called multiple times
"""

import logging
import logging.handlers
import sys
from typing import Optional
from pathlib import Path

from infrastructure_base.utils.config import get_settings

# Default log format
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
VERBOSE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def _resolve_level() -> int:
    settings = get_settings()
    if settings.DEBUG:
        return logging.DEBUG
    return getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

def setup_logging(log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure global logging for applications using the repository layer.

    Args:
        log_dir: Directory for the rotating error log. Defaults to the
            LOG_DIR setting.

    Returns:
        logging.Logger: The package logger
    """
    settings = get_settings()
    log_level = _resolve_level()

    # Create logs directory if it doesn't exist
    log_path = Path(log_dir or settings.LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates when reloading
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    verbose_formatter = logging.Formatter(VERBOSE_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    standard_formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(standard_formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    error_file_handler = logging.handlers.RotatingFileHandler(
        log_path / "error.log",
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5
    )
    error_file_handler.setLevel(logging.ERROR)
    error_file_handler.setFormatter(verbose_formatter)
    root_logger.addHandler(error_file_handler)

    # SQL echo only when debugging
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )

    logger = logging.getLogger('infrastructure_base')
    logger.info(f"Logging initialized with level {logging.getLevelName(log_level)}")

    return logger

def get_logger(name: Optional[str] = None, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger instance with consistent formatting.

    If neither the logger nor the root logger has handlers, a stdout handler
    is attached so messages are visible before ``setup_logging`` runs.

    Args:
        name: Logger name, usually ``__name__``.
        level: Explicit logging level. If None, uses LOG_LEVEL/DEBUG.

    Returns:
        logging.Logger: Configured logger instance

    Example:
        ```python
        from infrastructure_base.utils.logger import get_logger

        logger = get_logger(__name__)
        logger.debug("Executing dbo.GetCustomers")
        ```
    """
    if level is None:
        level = _resolve_level()

    logger = logging.getLogger(name or __name__)
    logger.setLevel(level)

    root_logger = logging.getLogger()
    if not logger.handlers and not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
