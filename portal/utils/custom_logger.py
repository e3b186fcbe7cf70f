### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Custom Logger Setup -
# Author: Bailey Dixon
# Date: 09/02/2026
# Python: 3.11
####################

# Standard Imports
import logging
from datetime import datetime
from pathlib import Path


class CustomFormatter(logging.Formatter):
    """Portal log formatter: HH:MM:SS AM/PM - name - LEVEL: message"""

    def format(self, record):
        """
        Format a log record

        Args:
            record: LogRecord instance

        Returns:
            Formatted log string
        """
        timestamp = datetime.fromtimestamp(record.created).strftime("%I:%M:%S %p")
        formatted_msg = f"{timestamp} - {record.name} - {record.levelname}: {record.getMessage()}"

        if record.exc_info:
            formatted_msg += "\n" + self.formatException(record.exc_info)

        return formatted_msg


def _resolve_level(level: int | str) -> int:
    """Accept either a logging constant or a name like "DEBUG" """
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(str(level).upper(), logging.INFO)


def setup_logger(
    name: str,
    level: int | str = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    logs_dir: str | Path = "logs",
) -> logging.Logger:
    """
    Set up a portal logger

    Args:
        name: Logger name (typically __name__)
        level: Logging level, constant or name (default: INFO)
        log_to_file: Whether to log to a dated file under logs_dir
        log_to_console: Whether to log to the console
        logs_dir: Directory for log files

    Returns:
        Configured logger instance

    Example:
        logger = setup_logger(__name__)
        logger.info("This is an info message")
    """
    level = _resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers if logger already exists
    if logger.handlers:
        return logger

    formatter = CustomFormatter()

    if log_to_file:
        logs_path = Path(logs_dir)
        logs_path.mkdir(parents=True, exist_ok=True)

        log_filename = f"tenant_portal_{datetime.now().strftime('%Y-%m-%d')}.log"
        file_handler = logging.FileHandler(logs_path / log_filename, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger configured from portal settings

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    from portal.config import get_settings

    settings = get_settings()
    return setup_logger(name, level=settings.log_level, log_to_file=settings.log_to_file)
