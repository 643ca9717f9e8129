"""
Logging configuration for plugin_settings.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from ..config import LoggingSettings

PACKAGE_LOGGER = "plugin_settings"
CONSOLE_FORMAT = "%(asctime)s : %(levelname)-8s : %(name)s : %(message)s"


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the level name."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        formatted = super().format(record)

        # Colour the level name only
        if record.levelname in formatted:
            formatted = formatted.replace(
                record.levelname, f"{color}{record.levelname}{reset}", 1
            )

        return formatted


class CSVFormatter(logging.Formatter):
    """CSV-safe formatter for file logging."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, self.datefmt)
        level = record.levelname.ljust(8)
        duration = f"{int(record.relativeCreated)} ms"
        module = record.name
        line_no = str(record.lineno)
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        # Standard CSV quote escaping
        message = message.replace('"', '""')

        return f'"{timestamp}";{level};"{duration}";"{module}";"{line_no}";"{message}"'


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Setup logging with console and file handlers.

    Args:
        settings: LoggingSettings to apply; None uses the default options
    """
    if settings is None:
        settings = LoggingSettings()

    console_enabled = settings.console_logging
    console_level = settings.console_log_level
    use_colors = settings.console_use_colors
    file_enabled = settings.file_logging
    log_file = settings.log_file_path

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)

    # Remove handlers from a previous setup
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    # Console handler - only if enabled
    if console_enabled:
        if use_colors:
            console_formatter: logging.Formatter = ColoredFormatter(
                fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S"
            )
        else:
            console_formatter = logging.Formatter(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S")

        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
        console_handler.setFormatter(console_formatter)
        package_logger.addHandler(console_handler)

    # File handler with rotation - only if enabled
    log_path = None
    if file_enabled:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)  # File always captures DEBUG
            file_handler.setFormatter(CSVFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
            package_logger.addHandler(file_handler)
        except OSError as e:
            # If file logging fails, just continue with console logging
            log_path = None
            package_logger.warning(f"Could not setup file logging: {e}")

    logger = logging.getLogger(__name__)
    logger.debug("Logging initialized")
    if console_enabled:
        logger.debug(f"Console logging: {console_level} (colors: {use_colors})")
    if log_path is not None:
        logger.debug(f"File logging: DEBUG at {log_path.absolute()}")
