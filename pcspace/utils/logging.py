"""Package-wide logging for pcspace.

Console output is colored when attached to a terminal. The default level is
read from the ``PCSPACE_LOG_LEVEL`` environment variable.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "pcspace"


class Colors:
    """ANSI escape codes used by the console formatter."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    BRIGHT_BLACK = "\033[90m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name of console records."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BRIGHT_BLACK,
        logging.INFO: Colors.BRIGHT_BLUE,
        logging.WARNING: Colors.BRIGHT_YELLOW,
        logging.ERROR: Colors.BRIGHT_RED,
        logging.CRITICAL: Colors.RED + Colors.BOLD,
    }

    def __init__(self, fmt: str = None, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors and self._supports_color()

    @staticmethod
    def _supports_color() -> bool:
        if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
            return False
        return sys.platform != "win32"

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            # Records are shared between handlers, so color a copy.
            record = logging.makeLogRecord(record.__dict__)
            color = self.LEVEL_COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        return super().format(record)


def _to_level(level: str | int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper())
    return level


def setup_logger(
    name: str = LOGGER_NAME,
    level: str | int = logging.INFO,
    log_file: Optional[str | Path] = None,
    console: bool = True,
    use_colors: bool = True,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """Setup a logger with console and/or file output.

    Args:
        name: Logger name.
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for logging to file.
        console: Whether to log to console.
        use_colors: Whether to use colored output in console.
        format_string: Custom format string. If None, uses default.

    Returns:
        logging.Logger: Configured logger instance.

    Example:
        >>> logger = setup_logger("pcspace", level="DEBUG")
        >>> logger.info("Selecting informative components")
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    level = _to_level(level)
    logger.setLevel(level)

    if format_string is None:
        format_string = "[%(name)s] [%(levelname)s] %(message)s"

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        if use_colors:
            console_handler.setFormatter(ColoredFormatter(format_string))
        else:
            console_handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(
    name: str = LOGGER_NAME,
    level: Optional[str | int] = None,
) -> logging.Logger:
    """Get or create a logger.

    Child loggers (``pcspace.analysis`` and so on) are returned unconfigured
    and inherit the handlers of the package logger.

    Args:
        name: Logger name.
        level: Optional logging level. If None, uses existing level or INFO.

    Returns:
        logging.Logger: Logger instance.
    """
    logger = logging.getLogger(name)

    if name == LOGGER_NAME and not logger.handlers:
        setup_logger(name, level=level or logging.INFO)
    elif level is not None:
        logger.setLevel(_to_level(level))

    return logger


def set_log_level(level: str | int, name: str = LOGGER_NAME) -> None:
    """Set logging level for an existing logger and its handlers."""
    logger = logging.getLogger(name)
    level = _to_level(level)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def disable_logging(name: str = LOGGER_NAME) -> None:
    """Silence the given logger."""
    logging.getLogger(name).setLevel(logging.CRITICAL + 1)


def enable_logging(name: str = LOGGER_NAME, level: str | int = logging.INFO) -> None:
    """Re-enable a logger silenced with :func:`disable_logging`."""
    set_log_level(level, name)


def init_default_logger(
    level: str | int = None,
    log_file: Optional[str | Path] = None,
) -> logging.Logger:
    """Initialize the default pcspace logger.

    Args:
        level: Logging level. If None, uses INFO or PCSPACE_LOG_LEVEL env var.
        log_file: Optional log file path.
    """
    if level is None:
        level_str = os.environ.get("PCSPACE_LOG_LEVEL", "INFO")
        level = getattr(logging, level_str.upper(), logging.INFO)

    return setup_logger(
        name=LOGGER_NAME,
        level=level,
        log_file=log_file,
        console=True,
        use_colors=True,
    )


init_default_logger()
