"""
Console logging for the official matching service.

Level names are coloured when writing to a terminal so matcher decisions
and notification failures stand out while developing.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

#colour codes for console output
class LogColours:
    RESET = "\033[0m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    GRAY = "\033[90m"


class ColouredFormatter(logging.Formatter):
    """Formatter that wraps the level name in an ANSI colour."""

    COLOURS = {
        logging.DEBUG: LogColours.GRAY,
        logging.INFO: LogColours.BLUE,
        logging.WARNING: LogColours.YELLOW,
        logging.ERROR: LogColours.RED,
        logging.CRITICAL: LogColours.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        colour = self.COLOURS.get(record.levelno)
        if colour:
            record.levelname = f"{colour}{levelname}{LogColours.RESET}"

        try:
            return super().format(record)
        finally:
            #other handlers share the record
            record.levelname = levelname


def setup_logging(level: str = "INFO", use_colours: Optional[bool] = None) -> None:
    """
    Configure the root logger with a single stderr handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_colours: Force coloured level names on or off. Defaults to
            colouring only when stderr is a terminal.

    Example:
        >>> setup_logging("DEBUG")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if use_colours is None:
        use_colours = sys.stderr.isatty()

    formatter_cls = ColouredFormatter if use_colours else logging.Formatter

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter_cls(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    #force replaces handlers installed earlier (uvicorn, pytest)
    logging.basicConfig(level=log_level, handlers=[console_handler], force=True)

    #outbound notification calls are noisy at debug
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Matching official")
    """
    return logging.getLogger(name)
