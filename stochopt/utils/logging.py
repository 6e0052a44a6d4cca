"""
Logging setup for stochopt.

Every stochopt module logs through `logging.getLogger(__name__)`, so all
records flow up to the package logger 'stochopt'. Handlers live only there,
installed by `setup_logging`; individual subpackages can be quieted or made
verbose through `levels`.

Example:
    >>> from stochopt.utils import setup_logging
    >>> setup_logging(log_file='runs/quadratic.log',
    ...               levels={'stochopt.training.updaters': logging.ERROR})
"""

import sys
import logging
from pathlib import Path
from typing import Dict, Optional, Union

PACKAGE_LOGGER = 'stochopt'

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%H:%M:%S'

# Marks handlers installed here, so repeated calls replace only those
_HANDLER_TAG = '_stochopt_handler'


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        # Color a copy; the file handler formats the same record
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname)
        if color:
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    colored: bool = True,
    levels: Optional[Dict[str, int]] = None,
) -> logging.Logger:
    """
    Attach console and optional file handlers to the 'stochopt' logger.

    Handlers from an earlier call are replaced; handlers the application
    added itself are left in place.

    Args:
        level: Level of the package logger and its handlers
        log_file: Also write plain-text records to this file
        colored: Color level names on the console
        levels: Per-module overrides, e.g. {'stochopt.training.loop': logging.DEBUG}

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler(sys.stdout)
    formatter_class = ColoredFormatter if colored else logging.Formatter
    console.setFormatter(formatter_class(LOG_FORMAT, datefmt=DATE_FORMAT))
    _install(logger, console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        _install(logger, file_handler)

    for name, module_level in (levels or {}).items():
        if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
            raise ValueError(f"{name!r} is not a stochopt logger")
        logging.getLogger(name).setLevel(module_level)

    if log_file is not None:
        logger.debug(f"Logging to file: {log_file}")

    return logger


def _install(logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_TAG, True)
    logger.addHandler(handler)
