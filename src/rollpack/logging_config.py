"""
Logging Configuration
Console and optional file logging for the 'rollpack' namespace.

The console gets a short format. A log file also records the module and line
of every record, so a pack that fails to render can be traced afterwards.
"""
import logging
import sys
from typing import Optional, Union

LOGGER_NAMESPACE = "rollpack"

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def resolve_level(level: Union[int, str]) -> int:
    """Level number from a number or a name such as 'debug'. Unknown names give INFO."""
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(str(level).strip().upper(), logging.INFO)


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'rollpack' logger.

    Args:
        level: Logging level, as a number (logging.DEBUG) or a name ("debug").
        log_file: Optional path of a log file, overwritten on each run.

    Returns:
        The configured namespace logger.
    """
    level = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    # Repeated CLI runs in one interpreter must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # 1. Console Handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    # 2. File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}.")
    return logger
