"""
Logging utilities for epub-pagelist.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached by the application through ``configure_logging`` (from a
PageListConfig) or ``setup_logger`` (explicit arguments).
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

PACKAGE_LOGGER = "pagelist"


def resolve_level(level: Union[int, str]) -> int:
    """Turn a level name from the config file ("DEBUG", "info") into a logging constant."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logger(
    name: str,
    log_file: Optional[Union[str, Path]] = None,
    level: Union[int, str] = logging.INFO,
    console: bool = True
) -> logging.Logger:
    """
    Set up a logger with a stderr handler and an optional log file.

    Existing handlers of the logger are closed and replaced, so calling this
    twice does not duplicate output.
    """
    level = resolve_level(level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    # stdout is reserved for command output
    if console:
        _attach(logger, logging.StreamHandler(sys.stderr), level)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(log_file, encoding='utf-8'), level)

    return logger


def configure_logging(config, verbose: bool = False, console: bool = True) -> logging.Logger:
    """
    Configure the package logger from a PageListConfig.

    ``verbose`` forces DEBUG regardless of ``config.log_level``.
    """
    level = logging.DEBUG if verbose else config.log_level
    return setup_logger(PACKAGE_LOGGER, log_file=config.log_file, level=level, console=console)
