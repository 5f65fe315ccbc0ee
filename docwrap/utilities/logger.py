"""
Logging for docwrap.

Everything in the package logs through get_logger(), so a logger passed to set_logger() takes effect everywhere,
including in modules that were imported before the call. No handlers are installed here: configure them in your app.

Levels used:
    DEBUG    every store call, with its duration
    INFO     failed validations and constraint violations returned as OperationResults
    WARNING  destructive or surprising outcomes (dropped collections, removes that deleted nothing)
"""

import logging

DEFAULT_LOGGER_NAME = 'docwrap'

_default_logger: logging.Logger = logging.getLogger(DEFAULT_LOGGER_NAME)
_default_logger.setLevel(logging.WARNING)  # Default to WARNING level to avoid spam

logger: logging.Logger = _default_logger

def set_logger(custom_logger: logging.Logger | None) -> None:
    """Allow users to provide their own logger. Pass None to go back to the 'docwrap' logger."""
    global logger
    logger = custom_logger if custom_logger is not None else _default_logger

def get_logger() -> logging.Logger:
    return logger

def set_log_level(level: int | str) -> None:
    """Set the logging level of the logger currently in use.

    Args:
        level: logging.DEBUG, logging.INFO, ... or the level's name, e.g. "DEBUG"
    """
    logger.setLevel(level)
