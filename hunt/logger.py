"""
Design (logger.py)
- Purpose: One place to create module loggers and configure the root handler.
- Inputs: Logger names, log level.
- Outputs: logging.Logger instances.
- Side effects: setup_logging() attaches a stream handler to the root logger (once).
- Thread-safety: logging handlers are thread-safe; setup_logging is meant for startup.
"""

import logging

from .config import LOG_DATEFMT, LOG_FORMAT

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return the module logger for `name` (e.g. __name__ -> 'hunt.storage')."""
    return logging.getLogger(name)


def setup_logging(level: int = logging.INFO) -> None:
    """
    Purpose: Configure root logging for the app with a timestamped console handler.
    Inputs: level (logging level for root and handler).
    Side effects: Adds one StreamHandler to the root logger; repeated calls only change the level.
    """
    global _configured
    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(make_formatter())
    root.addHandler(handler)
    _configured = True


def make_formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
