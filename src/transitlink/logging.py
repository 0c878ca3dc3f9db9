"""Logging setup shared by the planner, applier and CLI."""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Logger for a transitlink module (pass ``__name__``)."""
    return logging.getLogger(name)


def set_global_log_level(level: int | str) -> None:
    """
    Route log records to stderr at the given level.

    Accepts a level number or a name such as "info". Replaces any handlers
    installed by an earlier call, so the CLI can call it once per invocation.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("transitlink").setLevel(level)
