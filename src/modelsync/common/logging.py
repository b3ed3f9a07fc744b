"""Shared logging helpers for modelsync."""

from __future__ import annotations

import logging

NOISY_LOGGERS = ("sqlalchemy.engine", "openpyxl")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger with a terse CLI format.

    ``force=True`` replaces existing handlers, which is how ``--verbose`` lowers
    the level after startup. Library loggers stay at WARNING unless the root
    level is DEBUG.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    library_level = logging.NOTSET if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
