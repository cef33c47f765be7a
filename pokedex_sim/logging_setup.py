"""Root logger configuration driven by :class:`~pokedex_sim.config.Settings`.

Usage:
    from pokedex_sim.config import load_settings
    from pokedex_sim.logging_setup import setup_logging
    setup_logging(load_settings())
"""
from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import IO, Optional, Union

from .config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE_NAME = "pokedex.log"
LOG_FILE_MAX_BYTES = 2_000_000
LOG_FILE_BACKUPS = 3


def setup_logging(
    settings: Optional[Settings] = None,
    *,
    level: Union[int, str, None] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Attach console (and, with ``settings.log_dir``, rotating file) handlers.

    ``level`` overrides ``settings.log_level``, e.g. for a CLI ``--debug``.
    Calling this again once the root logger has handlers changes nothing.
    """

    settings = settings or Settings()
    root = logging.getLogger()
    if root.handlers:
        return root
    root.setLevel(level if level is not None else settings.log_level)

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler(stream or sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if settings.log_dir:
        directory = Path(settings.log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            directory / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    return root
