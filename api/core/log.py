"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this only decides the
level and format once, at app startup.
"""

from __future__ import annotations

import logging

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging() -> None:
    level = logging.getLevelName(config.log_level())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
