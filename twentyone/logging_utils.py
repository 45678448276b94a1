"""Logging setup for programs embedding the game engine."""

import logging

from config import config


def setup_logging(level: str | None = None) -> None:
    """Call once at program start; engine modules log under ``twentyone.*``."""
    level = (level or config.logging.level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
