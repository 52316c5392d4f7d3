"""
Logging setup shared by the API and the command line scripts.
"""
import logging

from walk_randomizer.core.config import settings

LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root handler once and set the package log level."""
    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    logging.getLogger("walk_randomizer").setLevel((level or settings.LOG_LEVEL).upper())
