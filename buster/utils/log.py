"""Logging setup for the command-line entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def resolve_log_level(*, debug: bool = False, quiet: bool = False) -> int:
    """Map CLI verbosity flags to a logging level. Debug wins over quiet."""
    if debug:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO


def configure_logging(*, debug: bool = False, quiet: bool = False) -> int:
    """Configure the ``buster`` logger hierarchy and return the applied level."""
    level = resolve_log_level(debug=debug, quiet=quiet)
    logging.basicConfig(format=LOG_FORMAT, level=level, force=True)
    logging.getLogger("buster").setLevel(level)
    return level
