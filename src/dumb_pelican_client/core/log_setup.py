"""Logging setup for the CLI.

Only the `dumb_pelican_client` logger tree is configured; the root logger is
left alone so embedding applications (and pytest) keep their own handlers.
"""

from __future__ import annotations

import logging
import sys

from dumb_pelican_client.core.errors import ArgumentError

LOG_DEFAULT_LEVEL = "warning"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)-24s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_ROOT_LOGGER = "dumb_pelican_client"

_LEVELS: dict[str, int] = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    # stdlib has no TRACE; debug is the most verbose we emit.
    "trace": logging.DEBUG,
}


def parse_log_level(name: str) -> int:
    try:
        return _LEVELS[name.strip().lower()]
    except KeyError as exc:
        choices = ", ".join(_LEVELS)
        raise ArgumentError(f"unknown log level {name!r} (expected one of: {choices})") from exc


def configure_logging(level: str = LOG_DEFAULT_LEVEL) -> logging.Logger:
    """Send package logs to stderr at `level`.

    Safe to call more than once: the handler installed by a previous call is
    replaced rather than duplicated.
    """

    numeric = parse_log_level(level)
    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_dumb_pelican", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler._dumb_pelican = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger
