"""Logger access for rubricmap.

Every module logs under the ``rubricmap`` namespace. Nothing is printed until
:func:`configure_logging` runs, which the CLI does on startup; library users
are free to attach their own handlers instead.
"""

from __future__ import annotations

import logging

LOGGER_NAME = "rubricmap"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"

_handler: logging.Handler | None = None


def get_logger(suffix: str | None = None) -> logging.Logger:
    """Return the shared library logger, or one of its children."""
    if suffix:
        return logging.getLogger(f"{LOGGER_NAME}.{suffix}")
    return logging.getLogger(LOGGER_NAME)


def _stream_handler(fmt: str, datefmt: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    return handler


def configure_logging(
    level: str | None = None,
    *,
    force: bool = False,
    fmt: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
) -> logging.Logger:
    """Attach a stderr handler to the ``rubricmap`` logger and set its level.

    Repeated calls only change the level. ``force=True`` drops every handler on
    the logger and installs a fresh one built from ``fmt`` and ``datefmt``.
    Records stop at the ``rubricmap`` logger so a configured root logger does
    not print them twice.
    """
    global _handler
    logger = get_logger()
    if level:
        logger.setLevel(level.upper())

    if force:
        logger.handlers.clear()
        _handler = None
    if _handler is None or _handler not in logger.handlers:
        _handler = _stream_handler(fmt, datefmt)
        logger.addHandler(_handler)

    logger.propagate = False
    return logger
