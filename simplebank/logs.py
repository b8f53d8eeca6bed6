"""Logging setup for the mapper and its command line."""

from __future__ import annotations

import sys
from logging import DEBUG, INFO, Formatter, StreamHandler, getLogger
from types import TracebackType

DEFAULT_FORMAT = '%(levelname).1s %(asctime)s %(name)s . %(message)s'

# only log at DEBUG from the second verbosity level, they log per value
VERBOSE_LOGGERS = ('simplebank.mapper', 'simplebank.utils')

get = getLogger
log = get(__name__)


def init(debug_level: int = 0, log_exceptions: bool = True, fmt: str | None = None) -> None:
    """Install a stderr handler on the root logger unless one exists."""
    root_log = get()

    if root_log.handlers:
        return

    handler = StreamHandler()
    handler.setFormatter(Formatter(fmt or DEFAULT_FORMAT))

    root_log.addHandler(handler)
    root_log.setLevel(DEBUG if debug_level > 0 else INFO)

    for name in VERBOSE_LOGGERS:
        get(name).setLevel(DEBUG if debug_level > 1 else INFO)

    if log_exceptions:
        sys.excepthook = handle_exception


def handle_exception(
    etype: type[BaseException],
    evalue: BaseException,
    etb: TracebackType | None,
) -> None:
    """Log uncaught exceptions while letting Ctrl+C exit quietly."""
    if issubclass(etype, KeyboardInterrupt):
        sys.__excepthook__(etype, evalue, etb)
        return
    log.error('unhandled exception', exc_info=(etype, evalue, etb))
