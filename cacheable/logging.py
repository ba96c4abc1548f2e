"""
Helpers for configuring log handlers for scripts and test runs that use the cacheable package.  The package itself only
writes to module loggers and never configures handlers on import.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from logging import LogRecord, Logger, Filter, Formatter
from typing import Optional, Union, Collection, Callable, Mapping

from tzlocal import get_localzone

__all__ = [
    'init_logging', 'stdout_level', 'create_filter', 'DatetimeFormatter', 'ENTRY_FMT_DETAILED', 'TRACE', 'VERBOSE'
]
log = logging.getLogger(__name__)

ENTRY_FMT_DETAILED = '%(asctime)s %(levelname)s %(threadName)s %(name)s %(lineno)d %(message)s'

VERBOSE = 19
TRACE = 9
LEVEL_NAMES = {VERBOSE: 'VERBOSE', TRACE: 'TRACE'}

_NotSet = object()

Verbosity = Union[int, bool, None]
OptStrs = Optional[Collection[str]]


def init_logging(
    verbosity: Verbosity = 0,
    *,
    names: OptStrs = _NotSet,
    date_fmt: str = None,
    millis: bool = False,
    entry_fmt: str = None,
    replace_handlers: bool = True,
    lvl_names: Mapping[int, str] = None,
    set_levels: Mapping[str, int] = None,
) -> list[Logger]:
    """
    Configures stream handlers for stdout and stderr so that logs with level logging.INFO and below are sent to stdout
    and logs with level logging.WARNING and above are sent to stderr.

    The verbosity argument affects the log level that is set for stdout:
    - 0: 20 = logging.INFO (default)
    - 1: 19 = VERBOSE
    - 2: 10 = logging.DEBUG
    - 3: 9 = TRACE (cache hits are logged at this level)

    :param verbosity: Higher values increase stdout output verbosity.  Default (0) results in only allowing logging.INFO
      messages and above to go to stdout.
    :param names: The names of the loggers for which handlers should be configured.  If set to None, then the root
      logger will be configured.  If not specified, then 2 loggers are configured: one for ``__main__``, and one for
      the ``cacheable`` package.
    :param date_fmt: The `datetime format code
      <https://docs.python.org/3/library/datetime.html#strftime-and-strptime-format-codes>`_ to use for timestamps
    :param millis: Include milliseconds in the datetime format (ignored if ``date_fmt`` is specified)
    :param entry_fmt: The `log message format <https://docs.python.org/3/library/logging.html#logrecord-attributes>`_
      to use.  If not specified, '%(message)s' is used when verbosity < 3, otherwise :data:`ENTRY_FMT_DETAILED`.
    :param replace_handlers: Remove any existing handlers on loggers before adding handlers to them
    :param lvl_names: Mapping of {int(level): str(name)} to register in addition to VERBOSE and TRACE
    :param set_levels: Mapping of {str(logger name): int(level)} to set the log level for the given loggers
    :return: The loggers that were configured
    """
    for level, name in {**LEVEL_NAMES, **(lvl_names or {})}.items():
        logging.addLevelName(level, name)

    loggers = _get_loggers(names, replace_handlers)
    date_fmt = date_fmt or ('%Y-%m-%d %H:%M:%S.%f %Z' if millis else '%Y-%m-%d %H:%M:%S %Z')
    entry_fmt = entry_fmt or (ENTRY_FMT_DETAILED if verbosity and verbosity > 2 else '%(message)s')
    formatter = DatetimeFormatter(entry_fmt, date_fmt)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(stdout_level(verbosity))
    stdout_handler.addFilter(create_filter(lambda r: r.levelno < logging.WARNING))
    stdout_handler.name = 'stdout'

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.INFO)
    stderr_handler.addFilter(create_filter(lambda r: r.levelno >= logging.WARNING))
    stderr_handler.name = 'stderr'

    for logger in loggers:
        logger.setLevel(logging.NOTSET)
        for handler in (stdout_handler, stderr_handler):
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    if set_levels:
        if not isinstance(set_levels, dict):
            raise TypeError('levels must be a dict of logger_name=level pairs')
        for name, lvl in set_levels.items():
            logging.getLogger(name).setLevel(lvl)

    return loggers


def stdout_level(verbosity: Verbosity) -> int:
    if not verbosity:
        return logging.INFO
    elif verbosity == 1:
        return VERBOSE
    return max(logging.DEBUG + 2 - verbosity, logging.NOTSET)


def _get_loggers(names: OptStrs, replace_handlers: bool) -> list[Logger]:
    if names is _NotSet:
        names = ('__main__', __name__.split('.', 1)[0])
    elif names is None:
        names = (None,)
    elif isinstance(names, str):
        names = (names,)

    loggers = [logging.getLogger(name) for name in names]
    if replace_handlers:
        for logger in loggers:
            while logger.handlers:
                logger.handlers[0].close()
                del logger.handlers[0]
    return loggers


def create_filter(filter_fn: Callable[[LogRecord], bool]) -> Filter:
    """
    :param filter_fn: A function that accepts 1 parameter, the record, and returns True if the record should be logged
    :return: A custom, initialized subclass of logging.Filter using the given filter function
    """
    class CustomLogFilter(Filter):
        def filter(self, record: LogRecord) -> bool:
            return filter_fn(record)

    return CustomLogFilter()


class DatetimeFormatter(Formatter):
    """Enables use of ``%f`` (micro/milliseconds) in datetime formats."""
    _local_tz = get_localzone()

    def formatTime(self, record: LogRecord, datefmt: str = None) -> str:
        dt = datetime.fromtimestamp(record.created, self._local_tz)
        if datefmt:
            return dt.strftime(datefmt)
        else:
            return self.default_msec_format % (dt.strftime(self.default_time_format), record.msecs)
