# #
# Copyright 2025 Ghent University
#
# This file is part of findblas,
# originally created by the HPC team of Ghent University (http://ugent.be/hpc/en),
# with support of Ghent University (http://ugent.be/hpc),
# the Flemish Supercomputer Centre (VSC) (https://www.vscentrum.be),
# Flemish Research Foundation (FWO) (http://www.fwo.be/en)
# and the Department of Economy, Science and Innovation (EWI) (http://www.ewi-vlaanderen.be/en).
#
# findblas is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation v2.
#
# findblas is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with findblas.  If not, see <http://www.gnu.org/licenses/>.
# #
"""
Logging for findblas, on top of the logging module from the Python standard library.

All findblas loggers are children of a single 'findblas' logger. Handlers (to screen and/or to file)
are attached to that logger, and the log level and log format apply to all findblas loggers at once.
Logging to screen can be colorized via coloredlogs.

usage:

>>> from findblas.base import fancylogger
>>> fancylogger.logToFile('/tmp/findblas.log')
>>> fancylogger.setLogLevelDebug()
>>> log = fancylogger.getLogger('libsearch')
>>> log.info("Looking for %s", 'libblas.so')
"""
import logging
import logging.handlers
import os
import sys
from collections import namedtuple

import coloredlogs
import humanfriendly.terminal


ROOT_LOGGER_NAME = 'findblas'

DEFAULT_LOGGING_FORMAT = '%(asctime)-15s %(levelname)-10s %(name)-15s %(message)s'

# max. size of log file before it is rotated (0 implies no rotation), and number of rotated log files to keep
MAX_BYTES = 100 * 1024 * 1024
BACKUPCOUNT = 10

Colorize = namedtuple('Colorize', 'AUTO ALWAYS NEVER')('auto', 'always', 'never')

# format used for handlers that are created from now on
_log_format = DEFAULT_LOGGING_FORMAT

# active handlers, indexed by (kind, target)
_handlers = {}


def getLevelInt(level_name):
    """Return the numeric log level that corresponds to the given level name (e.g. 'DEBUG')."""
    if not isinstance(level_name, str):
        raise TypeError("Log level name must be a string, found %s (type %s)" % (level_name, type(level_name)))

    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError("Unknown log level: %s" % level_name)

    return level


class FancyLogger(logging.getLoggerClass()):
    """Logger class that can also log an error and raise an exception in one go."""

    # exception class used by raiseException, can be redefined in derived logger classes
    RAISE_EXCEPTION_CLASS = Exception

    def raiseException(self, message, exception=None):
        """
        Log message as an error, and raise an exception with that message.

        If an exception is being handled, its details are added to the message.

        :param exception: exception class to raise (RAISE_EXCEPTION_CLASS if None)
        """
        if exception is None:
            exception = self.RAISE_EXCEPTION_CLASS

        detail = sys.exc_info()[1]
        if detail is not None:
            message = "%s (%s)" % (message, detail)

        self.error(message)
        raise exception(message)

    def setLevelName(self, level_name):
        """Set log level of this logger, by name."""
        self.setLevel(getLevelInt(level_name))


def getLogger(name=None):
    """
    Return logger with specified name, which is a child of the 'findblas' logger.
    The 'findblas' logger itself is returned if no name is specified.
    """
    if name:
        return logging.getLogger('%s.%s' % (ROOT_LOGGER_NAME, name))
    return logging.getLogger(ROOT_LOGGER_NAME)


def _formatter_class(colorize, stream):
    """Return formatter class for logging to the given stream (coloredlogs.ColoredFormatter or logging.Formatter)."""
    if colorize == Colorize.ALWAYS:
        use_colors = True
    elif colorize == Colorize.AUTO:
        use_colors = humanfriendly.terminal.terminal_supports_colors(stream)
    elif colorize == Colorize.NEVER:
        use_colors = False
    else:
        raise ValueError("Unknown value for colorize: %s (known values: %s)" % (colorize, ', '.join(Colorize)))

    if use_colors:
        return coloredlogs.ColoredFormatter
    return logging.Formatter


def _toggle_handler(key, enable, create_handler):
    """
    Attach a handler to (or detach it from) the 'findblas' logger.

    :param key: key for handler in the registry of active handlers
    :param enable: attach handler (True) or detach it (False)
    :param create_handler: function that creates the handler when it is not active yet
    :return: the handler that was attached or detached (None if there was nothing to detach)
    """
    logger = getLogger()
    handler = _handlers.get(key)

    if enable:
        if handler is None:
            handler = create_handler()
            logger.addHandler(handler)
            _handlers[key] = handler
    elif handler is not None:
        logger.removeHandler(handler)
        handler.close()
        del _handlers[key]

    return handler


def logToScreen(enable=True, stdout=False, colorize=Colorize.NEVER):
    """
    Enable (or disable) logging to screen: to stderr, or to stdout if 'stdout' is True.

    :return: the stream handler
    """
    stream = sys.stdout if stdout else sys.stderr

    def create_handler():
        handler = logging.StreamHandler(stream)
        handler.setFormatter(_formatter_class(colorize, stream)(_log_format))
        return handler

    return _toggle_handler(('screen', 'stdout' if stdout else 'stderr'), enable, create_handler)


def logToFile(filename, enable=True, max_bytes=MAX_BYTES, backup_count=BACKUPCOUNT):
    """
    Enable (or disable) logging to the specified file, which is rotated once it reaches max_bytes in size.
    The directory that holds the log file is created if it doesn't exist yet.

    :return: the file handler
    """
    def create_handler():
        dirpath = os.path.dirname(filename)
        if dirpath:
            try:
                os.makedirs(dirpath, exist_ok=True)
            except OSError as err:
                raise OSError("Failed to create directory for log file %s: %s" % (filename, err)) from err

        handler = logging.handlers.RotatingFileHandler(filename, maxBytes=max_bytes, backupCount=backup_count,
                                                       encoding='utf-8')
        handler.setFormatter(logging.Formatter(_log_format))
        return handler

    return _toggle_handler(('file', filename), enable, create_handler)


def setLogLevel(level):
    """Set log level for all findblas loggers, either by name or as an integer value."""
    if isinstance(level, str):
        level = getLevelInt(level)
    getLogger().setLevel(level)


def setLogLevelDebug():
    setLogLevel('DEBUG')


def setLogLevelInfo():
    setLogLevel('INFO')


def setLogLevelWarning():
    setLogLevel('WARNING')


def setLogLevelError():
    setLogLevel('ERROR')


def setLogFormat(f_format):
    """Set log format, for handlers that are enabled after this."""
    global _log_format
    _log_format = f_format


logging.setLoggerClass(FancyLogger)
