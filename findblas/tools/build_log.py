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
findblas logger and log utilities, including our own FindBlasError class.
"""
import logging
import os
import sys
import tempfile
from enum import IntEnum

from findblas.base import fancylogger
from findblas.base.exceptions import LoggedException
from findblas.tools.version import this_is_findblas

# findblas message prefix
FB_MSG_PREFIX = "=="


class FindBlasExit(IntEnum):
    """
    Table of exit codes
    """
    SUCCESS = 0
    ERROR = 1
    # core errors
    OPTION_ERROR = 2
    VALUE_ERROR = 3
    # errors on missing things
    MISSING_BLAS = 30
    MISSING_COMPILER = 31
    # errors on specific task failures
    CACHE_ERROR = 40
    FAIL_LINK_CHECK = 41


class FindBlasError(LoggedException):
    """
    FindBlasError is raised when findblas can not continue;
    its exit code determines the exit code of the 'findblas' command.
    """
    LOC_INFO_TOP_PKG_NAMES = ['findblas']
    # always include location where error was raised from, even under 'python -O'
    INCLUDE_LOCATION = True

    def __init__(self, msg, *args, exit_code=FindBlasExit.ERROR, **kwargs):
        if args:
            msg = msg % args
        LoggedException.__init__(self, msg, **kwargs)
        # message without location info
        self.msg = msg
        self.exit_code = exit_code

    def __str__(self):
        return self.msg


class FindBlasLog(fancylogger.FancyLogger):
    """
    The findblas logger: errors are raised as FindBlasError, and logged exceptions include where they occurred.
    """
    RAISE_EXCEPTION_CLASS = FindBlasError

    def caller_info(self):
        """Return string with location of the caller of a log method, relative to the findblas package (if possible)."""
        path, line, function_name = self.findCaller(stacklevel=3)[:3]
        path_parts = path.split(os.path.sep)
        if 'findblas' in path_parts:
            path = os.path.join(*path_parts[path_parts.index('findblas'):])
        return "(at %s:%s in %s)" % (path, line, function_name)

    def exception(self, msg, *args):
        """Log message for exception that is being handled, along with location info."""
        fancylogger.FancyLogger.exception(self, "findblas encountered an exception %s: %s" % (self.caller_info(), msg),
                                          *args)


LOGGING_FORMAT = FB_MSG_PREFIX + ' %(asctime)s %(filename)s:%(lineno)s %(levelname)s %(message)s'
fancylogger.setLogFormat(LOGGING_FORMAT)

# all findblas loggers created from now on are FindBlasLog instances
logging.setLoggerClass(FindBlasLog)

# log messages are dropped until a log file (or logging to screen) is enabled
fancylogger.getLogger().addHandler(logging.NullHandler())


def init_logging(logfile, logtostdout=False, silent=False, colorize=fancylogger.Colorize.AUTO):
    """
    Start logging: to stdout, or to the specified log file (a temporary log file is created if it is None).

    :return: tuple with logger and path to log file
    """
    if logtostdout:
        fancylogger.logToScreen(enable=True, stdout=True, colorize=colorize)
    else:
        if logfile is None:
            fd, logfile = tempfile.mkstemp(suffix='.log', prefix='findblas-')
            os.close(fd)

        fancylogger.logToFile(logfile, max_bytes=0)
        print_msg("Temporary log file in case of crash %s", logfile, silent=silent)

    return fancylogger.getLogger(), logfile


def log_start(log, command_line):
    """Log startup info."""
    log.info(this_is_findblas())
    log.info("Command line: %s", ' '.join(command_line))


def stop_logging(logfile, logtostdout=False):
    """Stop logging."""
    if logtostdout:
        fancylogger.logToScreen(enable=False, stdout=True)
    if logfile is not None:
        fancylogger.logToFile(logfile, enable=False)


def _pop_kwargs(func_name, kwargs, **defaults):
    """Return values for supported named arguments (with defaults), complain about unknown ones."""
    res = dict((key, kwargs.pop(key, default)) for key, default in defaults.items())
    if kwargs:
        raise FindBlasError("Unknown named arguments passed to %s: %s", func_name, kwargs)
    return res


def print_msg(msg, *args, **kwargs):
    """
    Print a message.

    :param log: logger instance to also log message to
    :param silent: be silent (only log, don't print)
    :param prefix: include message prefix characters ('== ')
    :param newline: end message with newline
    :param stderr: print to stderr rather than stdout
    """
    if args:
        msg = msg % args
    opts = _pop_kwargs('print_msg', kwargs, log=None, silent=False, prefix=True, newline=True, stderr=False)

    if opts['log']:
        opts['log'].info(msg)

    if not opts['silent']:
        if opts['prefix']:
            msg = "%s %s" % (FB_MSG_PREFIX, msg)
        if opts['newline']:
            msg += '\n'
        (sys.stderr if opts['stderr'] else sys.stdout).write(msg)


def print_error(msg, *args, **kwargs):
    """
    Print error message and exit findblas (with exit code 1 by default).

    If exit_on_error is disabled and a logger is specified, a FindBlasError is raised instead.
    """
    if args:
        msg = msg % args
    opts = _pop_kwargs('print_error', kwargs, exit_code=None, log=None, exit_on_error=True, silent=False)

    exit_code = opts['exit_code']
    if exit_code is None:
        exit_code = FindBlasExit.ERROR

    if opts['exit_on_error']:
        if not opts['silent']:
            sys.stderr.write("ERROR: %s\n" % msg)
        sys.exit(exit_code)
    elif opts['log'] is not None:
        raise FindBlasError(msg, exit_code=exit_code)


def print_warning(msg, *args, **kwargs):
    """Print warning message (to stderr)."""
    if args:
        msg = msg % args
    opts = _pop_kwargs('print_warning', kwargs, log=None, silent=False)

    if opts['log']:
        opts['log'].warning(msg)
    if not opts['silent']:
        sys.stderr.write("\nWARNING: %s\n\n" % msg)
