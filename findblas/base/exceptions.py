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
Exceptions that log their message when they are created.
"""
import inspect
import os

from findblas.base import fancylogger


class LoggedException(Exception):
    """Exception that logs its message, including where it was raised from, when it is created."""

    # module that provides the getLogger function to obtain the default logger
    LOGGER_MODULE = fancylogger
    # name of the logger method used to log the message
    LOGGING_METHOD_NAME = 'error'
    # names of top-level packages, used to shorten the path in the location info
    LOC_INFO_TOP_PKG_NAMES = []
    # add location info to message (not under 'python -O')
    INCLUDE_LOCATION = __debug__

    def __init__(self, msg, *args, **kwargs):
        """
        Constructor.

        :param msg: exception message, may include %-style placeholders
        :param args: values for placeholders in exception message
        :param logger: logger to use (default logger if None)
        """
        if args:
            msg = msg % args

        if self.INCLUDE_LOCATION:
            location = self.location()
            if location:
                msg = "%s (at %s)" % (msg, location)

        logger = kwargs.get('logger') or self.LOGGER_MODULE.getLogger()
        getattr(logger, self.LOGGING_METHOD_NAME)(msg)

        super(LoggedException, self).__init__(msg)

    def location(self):
        """
        Return location where this exception was created, as '<path>:<line> in <function>',
        or None if it can not be determined.
        """
        frame = inspect.currentframe()
        try:
            # skip frames of methods of this exception instance (constructors of derived classes included)
            while frame is not None and frame.f_locals.get('self') is self:
                frame = frame.f_back
            if frame is None:
                return None
            path, lineno, func_name = frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name
        finally:
            del frame

        path_parts = path.split(os.path.sep)
        top_idxs = [idx for idx, part in enumerate(path_parts) if part in self.LOC_INFO_TOP_PKG_NAMES]
        if top_idxs:
            path = os.path.join(*path_parts[top_idxs[-1]:])

        return "%s:%s in %s" % (path, lineno, func_name)
