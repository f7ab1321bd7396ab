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
File and directory helpers, which raise a FindBlasError when something goes wrong.
"""
import os
import shutil

from findblas.base import fancylogger
from findblas.tools.build_log import FindBlasError
from findblas.tools.config import ERROR, IGNORE, WARN


_log = fancylogger.getLogger('filetools')


def read_file(path, log_error=True, mode='r'):
    """
    Return contents of file at given path.

    :param log_error: raise FindBlasError if file can not be read (return None otherwise)
    :param mode: mode to open file with ('rb' to obtain bytes)
    """
    try:
        with open(path, mode) as handle:
            return handle.read()
    except OSError as err:
        if log_error:
            raise FindBlasError("Failed to read %s: %s", path, err)
        return None


def write_file(path, data, append=False):
    """
    Write data (str or bytes) to file at given path, creating its parent directory if needed.
    Existing file contents are overwritten, unless append is True.
    """
    mode = 'a' if append else 'w'
    if isinstance(data, bytes):
        mode += 'b'

    try:
        dirpath = os.path.dirname(path)
        if dirpath:
            mkdir(dirpath, parents=True)
        with open(path, mode) as handle:
            handle.write(data)
    except OSError as err:
        raise FindBlasError("Failed to write to %s: %s", path, err)


def remove_file(path):
    """Remove file at specified path (which may be a broken symlink), if it exists."""
    if os.path.exists(path) or os.path.islink(path):
        try:
            os.remove(path)
        except OSError as err:
            raise FindBlasError("Failed to remove file %s: %s", path, err)


def remove_dir(path):
    """Remove directory at specified path (including its contents), if it exists."""
    if os.path.exists(path):
        try:
            shutil.rmtree(path)
        except OSError as err:
            raise FindBlasError("Failed to remove directory %s: %s", path, err)
        _log.debug("Removed directory %s", path)


def which(cmd, on_error=WARN):
    """
    Return path to specified command (looked up in $PATH unless a path is specified), or None if it is not found.

    :param on_error: what to do if command is not found: IGNORE, WARN (default) or ERROR
    """
    if on_error not in (IGNORE, WARN, ERROR):
        raise FindBlasError("Invalid value for 'on_error': %s", on_error)

    res = shutil.which(cmd)
    if res:
        _log.debug("Command %s found at %s", cmd, res)
    elif on_error != IGNORE:
        msg = "Could not find command '%s' (with permissions to execute it) in $PATH" % cmd
        if on_error == WARN:
            _log.warning(msg)
        else:
            raise FindBlasError(msg)

    return res


def mkdir(path, parents=False):
    """
    Create directory at specified path, unless it already exists.

    :param parents: also create parent directories (like 'mkdir -p')
    """
    path = os.path.abspath(path)
    if os.path.isdir(path):
        return

    _log.debug("Creating directory %s (parents: %s)", path, parents)
    try:
        if parents:
            os.makedirs(path, exist_ok=True)
        else:
            os.mkdir(path)
    except OSError as err:
        raise FindBlasError("Failed to create directory %s: %s", path, err)
