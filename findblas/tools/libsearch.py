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
Locating libraries and header files on disk, following the conventions of the
platform that findblas is running on.
"""
import os

from findblas.base import fancylogger
from findblas.tools.cache import FILEPATH, PATH, is_true, notfound_value
from findblas.tools.config import build_option
from findblas.tools.options import env_path_list
from findblas.tools.systemtools import DARWIN, WINDOWS, get_multiarch_dir, get_os_type
from findblas.tools.utilities import nub


_log = fancylogger.getLogger('libsearch')


# candidate file names for a library base name, in order of preference
LIBRARY_FILE_PATTERNS = {
    DARWIN: ['lib%s.dylib', 'lib%s.tbd', 'lib%s.so', 'lib%s.a'],
    WINDOWS: ['%s.lib', 'lib%s.lib', '%s.dll.a'],
}
DEFAULT_LIBRARY_FILE_PATTERNS = ['lib%s.so', 'lib%s.a']

# environment variable that lists additional library directories
LIBRARY_PATH_ENV_VARS = {
    DARWIN: 'DYLD_LIBRARY_PATH',
    WINDOWS: 'LIB',
}
DEFAULT_LIBRARY_PATH_ENV_VAR = 'LD_LIBRARY_PATH'

SYSTEM_LIB_DIRS = ['/usr/local/lib', '/usr/lib', '/usr/local/lib64', '/usr/lib64']
SYSTEM_FRAMEWORK_DIRS = ['/Library/Frameworks', '/System/Library/Frameworks']
SYSTEM_INCLUDE_DIRS = ['/usr/local/include', '/usr/include']

FRAMEWORK_SUFFIX = '.framework'


def _os_type(os_type):
    """Return specified OS type, or the one of the current system."""
    if os_type is None:
        os_type = build_option('os_type', default=None) or get_os_type()
    return os_type


def library_file_names(name, os_type=None):
    """
    Return list of candidate file names for library with given base name, e.g. 'blas' -> libblas.so, libblas.a
    """
    os_type = _os_type(os_type)
    patterns = LIBRARY_FILE_PATTERNS.get(os_type, DEFAULT_LIBRARY_FILE_PATTERNS)

    res = []
    # a name that already is a file name (e.g. libblas.so.3) is tried as is first
    suffixes = tuple(pattern.split('%s', 1)[1] for pattern in patterns)
    if name.endswith(suffixes) or '.so.' in name:
        res.append(name)

    res.extend(pattern % name for pattern in patterns)
    return res


def library_path_env_var(os_type=None):
    """Return name of environment variable that lists library directories on the specified platform."""
    return LIBRARY_PATH_ENV_VARS.get(_os_type(os_type), DEFAULT_LIBRARY_PATH_ENV_VAR)


def system_search_paths(os_type=None, blas_dir=None, system_paths=None):
    """
    Return list of directories that are searched after the hint paths, in order:
    the lib subdirectory of the BLAS installation prefix, the platform-conventional library directories,
    and the directories listed in the platform-specific environment variable.

    :param os_type: platform to determine search paths for (current platform if None)
    :param blas_dir: installation prefix of BLAS ('blas_dir' build option if None)
    :param system_paths: include platform-conventional library directories ('system_paths' build option if None)
    """
    os_type = _os_type(os_type)
    if blas_dir is None:
        blas_dir = build_option('blas_dir', default=None)
    if system_paths is None:
        system_paths = build_option('system_paths', default=True)

    paths = []
    if blas_dir:
        paths.append(os.path.join(blas_dir, 'lib'))

    if os_type == WINDOWS:
        if blas_dir:
            paths.append(blas_dir)
    elif system_paths:
        if os_type != DARWIN:
            paths.append(os.path.join(os.path.expanduser('~'), '.linuxbrew', 'lib'))
        paths.extend(SYSTEM_LIB_DIRS)
        if os_type != DARWIN:
            multiarch_dir = get_multiarch_dir()
            if multiarch_dir:
                paths.append(multiarch_dir)

    paths.extend(env_path_list(library_path_env_var(os_type), os_type=os_type))

    res = nub(paths)

    _log.debug("System search paths for %s: %s", os_type, res)
    return res


def framework_search_paths(os_type=None, system_paths=None):
    """Return list of system directories in which frameworks are searched (only on macOS)."""
    if system_paths is None:
        system_paths = build_option('system_paths', default=True)

    if _os_type(os_type) == DARWIN and system_paths:
        return SYSTEM_FRAMEWORK_DIRS[:]
    else:
        return []


def search_file(file_names, paths):
    """
    Search for first existing file with one of the specified names in the given list of directories.

    All file names are tried in a directory before moving on to the next directory.

    :return: path to file that was found, or None
    """
    for path in paths:
        for file_name in file_names:
            cand = os.path.join(path, file_name)
            if os.path.isfile(cand):
                _log.debug("Found %s in %s", file_name, path)
                return cand

    return None


def _search_library(name, paths, os_type):
    """Search for library with given base name in specified directories."""
    file_names = library_file_names(name, os_type=os_type)

    for path in paths:
        if os_type == DARWIN:
            framework = os.path.join(path, name + FRAMEWORK_SUFFIX)
            if os.path.isdir(framework):
                return framework

        lib = search_file(file_names, [path])
        if lib:
            return lib

    return None


def find_library(cache, var, names, paths, os_type=None):
    """
    Find a library, and record the result in the cache.

    A value that was found before (as recorded in the cache) is used as is, without searching again;
    a cached value that indicates an unsuccessful lookup triggers a new search.

    :param cache: ProbeCache instance
    :param var: name of the cache entry that holds the location of the library
    :param names: (list of) library base name(s), in order of preference
    :param paths: list of directories to search in
    :param os_type: platform to follow conventions for (current platform if None)
    :return: path to the library, or None if it was not found
    """
    value = cache.get(var)
    if is_true(value):
        _log.debug("Using cached location for %s: %s", var, value)
        return value

    if isinstance(names, str):
        names = [names]
    os_type = _os_type(os_type)

    res = None
    for name in names:
        res = _search_library(name, paths, os_type)
        if res:
            break

    if res:
        _log.info("Library %s found: %s", '/'.join(names), res)
        cache.set(var, res, typ=FILEPATH, help="Path to a library.", force=True)
    else:
        _log.debug("Library %s not found in %s", '/'.join(names), paths)
        cache.set(var, notfound_value(var), typ=FILEPATH, help="Path to a library.", force=True)
    cache.mark_as_advanced(var)

    return res


def locate_library(cache, var, name, hints, os_type=None):
    """
    Locate library with given base name: first in the hint directories, then in the system search paths
    (see system_search_paths) and, on macOS, the system framework directories.

    :return: path to the library, or None if it was not found
    """
    res = find_library(cache, var, name, hints, os_type=os_type)
    if res is None:
        paths = system_search_paths(os_type=os_type) + framework_search_paths(os_type=os_type)
        res = find_library(cache, var, name, paths, os_type=os_type)

    return res


def find_path(cache, var, file_names, paths):
    """
    Find directory that contains one of specified files (e.g. a header file), and record it in the cache.

    Same caching semantics as find_library.

    :return: directory containing the file, or None if it was not found
    """
    value = cache.get(var)
    if is_true(value):
        _log.debug("Using cached location for %s: %s", var, value)
        return value

    if isinstance(file_names, str):
        file_names = [file_names]

    res = search_file(file_names, paths)
    if res:
        res = os.path.dirname(res)
        _log.info("Found %s in %s", '/'.join(file_names), res)
        cache.set(var, res, typ=PATH, help="Path to a file.", force=True)
    else:
        _log.debug("%s not found in %s", '/'.join(file_names), paths)
        cache.set(var, notfound_value(var), typ=PATH, help="Path to a file.", force=True)
    cache.mark_as_advanced(var)

    return res
