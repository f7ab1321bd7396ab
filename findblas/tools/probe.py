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
Probing of a single vendor profile: locate its libraries, and check whether the BLAS routine
can be linked using either the Fortran calling convention (trailing underscore) or the C one.
"""
from collections import namedtuple

from findblas.base import fancylogger
from findblas.tools.compiler import check_function_exists
from findblas.tools.libsearch import locate_library


_log = fancylogger.getLogger('probe')


F2C_LIBRARY = 'f2c'
F2C_CACHE_VAR = 'F2C_LIBRARY'

ProbeResult = namedtuple('ProbeResult', ('found', 'libraries', 'definitions', 'linker_flags'))
ProbeResult.__doc__ = """A namedtuple that represents the result of probing a vendor profile:
- found: whether the profile is usable;
- libraries: list of paths to the libraries (empty list if profile is not usable);
- definitions: list of compiler definitions required to use the libraries;
- linker_flags: list of extra linker flags required to use the libraries;
"""


def failed_probe():
    """Return result of unsuccessful probe."""
    return ProbeResult(False, [], [], [])


def find_f2c(cache, paths, os_type=None):
    """
    Locate the f2c library, which may be required when calling Fortran routines from C.

    :return: list with path to f2c library, or empty list if it is not available
    """
    f2c = locate_library(cache, F2C_CACHE_VAR, F2C_LIBRARY, paths, os_type=os_type)
    if f2c:
        _log.debug("f2c library found: %s", f2c)
        return [f2c]
    else:
        return []


def check_fortran_libraries(cache, prefix, symbol, flags, libraries, paths, os_type=None):
    """
    Check whether the specified combination of libraries provides the given routine.

    All libraries are located first (in the given directories first, then in the system search paths);
    if one of them can not be found, the libraries listed after it are not looked for.
    Next, a link check is done for the routine using the Fortran naming convention (trailing underscore),
    and for the plain C name only if that failed.

    :param cache: ProbeCache instance in which results of library lookups and link checks are recorded
    :param prefix: prefix for names of cache entries and compiler definitions (e.g. 'BLAS')
    :param symbol: name of routine to check for (e.g. 'sgemm')
    :param flags: list of extra linker flags
    :param libraries: ordered list of library base names
    :param paths: list of directories to search in first
    :param os_type: platform to follow conventions for (current platform if None)
    :return: ProbeResult instance
    """
    found_libs = []
    combined_name = ''
    for lib in libraries:
        combined_name += '_' + lib
        var = '%s_%s_LIBRARY' % (prefix, lib)
        path = locate_library(cache, var, lib, paths, os_type=os_type)
        if path is None:
            _log.info("Library %s not found, giving up on %s", lib, ';'.join(libraries))
            return failed_probe()
        found_libs.append(path)

    _log.debug("All libraries found for %s: %s", ';'.join(libraries), found_libs)

    # Fortran calling convention (via f2c)
    definitions = ['-D%s_USE_F2C' % prefix]
    f2c_libs = find_f2c(cache, paths, os_type=os_type)
    var = '%s_%s_%s_f2c_WORKS' % (prefix, symbol, combined_name)
    if check_function_exists(cache, var, symbol + '_', found_libs + f2c_libs, definitions=definitions, flags=flags):
        _log.info("%s can be linked from %s using Fortran calling convention", symbol, found_libs)
        return ProbeResult(True, found_libs + f2c_libs, definitions, list(flags))

    # C calling convention
    var = '%s_%s%s_WORKS' % (prefix, symbol, combined_name)
    if check_function_exists(cache, var, symbol, found_libs, flags=flags):
        _log.info("%s can be linked from %s using C calling convention", symbol, found_libs)
        return ProbeResult(True, found_libs, [], list(flags))

    _log.info("%s can not be linked from %s, profile is not usable", symbol, found_libs)
    return failed_probe()
