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
Support for OpenBLAS, which is looked for separately when none of the vendor profiles is usable.
"""
import os
from collections import namedtuple

from findblas.base import fancylogger
from findblas.tools.config import build_option
from findblas.tools.libsearch import find_library, find_path, system_search_paths
from findblas.tools.utilities import nub


OpenBLASResult = namedtuple('OpenBLASResult', ('found', 'include_dir', 'library'))


class OpenBLAS(object):
    """
    Lookup of an OpenBLAS installation: the cblas.h header file and the openblas library.
    """
    NAME = 'OpenBLAS'

    HEADER = 'cblas.h'
    LIBRARY = 'openblas'

    INCLUDE_CACHE_VAR = 'OpenBLAS_INCLUDE_DIR'
    LIBRARY_CACHE_VAR = 'OpenBLAS_LIB'

    # conventional locations of OpenBLAS installations
    SYSTEM_INCLUDE_DIRS = [
        '/usr/include',
        '/usr/include/openblas',
        '/usr/include/openblas-base',
        '/usr/local/include',
        '/usr/local/include/openblas',
        '/usr/local/include/openblas-base',
        '/opt/OpenBLAS/include',
    ]
    SYSTEM_LIB_DIRS = [
        '/lib',
        '/lib/openblas-base',
        '/lib64',
        '/usr/lib',
        '/usr/lib/openblas-base',
        '/usr/lib64',
        '/usr/local/lib',
        '/usr/local/lib64',
        '/opt/OpenBLAS/lib',
    ]

    def __init__(self, cache, home=None, os_type=None):
        """
        Constructor.

        :param cache: ProbeCache instance, in which lookup results are recorded
        :param home: installation prefix of OpenBLAS ('openblas_home' build option if None)
        :param os_type: platform to follow conventions for (current platform if None)
        """
        self.log = fancylogger.getLogger(self.__class__.__name__)
        self.cache = cache
        if home is None:
            home = build_option('openblas_home', default=None)
        self.home = home
        self.os_type = os_type

    def include_dirs(self):
        """Return list of directories to search for the OpenBLAS header file."""
        paths = []
        if self.home:
            paths.extend([os.path.join(self.home, 'include'), self.home])
        if build_option('system_paths', default=True):
            paths.extend(self.SYSTEM_INCLUDE_DIRS)
        return nub(paths)

    def lib_dirs(self):
        """Return list of directories to search for the OpenBLAS library."""
        paths = []
        if self.home:
            paths.extend([os.path.join(self.home, 'lib'), self.home])
        if build_option('system_paths', default=True):
            paths.extend(self.SYSTEM_LIB_DIRS)
        paths.extend(system_search_paths(os_type=self.os_type))
        return nub(paths)

    def find(self):
        """
        Look for OpenBLAS; it is only considered to be found if both header file and library are found.

        :return: OpenBLASResult instance
        """
        include_dir = find_path(self.cache, self.INCLUDE_CACHE_VAR, self.HEADER, self.include_dirs())
        library = find_library(self.cache, self.LIBRARY_CACHE_VAR, self.LIBRARY, self.lib_dirs(),
                               os_type=self.os_type)

        if include_dir and library:
            self.log.info("Found OpenBLAS: include dir %s, library %s", include_dir, library)
            return OpenBLASResult(True, include_dir, library)
        else:
            if not include_dir:
                self.log.info("Could not find OpenBLAS include dir (%s not found)", self.HEADER)
            if not library:
                self.log.info("Could not find OpenBLAS library")
            return OpenBLASResult(False, None, None)
