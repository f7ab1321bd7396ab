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
Vendor profiles: combinations of libraries that are believed to jointly implement BLAS.

Each BLAS vendor is represented by a subclass of BlasVendor (see the findblas.vendors package),
which produces one or more vendor profiles. Profiles are probed in order of vendor priority.
"""
from collections import namedtuple

from findblas.base import fancylogger
from findblas.tools.config import build_option
from findblas.tools.systemtools import get_os_type
from findblas.tools.utilities import flatten, get_subclasses, import_available_modules, nub


_log = fancylogger.getLogger('vendor')


VendorProfile = namedtuple('VendorProfile', ('name', 'symbol', 'flags', 'libraries', 'paths'))
VendorProfile.__doc__ = """A namedtuple that represents a single combination of libraries to probe for BLAS:
- name: name of the vendor profile;
- symbol: name of the BLAS routine that is checked for;
- flags: list of extra linker flags;
- libraries: ordered list of library base names;
- paths: list of directories in which the libraries are searched first;
"""

# names of search hints, which correspond to build options
HINT_BLAS_LIB_DIR = 'blas_lib_dir'
HINT_MKL_LIB_DIR = 'mkl_lib_dir'
HINTS = [HINT_BLAS_LIB_DIR, HINT_MKL_LIB_DIR]

VENDORS_NAMESPACE = 'findblas.vendors'


class BlasVendor(object):
    """General BLAS vendor class, to be derived from for specific BLAS vendors."""

    # name of vendor, None for abstract classes
    NAME = None
    # vendors are probed in increasing order of priority value
    PRIORITY = None

    # BLAS routine to check for
    SYMBOL = 'sgemm'
    # extra linker flags
    FLAGS = []
    # list of library base names
    LIBRARIES = []
    # names of search hints, see HINTS
    SEARCH_HINTS = [HINT_BLAS_LIB_DIR]

    def __init__(self, os_type=None):
        """Vendor constructor."""
        self.log = fancylogger.getLogger(self.__class__.__name__)
        if os_type is None:
            os_type = build_option('os_type', default=None) or get_os_type()
        self.os_type = os_type

    def variants(self):
        """
        Return list of (name, symbol, libraries) tuples, one per profile of this vendor.
        """
        return [(self.NAME, self.SYMBOL, self.LIBRARIES)]

    def profiles(self, hints):
        """
        Return list of vendor profiles for this vendor.

        :param hints: dict with list of directories for each search hint
        """
        paths = nub(flatten(hints.get(hint) or [] for hint in self.SEARCH_HINTS))

        res = []
        for name, symbol, libraries in self.variants():
            res.append(VendorProfile(name, symbol, list(self.FLAGS), list(libraries), paths))

        self.log.debug("Profiles for BLAS vendor %s: %s", self.NAME, res)
        return res


def avail_vendors():
    """Return list of all available BLAS vendor classes, in order of priority."""
    import_available_modules(VENDORS_NAMESPACE)

    vendors = [klass for klass in get_subclasses(BlasVendor) if klass.NAME is not None]
    return sorted(vendors, key=lambda klass: (klass.PRIORITY, klass.NAME))


def get_vendor_profiles(os_type=None, blas_lib_dir=None, mkl_lib_dir=None):
    """
    Return list of vendor profiles to probe, in order of priority.

    :param os_type: platform to return profiles for (current platform if None)
    :param blas_lib_dir: list of directories to search in first for all vendors ('blas_lib_dir' build option if None)
    :param mkl_lib_dir: list of directories to search in first for Intel MKL ('mkl_lib_dir' build option if None)
    """
    hints = {
        HINT_BLAS_LIB_DIR: blas_lib_dir,
        HINT_MKL_LIB_DIR: mkl_lib_dir,
    }
    for hint in HINTS:
        if hints[hint] is None:
            hints[hint] = build_option(hint, default=None) or []
        elif isinstance(hints[hint], str):
            hints[hint] = [hints[hint]]

    profiles = []
    for vendor_class in avail_vendors():
        profiles.extend(vendor_class(os_type=os_type).profiles(hints))

    _log.info("Vendor profiles to probe: %s", [p.name for p in profiles])
    return profiles
