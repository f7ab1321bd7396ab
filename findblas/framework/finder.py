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
The BLAS finder: determines the BLAS configuration, by probing vendor profiles in order of priority.
"""
from collections import namedtuple

from findblas.base import fancylogger
from findblas.tools.build_log import FindBlasError, FindBlasExit, print_msg
from findblas.tools.cache import FILEPATH, PATH, ProbeCache, is_true
from findblas.tools.config import DEFAULT_CACHE_FILE, build_option
from findblas.tools.export import LIST_SEP, OUTPUT_VARIABLES, value_to_str
from findblas.tools.probe import check_fortran_libraries
from findblas.tools.systemtools import get_os_type
from findblas.tools.vendor import get_vendor_profiles
from findblas.vendors.openblas import OpenBLAS


# prefix for cache entries and compiler definitions
PREFIX = 'BLAS'

USE_FILE = 'UseBLAS'

MSG_FOUND = "A library with BLAS API found."
MSG_NOT_FOUND = "A library with BLAS API not found. Please specify library location."
MSG_REQUIRED_NOT_FOUND = "A required library with BLAS API not found. Please specify library location."

# where the configuration came from (next to the name of a vendor profile)
SOURCE_CACHE = 'cache'
SOURCE_OVERRIDE = 'override'
SOURCE_TAUCS = 'TAUCS'

BlasConfiguration = namedtuple('BlasConfiguration', ('found', 'include_dir', 'definitions', 'linker_flags',
                                                     'libraries', 'libraries_dir', 'use_file', 'source'))
BlasConfiguration.__doc__ = """A namedtuple that represents the final BLAS configuration:
- found: whether a library with BLAS API was found;
- include_dir: directory containing the BLAS header files (empty string if unknown);
- definitions: list of compiler definitions to use BLAS;
- linker_flags: list of linker flags to use BLAS;
- libraries: list of paths to BLAS libraries;
- libraries_dir: directory containing the BLAS libraries (empty string if unknown);
- use_file: name of file that downstream builds can include to use BLAS (None if BLAS was not found);
- source: where the configuration was obtained from (name of vendor profile, 'OpenBLAS', 'cache', ...);
"""


def split_list_value(value):
    """Split a (;-separated) list value obtained from the cache into a list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    elif is_true(value):
        return [x for x in str(value).split(LIST_SEP) if x]
    else:
        return []


def not_found_configuration():
    """Return configuration that represents that BLAS was not found."""
    return BlasConfiguration(False, '', [], [], [], '', None, None)


class BlasFinder(object):
    """Class that locates a library with BLAS API."""

    def __init__(self, cache=None, profiles=None, os_type=None, quiet=None, required=None, stderr=False):
        """
        Initialize the finder.

        :param cache: ProbeCache instance (loaded from location specified by 'cache_file' build option if None)
        :param profiles: list of vendor profiles to probe, in order (all known vendor profiles if None)
        :param os_type: platform to follow conventions for (current platform if None)
        :param quiet: do not report whether BLAS was found ('quiet' build option if None)
        :param required: not finding BLAS is an error ('required' build option if None)
        :param stderr: print messages to stderr rather than stdout
        """
        self.log = fancylogger.getLogger(self.__class__.__name__)

        if cache is None:
            cache = ProbeCache.load(build_option('cache_file', default=None) or DEFAULT_CACHE_FILE)
        self.cache = cache

        if build_option('fresh', default=False):
            self.log.info("Fresh run requested, clearing cache")
            self.cache.clear()

        if os_type is None:
            os_type = build_option('os_type', default=None) or get_os_type()
        self.os_type = os_type

        if profiles is None:
            profiles = get_vendor_profiles(os_type=self.os_type)
        self.profiles = profiles

        if quiet is None:
            quiet = build_option('quiet', default=False)
        self.quiet = quiet

        if required is None:
            required = build_option('required', default=False)
        self.required = required

        self.stderr = stderr

        # list of (profile, probe result) tuples, for the profiles that were probed
        self.attempts = []

    def configured(self):
        """
        Return the existing BLAS configuration (specified via the override options or obtained from the cache),
        or None if no BLAS libraries (directory) are known yet.
        """
        libraries = build_option('blas_libraries', default=None)
        libraries_dir = build_option('blas_libraries_dir', default=None)

        if libraries or libraries_dir:
            source = SOURCE_OVERRIDE
            self.log.info("BLAS libraries specified: %s (directory: %s)", libraries, libraries_dir)
            if libraries:
                self.cache.set('BLAS_LIBRARIES', LIST_SEP.join(libraries), typ=FILEPATH,
                               help="BLAS libraries name", force=True)
            if libraries_dir:
                self.cache.set('BLAS_LIBRARIES_DIR', libraries_dir, typ=PATH,
                               help="Directories containing the BLAS libraries", force=True)
        else:
            source = SOURCE_CACHE

        libraries = split_list_value(self.cache.get('BLAS_LIBRARIES'))
        libraries_dir = self.cache.get('BLAS_LIBRARIES_DIR')
        if not is_true(libraries_dir):
            libraries_dir = ''

        if libraries or libraries_dir:
            include_dir = self.cache.get('BLAS_INCLUDE_DIR')
            return BlasConfiguration(
                found=True,
                include_dir=include_dir if is_true(include_dir) else '',
                definitions=split_list_value(self.cache.get('BLAS_DEFINITIONS')),
                linker_flags=split_list_value(self.cache.get('BLAS_LINKER_FLAGS')),
                libraries=libraries,
                libraries_dir=libraries_dir,
                use_file=USE_FILE,
                source=source,
            )
        else:
            return None

    def probe(self, profile):
        """Probe specified vendor profile, and record the attempt."""
        self.log.info("Probing BLAS vendor profile '%s' (libraries: %s)", profile.name, ';'.join(profile.libraries))

        res = check_fortran_libraries(self.cache, PREFIX, profile.symbol, profile.flags, profile.libraries,
                                      profile.paths, os_type=self.os_type)
        self.attempts.append((profile, res))

        return res

    def search(self):
        """
        Search for a library with BLAS API:
        use the BLAS library bundled with TAUCS when possible, probe all vendor profiles otherwise
        (stop at first usable one), and fall back to looking for OpenBLAS.
        """
        self.attempts = []

        taucs_include_dir = build_option('taucs_include_dir', default=None)
        taucs_libraries_dir = build_option('taucs_libraries_dir', default=None)
        if build_option('auto_link', default=False) and taucs_include_dir and taucs_libraries_dir:
            self.log.info("Using BLAS library bundled with TAUCS in %s", taucs_libraries_dir)
            return BlasConfiguration(True, taucs_include_dir, [], [], [], taucs_libraries_dir, USE_FILE, SOURCE_TAUCS)

        for profile in self.profiles:
            res = self.probe(profile)
            if res.found:
                self.log.info("Usable BLAS vendor profile found: %s", profile.name)
                return BlasConfiguration(True, '', res.definitions, res.linker_flags, res.libraries, '',
                                         USE_FILE, profile.name)

        self.log.info("None of the BLAS vendor profiles is usable, looking for OpenBLAS")
        openblas = OpenBLAS(self.cache, os_type=self.os_type).find()
        if openblas.found:
            return BlasConfiguration(True, openblas.include_dir, [], [], [openblas.library], '', USE_FILE,
                                     OpenBLAS.NAME)

        return not_found_configuration()

    def cache_configuration(self, config):
        """Record configuration in the cache (existing values are overwritten)."""
        for name, attr, typ, help_txt in OUTPUT_VARIABLES:
            if attr in ('found', 'use_file'):
                if config.found:
                    self.cache.set(name, getattr(config, attr), typ=typ, help=help_txt, force=True)
                else:
                    self.cache.remove(name)
            else:
                self.cache.set(name, value_to_str(getattr(config, attr)), typ=typ, help=help_txt, force=True)

    def report(self, config):
        """
        Report whether BLAS was found; raises FindBlasError when BLAS is required but not found.
        In quiet mode, the outcome is only logged (no error is raised either).
        """
        if config.found:
            print_msg(MSG_FOUND, log=self.log, silent=self.quiet, stderr=self.stderr)
        elif self.quiet:
            self.log.info(MSG_NOT_FOUND)
        elif self.required:
            raise FindBlasError(MSG_REQUIRED_NOT_FOUND, exit_code=FindBlasExit.MISSING_BLAS)
        else:
            print_msg(MSG_NOT_FOUND, log=self.log, silent=self.quiet, stderr=self.stderr)

    def find(self):
        """
        Determine BLAS configuration.

        When the BLAS libraries (or their directory) are already known, no search is performed.
        The cache is saved afterwards (if it has a location).

        :return: BlasConfiguration instance
        """
        config = self.configured()
        if config is None:
            config = self.search()
            self.cache_configuration(config)
            self.save_cache()
            self.report(config)
        else:
            self.log.info("BLAS is already configured (%s), not searching: %s", config.source, config)
            self.cache_configuration(config)
            self.save_cache()

        return config

    def save_cache(self):
        """Save cache, if it has a location."""
        if self.cache.path:
            self.cache.save()
