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
Command line options for findblas
"""
import os
import sys

from findblas.base import fancylogger
from findblas.base.generaloption import GeneralOption
from findblas.tools.build_log import FindBlasError, FindBlasExit, init_logging, log_start, print_warning
from findblas.tools.config import DEFAULT_CACHE_FILE, OUTPUT_FORMAT_SUMMARY, OUTPUT_FORMATS
from findblas.tools.config import OUTPUT_STYLE_AUTO, OUTPUT_STYLES, BuildOptions, init_build_options
from findblas.tools.systemtools import WINDOWS, get_os_type
from findblas.tools.version import this_is_findblas


CONFIG_ENV_VAR_PREFIX = 'FINDBLAS'

XDG_CONFIG_HOME = os.environ.get('XDG_CONFIG_HOME', os.path.join(os.path.expanduser('~'), ".config"))
DEFAULT_USER_CFGFILE = os.path.join(XDG_CONFIG_HOME, 'findblas', 'config.cfg')

_log = fancylogger.getLogger('options')


def env_path_list(name, os_type=None):
    """
    Return list of paths specified in the environment variable with the given name (empty entries are dropped).

    :param os_type: platform that determines the path separator (';' on Windows), current platform if None
    """
    if os_type is None:
        sep = os.pathsep
    elif os_type == WINDOWS:
        sep = ';'
    else:
        sep = ':'
    return [path for path in os.environ.get(name, '').split(sep) if path]


class FindBlasOptions(GeneralOption):
    """findblas generaloption class"""
    VERSION = this_is_findblas()
    DEFAULT_LOGLEVEL = 'INFO'

    DEFAULT_CONFIGFILES = []
    if os.path.exists(DEFAULT_USER_CFGFILE):
        DEFAULT_CONFIGFILES.append(DEFAULT_USER_CFGFILE)

    def basic_options(self):
        """basic runtime options"""
        descr = ("Basic options", "Basic runtime options for findblas.")

        opts = {
            'cache-file': ("JSON file in which probe results and the final configuration are cached",
                           None, 'store', DEFAULT_CACHE_FILE, 'c'),
            'fresh': ("Ignore (and wipe) previously cached probe results", None, 'store_true', False, 'f'),
            'logfile': ("Log file to use (a temporary log file is used if not specified)", None, 'store', None),
            'logtostdout': ("Redirect main log to stdout", None, 'store_true', False, 'l'),
            'quiet': ("Do not report whether a library with BLAS API was found", None, 'store_true', False, 'q'),
            'required': ("Treat not finding a library with BLAS API as a fatal error",
                         None, 'store_true', False, 'r'),
        }

        self.log.debug("basic_options: descr %s opts %s", descr, opts)
        self.add_group_parser(opts, descr)

    def search_options(self):
        """options that control where BLAS libraries are searched for"""
        descr = ("Search options", "Locations in which BLAS libraries are searched for, and how they are checked.")

        opts = {
            'blas-dir': ("Custom prefix of a BLAS installation; <prefix>/lib and <prefix> are searched",
                         None, 'store', os.environ.get('BLAS_DIR') or None),
            'blas-lib-dir': ("Directories that are searched first for BLAS libraries",
                             'pathlist', 'store', env_path_list('BLAS_LIB_DIR')),
            'compiler': ("C compiler used for link checks (default: $CC, or 'cc')", None, 'store', None),
            'mkl-lib-dir': ("Directories that are searched first for Intel MKL libraries",
                            'pathlist', 'store', env_path_list('MKL_LIB_DIR')),
            'openblas-home': ("Installation prefix of OpenBLAS, used when no other BLAS library is found",
                              None, 'store', os.environ.get('OpenBLAS_HOME') or None),
            'system-paths': ("Search the platform-conventional library directories", None, 'store_true', True),
        }

        self.log.debug("search_options: descr %s opts %s", descr, opts)
        self.add_group_parser(opts, descr)

    def override_options(self):
        """options to bypass the search"""
        descr = ("Override options", "Provide the BLAS configuration directly, no search is performed.")

        opts = {
            'auto-link': ("Compiler supports auto-linking; use the BLAS library bundled with TAUCS",
                          None, 'store_true', False),
            'blas-libraries': ("BLAS libraries to use (full paths)", 'strlist', 'store', None),
            'blas-libraries-dir': ("Directory containing the BLAS libraries to use", None, 'store', None),
            'taucs-include-dir': ("Include directory of the TAUCS installation", None, 'store', None),
            'taucs-libraries-dir': ("Libraries directory of the TAUCS installation", None, 'store', None),
        }

        self.log.debug("override_options: descr %s opts %s", descr, opts)
        self.add_group_parser(opts, descr)

    def output_options(self):
        """options that control how the final configuration is reported"""
        descr = ("Output options", "Format and destination of the final BLAS configuration.")

        opts = {
            'output-file': ("Write the final configuration to the specified file", None, 'store', None, 'o'),
            'output-format': ("Format of the final configuration", 'choice', 'store', OUTPUT_FORMAT_SUMMARY,
                              OUTPUT_FORMATS),
            'output-style': ("Control output style; auto implies using Rich if it is available and "
                             "a terminal is attached", 'choice', 'store', OUTPUT_STYLE_AUTO, OUTPUT_STYLES),
        }

        self.log.debug("output_options: descr %s opts %s", descr, opts)
        self.add_group_parser(opts, descr)

    def validate(self):
        """Additional validation of options"""
        error_msgs = []

        taucs_dirs = [self.options.taucs_include_dir, self.options.taucs_libraries_dir]
        if self.options.auto_link and any(taucs_dirs) and not all(taucs_dirs):
            error_msgs.append("--auto-link requires both --taucs-include-dir and --taucs-libraries-dir")

        if not self.options.cache_file:
            error_msgs.append("--cache-file must not be empty")

        if error_msgs:
            raise FindBlasError("Found problems validating the options: %s", '\n'.join(error_msgs),
                                exit_code=FindBlasExit.OPTION_ERROR)


def parse_options(args=None):
    """wrapper function for option parsing"""
    if os.environ.get('DEBUG_FINDBLAS_OPTIONS', '0').lower() in ('1', 'true', 'yes', 'y'):
        # very early debug, to debug the generaloption itself
        fancylogger.logToScreen(enable=True)
        fancylogger.setLogLevel('DEBUG')

    if args is None:
        args = sys.argv[1:]

    usage = "%prog [options]"
    description = ("Locate a library with BLAS API, check that it links, and report the resulting configuration.")

    try:
        fb_go = FindBlasOptions(usage=usage, description=description, prog='findblas',
                                envvar_prefix=CONFIG_ENV_VAR_PREFIX, go_args=args)
    except FindBlasError as err:
        raise FindBlasError("Failed to parse configuration options: %s", err, exit_code=FindBlasExit.OPTION_ERROR)

    return fb_go


def set_up_configuration(args=None, logfile=None, testing=False, silent=False, reconfigure=False):
    """
    Set up findblas configuration, by parsing configuration settings & initialising build options.

    :param args: command line arguments to take into account when parsing the findblas configuration settings
    :param logfile: log file to use
    :param testing: enable testing mode
    :param silent: stay silent (no printing)
    :param reconfigure: reconfigure singletons that hold configuration dictionaries. Use with care: normally,
                        configuration shouldn't be changed during a run.
    """
    fb_go = parse_options(args=args)
    options = fb_go.options

    if logfile is None:
        logfile = options.logfile

    # only the summary format is meant to be read by humans, don't mix other output with log messages
    silent = testing or silent or options.quiet or options.output_format != OUTPUT_FORMAT_SUMMARY

    # initialise logging for main
    log, logfile = init_logging(logfile, logtostdout=options.logtostdout, silent=silent)

    # log startup info (must be done after setting up logger)
    log_start(log, ['findblas'] + list(sys.argv[1:] if args is None else args))

    # Remove existing singletons if reconfigure==True
    if reconfigure:
        BuildOptions.__class__._instances.clear()
    elif len(BuildOptions.__class__._instances) > 0:
        msg = '\n'.join([
            "set_up_configuration is about to call init_build_options().",
            "However, the singleton that this function normally initializes already exists.",
            "If you intended to reconfigure you should probably pass reconfigure=True to set_up_configuration()."
        ])
        print_warning(msg, log=log, silent=silent)

    build_options = {
        'os_type': get_os_type(),
    }
    init_build_options(build_options=build_options, cmdline_options=options)

    return fb_go, (log, logfile)
