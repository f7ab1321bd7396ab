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
findblas configuration (paths, preferences, etc.)
"""
import sys
from abc import ABCMeta

from humanfriendly.terminal import terminal_supports_colors

from findblas.base import fancylogger
from findblas.base.frozendict import FrozenDictKnownKeys
from findblas.tools.build_log import FindBlasError, FindBlasExit


_log = fancylogger.getLogger('config')


ERROR = 'error'
IGNORE = 'ignore'
WARN = 'warn'


DEFAULT_CACHE_FILE = 'findblas_cache.json'

OUTPUT_FORMAT_SUMMARY = 'summary'
OUTPUT_FORMAT_JSON = 'json'
OUTPUT_FORMAT_SHELL = 'shell'
OUTPUT_FORMAT_CMAKE = 'cmake'
OUTPUT_FORMATS = [OUTPUT_FORMAT_SUMMARY, OUTPUT_FORMAT_JSON, OUTPUT_FORMAT_SHELL, OUTPUT_FORMAT_CMAKE]

OUTPUT_STYLE_AUTO = 'auto'
OUTPUT_STYLE_BASIC = 'basic'
OUTPUT_STYLE_RICH = 'rich'
OUTPUT_STYLES = (OUTPUT_STYLE_AUTO, OUTPUT_STYLE_BASIC, OUTPUT_STYLE_RICH)

# build options that can be set via the command line, grouped by their default value
BUILD_OPTIONS_CMDLINE = {
    None: [
        'blas_dir',
        'blas_lib_dir',
        'blas_libraries',
        'blas_libraries_dir',
        'compiler',
        'mkl_lib_dir',
        'openblas_home',
        'output_file',
        'taucs_include_dir',
        'taucs_libraries_dir',
    ],
    False: [
        'auto_link',
        'fresh',
        'quiet',
        'required',
    ],
    True: [
        'system_paths',
    ],
    DEFAULT_CACHE_FILE: [
        'cache_file',
    ],
    OUTPUT_FORMAT_SUMMARY: [
        'output_format',
    ],
    OUTPUT_STYLE_AUTO: [
        'output_style',
    ],
}

# build options that can only be set programmatically
BUILD_OPTIONS_OTHER = {
    None: [
        'os_type',
    ],
}


class Singleton(ABCMeta):
    """Serves as metaclass for classes that should implement the Singleton pattern.

    See http://stackoverflow.com/questions/6760685/creating-a-singleton-in-python
    """
    _instances = {}

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


BaseBuildOptions = Singleton('BaseBuildOptions', (FrozenDictKnownKeys,), {})


class BuildOptions(BaseBuildOptions):
    """Representation of a set of build options, acts like a dictionary."""

    KNOWN_KEYS = [k for kss in [BUILD_OPTIONS_CMDLINE, BUILD_OPTIONS_OTHER] for ks in kss.values() for k in ks]


def init_build_options(build_options=None, cmdline_options=None):
    """Initialize build options."""

    active_build_options = {}

    if cmdline_options is not None:
        cmdline_build_option_names = [k for ks in BUILD_OPTIONS_CMDLINE.values() for k in ks]
        active_build_options.update({key: getattr(cmdline_options, key) for key in cmdline_build_option_names})

    if build_options is not None:
        active_build_options.update(build_options)

    # seed in defaults to make sure all build options are defined, and that build_option() doesn't fail on valid keys
    bo = {}
    for build_options_by_default in [BUILD_OPTIONS_CMDLINE, BUILD_OPTIONS_OTHER]:
        for default, options in build_options_by_default.items():
            bo.update(dict((opt, default) for opt in options))
    bo.update(active_build_options)

    # BuildOptions is a singleton, so any future calls to BuildOptions will yield the same instance
    return BuildOptions(bo)


def build_option(key, **kwargs):
    """Obtain value specified build option."""

    build_options = BuildOptions()
    if key in build_options:
        return build_options[key]
    elif 'default' in kwargs:
        return kwargs['default']
    else:
        error_msg = "Undefined build option: '%s'. " % key
        error_msg += "Make sure you have set up the findblas configuration using set_up_configuration() "
        error_msg += "(from findblas.tools.options) in case you're not using findblas via the 'findblas' CLI."
        raise FindBlasError(error_msg, exit_code=FindBlasExit.OPTION_ERROR)


def update_build_option(key, value):
    """
    Update build option with specified name to given value.

    WARNING: Use this with care, the build options are not expected to be changed during a findblas session!
    """
    # BuildOptions() is a (singleton) frozen dict, so the underlying dict is updated directly
    build_options = BuildOptions()
    orig_value = build_options._data[key]
    build_options._data[key] = value
    _log.warning("Build option '%s' was updated to: %s", key, build_option(key))

    # Return original value, so it can be restored later if needed
    return orig_value


def update_build_options(key_value_dict):
    """
    Update build options as specified by the given dictionary (where keys are assumed to be build option names).
    Returns dictionary with original values for the updated build options.
    """
    orig_key_value_dict = {}
    for key, value in key_value_dict.items():
        orig_key_value_dict[key] = update_build_option(key, value)

    return orig_key_value_dict


def get_output_style():
    """Return output style to use."""
    output_style = build_option('output_style', default=OUTPUT_STYLE_AUTO)

    if output_style == OUTPUT_STYLE_AUTO:
        if terminal_supports_colors(sys.stdout):
            output_style = OUTPUT_STYLE_RICH
        else:
            output_style = OUTPUT_STYLE_BASIC

    return output_style
