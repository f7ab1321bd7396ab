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
Export of the final BLAS configuration, in a format that can be consumed by a downstream build.
"""
import json

from findblas.base import fancylogger
from findblas.tools.build_log import FindBlasError, FindBlasExit
from findblas.tools.cache import FILEPATH, INTERNAL, PATH, STRING
from findblas.tools.config import OUTPUT_FORMAT_CMAKE, OUTPUT_FORMAT_JSON, OUTPUT_FORMAT_SHELL
from findblas.tools.config import OUTPUT_FORMAT_SUMMARY
from findblas.tools.filetools import write_file
from findblas.tools.output import print_configuration
from findblas.tools.utilities import cmake_quote, shell_quote


_log = fancylogger.getLogger('export')


# separator for list values, as used in CMake
LIST_SEP = ';'

# exported variables: (name, attribute of configuration, cache type, help)
OUTPUT_VARIABLES = [
    ('BLAS_FOUND', 'found', INTERNAL, ""),
    ('BLAS_INCLUDE_DIR', 'include_dir', PATH, "Directories containing the BLAS header files"),
    ('BLAS_DEFINITIONS', 'definitions', STRING, "Compilation options to use BLAS"),
    ('BLAS_LINKER_FLAGS', 'linker_flags', STRING, "Linker flags to use BLAS"),
    ('BLAS_LIBRARIES', 'libraries', FILEPATH, "BLAS libraries name"),
    ('BLAS_LIBRARIES_DIR', 'libraries_dir', PATH, "Directories containing the BLAS libraries"),
    ('BLAS_USE_FILE', 'use_file', INTERNAL, "Name of file to include to use BLAS"),
]


def value_to_str(value, list_sep=LIST_SEP):
    """Convert value of configuration variable to a string."""
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    elif isinstance(value, (list, tuple)):
        return list_sep.join(value)
    elif value is None:
        return ''
    else:
        return str(value)


def configuration_variables(config, list_sep=LIST_SEP):
    """
    Return ordered list of (name, value) tuples for the given BLAS configuration, with string values.

    :param config: BlasConfiguration instance
    :param list_sep: separator to use for list values
    """
    return [(name, value_to_str(getattr(config, attr), list_sep=list_sep)) for name, attr, _, _ in OUTPUT_VARIABLES]


def format_summary(config):
    """Format configuration as plain text, one 'NAME = value' line per variable."""
    variables = configuration_variables(config)
    width = max(len(name) for name, _ in variables)
    return '\n'.join("{0:<{width}} = {1}".format(name, value, width=width) for name, value in variables) + '\n'


def format_json(config):
    """Format configuration as a JSON object (list values as JSON lists, found flag as JSON boolean)."""
    data = {}
    for name, attr, _, _ in OUTPUT_VARIABLES:
        value = getattr(config, attr)
        if isinstance(value, tuple):
            value = list(value)
        data[name] = value

    return json.dumps(data, indent=4, sort_keys=True) + '\n'


def format_shell(config):
    """Format configuration as shell statements that export environment variables."""
    # definitions and linker flags are space-separated, so they can be passed to a compiler command as is
    lines = []
    for name, attr, _, _ in OUTPUT_VARIABLES:
        list_sep = LIST_SEP if attr == 'libraries' else ' '
        lines.append('export %s=%s' % (name, shell_quote(value_to_str(getattr(config, attr), list_sep=list_sep))))
    return '\n'.join(lines) + '\n'


def format_cmake(config):
    """Format configuration as CMake statements, which can be used as an initial CMake cache (cmake -C)."""
    lines = []
    for name, attr, typ, help_txt in OUTPUT_VARIABLES:
        # found flag and usage file are only defined when BLAS was found
        if attr in ('found', 'use_file') and not config.found:
            continue
        value = value_to_str(getattr(config, attr))
        lines.append('set(%s %s CACHE %s %s FORCE)' % (name, cmake_quote(value), typ, cmake_quote(help_txt)))
    return '\n'.join(lines) + '\n'


FORMATTERS = {
    OUTPUT_FORMAT_CMAKE: format_cmake,
    OUTPUT_FORMAT_JSON: format_json,
    OUTPUT_FORMAT_SHELL: format_shell,
    OUTPUT_FORMAT_SUMMARY: format_summary,
}


def format_configuration(config, output_format):
    """Format configuration in specified output format."""
    if output_format in FORMATTERS:
        return FORMATTERS[output_format](config)
    else:
        raise FindBlasError("Unknown output format '%s', should be one of: %s",
                            output_format, ', '.join(sorted(FORMATTERS)), exit_code=FindBlasExit.VALUE_ERROR)


def export_configuration(config, output_format=OUTPUT_FORMAT_SUMMARY, output_file=None):
    """
    Export configuration in specified format, to specified file or to stdout.

    The summary format is printed as a table when no output file is specified.
    """
    if output_file:
        write_file(output_file, format_configuration(config, output_format))
        _log.info("BLAS configuration written to %s (format: %s)", output_file, output_format)
    elif output_format == OUTPUT_FORMAT_SUMMARY:
        print_configuration(configuration_variables(config))
    else:
        print(format_configuration(config, output_format), end='')
