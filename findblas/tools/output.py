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
Tools for controlling output to terminal produced by findblas.
"""
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from findblas.tools.config import OUTPUT_STYLE_RICH, get_output_style


def use_rich():
    """
    Return whether or not to use Rich to produce rich output.
    """
    return get_output_style() == OUTPUT_STYLE_RICH


def print_probe_summary(attempts):
    """
    Print overview of the vendor profiles that were probed.

    :param attempts: list of (profile, result) tuples, in the order in which the profiles were probed;
                     result is a ProbeResult
    """
    title = "Probed BLAS vendor profiles"

    if use_rich():
        table = Table(title=title)
        table.add_column('vendor')
        table.add_column('libraries')
        table.add_column('result')
        for profile, result in attempts:
            if result.found:
                info = ':white_heavy_check_mark:  [green]%s' % escape(', '.join(result.libraries))
            else:
                info = ':cross_mark:  [red]not found'
            table.add_row(profile.name, ';'.join(profile.libraries), info)

        console = Console()
        console.print('')
        console.print(table)
    else:
        lines = [
            '',
            title + ':',
            '-' * (len(title) + 1),
            '',
        ]
        for profile, result in attempts:
            if result.found:
                info = '(%s)' % ', '.join(result.libraries)
            else:
                info = '(NOT FOUND)'
            lines.append(("* %s [%s]" % (profile.name, ';'.join(profile.libraries))).ljust(60) + info)
        lines.append('')
        print('\n'.join(lines))


def print_configuration(variables, title="BLAS configuration"):
    """
    Print the final configuration as a table.

    :param variables: list of (name, value) tuples
    """
    if use_rich():
        table = Table(title=title)
        table.add_column('variable')
        table.add_column('value')
        for name, value in variables:
            table.add_row(name, escape(value))

        console = Console()
        console.print(table)
    else:
        width = max([len(name) for name, _ in variables] + [0])
        lines = ["{0:<{width}} = {1}".format(name, value, width=width) for name, value in variables]
        print('\n'.join(lines))
