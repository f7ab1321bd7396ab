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
Module with useful functions for getting system information
"""
import platform

from findblas.base import fancylogger


_log = fancylogger.getLogger('systemtools')


LINUX = 'Linux'
DARWIN = 'Darwin'
WINDOWS = 'Windows'


class SystemToolsException(Exception):
    """raised when systemtools fails"""


def get_os_type():
    """Determine system type, e.g., 'Linux', 'Darwin', 'Windows'."""
    os_type = platform.system()
    if len(os_type) > 0:
        return os_type
    else:
        raise SystemToolsException("Failed to determine system name using platform.system().")


def get_multiarch_dir():
    """
    Determine the Debian-style multiarch library directory, e.g. /usr/lib/x86_64-linux-gnu

    :return: path to multiarch directory, or None if the machine type could not be determined
    """
    machine = platform.machine()
    if machine:
        return '/usr/lib/%s-linux-gnu' % machine
    else:
        _log.warning("Failed to determine machine type, not considering multiarch library directory")
        return None
