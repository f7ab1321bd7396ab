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
Support for the Apple frameworks that provide BLAS (macOS).
"""
from findblas.tools.vendor import BlasVendor


class Accelerate(BlasVendor):
    """Apple Accelerate framework."""
    NAME = 'Apple Accelerate'
    PRIORITY = 100
    LIBRARIES = ['Accelerate']


class VecLib(BlasVendor):
    """Apple vecLib framework, part of Accelerate on recent macOS versions."""
    NAME = 'Apple vecLib'
    PRIORITY = 101
    LIBRARIES = ['vecLib']
