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
Support for ATLAS as BLAS library.
"""
from findblas.tools.vendor import BlasVendor


class ATLAS(BlasVendor):
    """
    Trivial class, provides ATLAS support.
    """
    NAME = 'ATLAS'
    PRIORITY = 10
    # ATLAS provides the C interface to BLAS on top of the Fortran one
    SYMBOL = 'cblas_dgemm'
    LIBRARIES = ['cblas', 'f77blas', 'atlas']
