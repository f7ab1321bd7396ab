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
Support for Intel MKL as BLAS library.

Both the Intel MKL 10.x library layout and the layout of older releases are supported.
"""
from findblas.tools.systemtools import WINDOWS
from findblas.tools.vendor import HINT_BLAS_LIB_DIR, HINT_MKL_LIB_DIR, BlasVendor


class IntelMKL(BlasVendor):
    """Support for Intel MKL."""

    NAME = 'Intel MKL'
    PRIORITY = 80
    SEARCH_HINTS = [HINT_MKL_LIB_DIR, HINT_BLAS_LIB_DIR]

    # Intel MKL 10.x, static, 32bit and ia64/em64t 64bit
    MKL10_LIBS = [
        ('10', ['mkl_intel', 'mkl_intel_thread', 'mkl_core', 'iomp5', 'pthread']),
        ('10 64bit', ['mkl_intel_lp64', 'mkl_intel_thread_lp64', 'mkl_core', 'iomp5', 'pthread']),
    ]
    # Windows libraries use a different naming scheme, and uppercase symbol names
    MKL10_LIBS_WINDOWS = [
        ('10', ['mkl_intel_c', 'mkl_intel_thread', 'mkl_core', 'libiomp5md']),
        ('10 64bit', ['mkl_intel_lp64', 'mkl_intel_thread_lp64', 'mkl_core', 'libiomp5md']),
    ]
    MKL10_SYMBOL_WINDOWS = 'SGEMM'

    # older Intel MKL releases: shared, static 32bit, static ia64, static em64t
    OLD_MKL_LIBS = [
        ('shared', ['mkl', 'guide', 'pthread']),
        ('ia32', ['mkl_ia32', 'guide', 'pthread']),
        ('ipf', ['mkl_ipf', 'guide', 'pthread']),
        ('em64t', ['mkl_em64t', 'guide', 'pthread']),
    ]

    def variants(self):
        """Return profiles for Intel MKL 10.x (platform-specific) followed by those for older releases."""
        if self.os_type == WINDOWS:
            mkl10_libs, mkl10_symbol = self.MKL10_LIBS_WINDOWS, self.MKL10_SYMBOL_WINDOWS
        else:
            mkl10_libs, mkl10_symbol = self.MKL10_LIBS, self.SYMBOL

        res = [('%s %s' % (self.NAME, label), mkl10_symbol, libs) for label, libs in mkl10_libs]
        res.extend(('%s (%s, old)' % (self.NAME, label), self.SYMBOL, libs) for label, libs in self.OLD_MKL_LIBS)

        return res
