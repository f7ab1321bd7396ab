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
Unit tests for functionality in findblas.tools.output
"""
import sys
from test.framework.utilities import EnhancedTestCase, TestLoaderFiltered
from unittest import TextTestRunner

from findblas.tools.config import update_build_option
from findblas.tools.output import print_configuration, print_probe_summary, use_rich
from findblas.tools.probe import ProbeResult, failed_probe
from findblas.tools.vendor import VendorProfile


ATTEMPTS = [
    (VendorProfile('ATLAS', 'cblas_dgemm', [], ['cblas', 'f77blas', 'atlas'], []), failed_probe()),
    (VendorProfile('Generic BLAS', 'sgemm', [], ['blas'], []),
     ProbeResult(True, ['/usr/lib/libblas.so'], ['-DBLAS_USE_F2C'], [])),
]


class OutputTest(EnhancedTestCase):
    """Tests for functions controlling terminal output."""

    def test_use_rich(self):
        """Test use_rich function."""
        update_build_option('output_style', 'basic')
        self.assertFalse(use_rich())

        update_build_option('output_style', 'rich')
        self.assertTrue(use_rich())

        # stdout is not a terminal when it is mocked
        update_build_option('output_style', 'auto')
        with self.mocked_stdout_stderr():
            res = use_rich()
        self.assertFalse(res)

    def test_print_probe_summary(self):
        """Test print_probe_summary function."""
        update_build_option('output_style', 'basic')
        with self.mocked_stdout_stderr():
            print_probe_summary(ATTEMPTS)
            stdout = self.get_stdout()

        lines = stdout.split('\n')
        self.assertEqual(lines[1:3], ["Probed BLAS vendor profiles:", '-' * 28])
        self.assertEqual(lines[4], "* ATLAS [cblas;f77blas;atlas]".ljust(60) + "(NOT FOUND)")
        self.assertEqual(lines[5], "* Generic BLAS [blas]".ljust(60) + "(/usr/lib/libblas.so)")

        update_build_option('output_style', 'rich')
        with self.mocked_stdout_stderr():
            print_probe_summary(ATTEMPTS)
            stdout = self.get_stdout()

        for pattern in ["Probed BLAS vendor profiles", "ATLAS", "cblas;f77blas;atlas", "not found",
                        "/usr/lib/libblas.so"]:
            self.assertTrue(pattern in stdout, "Pattern '%s' found in: %s" % (pattern, stdout))

    def test_print_configuration(self):
        """Test print_configuration function."""
        variables = [('BLAS_FOUND', 'TRUE'), ('BLAS_LIBRARIES', '/usr/lib/libblas.so'), ('BLAS_USE_FILE', 'UseBLAS')]

        update_build_option('output_style', 'basic')
        with self.mocked_stdout_stderr():
            print_configuration(variables)
            stdout = self.get_stdout()

        expected = '\n'.join([
            "BLAS_FOUND     = TRUE",
            "BLAS_LIBRARIES = /usr/lib/libblas.so",
            "BLAS_USE_FILE  = UseBLAS",
        ]) + '\n'
        self.assertEqual(stdout, expected)

        update_build_option('output_style', 'rich')
        with self.mocked_stdout_stderr():
            print_configuration(variables + [('BLAS_DEFINITIONS', '[not markup]')])
            stdout = self.get_stdout()

        for pattern in ["BLAS configuration", "BLAS_LIBRARIES", "/usr/lib/libblas.so", "[not markup]"]:
            self.assertTrue(pattern in stdout, "Pattern '%s' found in: %s" % (pattern, stdout))


def suite():
    """ returns all the testcases in this module """
    return TestLoaderFiltered().loadTestsFromTestCase(OutputTest, sys.argv[1:])


if __name__ == '__main__':
    res = TextTestRunner(verbosity=1).run(suite())
    sys.exit(len(res.failures))
