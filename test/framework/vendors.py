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
Unit tests for BLAS vendor profiles.
"""
import os
import sys
from test.framework.utilities import EnhancedTestCase, TestLoaderFiltered
from unittest import TestSuite, TextTestRunner

from findblas.tools.cache import ProbeCache
from findblas.tools.config import update_build_option
from findblas.tools.filetools import write_file
from findblas.tools.systemtools import DARWIN, LINUX, WINDOWS
from findblas.tools.vendor import BlasVendor, VendorProfile, avail_vendors, get_vendor_profiles
from findblas.vendors.atlas import ATLAS
from findblas.vendors.generic import GenericBLAS
from findblas.vendors.intelmkl import IntelMKL
from findblas.vendors.openblas import OpenBLAS, OpenBLASResult


EXPECTED_PROFILES = [
    ('ATLAS', 'cblas_dgemm', [], ['cblas', 'f77blas', 'atlas']),
    ('PhiPACK', 'sgemm', [], ['sgemm', 'dgemm', 'blas']),
    ('Alpha CXML', 'sgemm', [], ['cxml']),
    ('Alpha DXML', 'sgemm', [], ['dxml']),
    ('Sun Performance', 'sgemm', ['-xlic_lib=sunperf'], ['sunperf', 'sunmath']),
    ('SGI/Cray SCSL', 'sgemm', [], ['scsl']),
    ('SGIMATH', 'sgemm', [], ['complib.sgimath']),
    ('IBM ESSL', 'sgemm', [], ['essl', 'blas']),
    ('Intel MKL 10', 'sgemm', [], ['mkl_intel', 'mkl_intel_thread', 'mkl_core', 'iomp5', 'pthread']),
    ('Intel MKL 10 64bit', 'sgemm', [], ['mkl_intel_lp64', 'mkl_intel_thread_lp64', 'mkl_core', 'iomp5', 'pthread']),
    ('Intel MKL (shared, old)', 'sgemm', [], ['mkl', 'guide', 'pthread']),
    ('Intel MKL (ia32, old)', 'sgemm', [], ['mkl_ia32', 'guide', 'pthread']),
    ('Intel MKL (ipf, old)', 'sgemm', [], ['mkl_ipf', 'guide', 'pthread']),
    ('Intel MKL (em64t, old)', 'sgemm', [], ['mkl_em64t', 'guide', 'pthread']),
    ('AMD ACML', 'sgemm', [], ['acml']),
    ('Apple Accelerate', 'sgemm', [], ['Accelerate']),
    ('Apple vecLib', 'sgemm', [], ['vecLib']),
    ('Generic BLAS', 'sgemm', [], ['blas']),
]


class VendorTest(EnhancedTestCase):
    """Tests for BLAS vendor profiles."""

    def test_avail_vendors(self):
        """Test avail_vendors function."""
        vendors = avail_vendors()
        self.assertEqual(vendors[0], ATLAS)
        self.assertEqual(vendors[-1], GenericBLAS)
        self.assertTrue(IntelMKL in vendors)
        # abstract base class and OpenBLAS (which is handled separately) are not included
        self.assertFalse(BlasVendor in vendors)
        self.assertFalse(OpenBLAS in vendors)

        prios = [v.PRIORITY for v in vendors]
        self.assertEqual(prios, sorted(prios))

    def test_vendor_profiles(self):
        """Test list of vendor profiles, in order of priority."""
        profiles = get_vendor_profiles()
        self.assertEqual([(p.name, p.symbol, p.flags, p.libraries) for p in profiles], EXPECTED_PROFILES)
        for profile in profiles:
            self.assertTrue(isinstance(profile, VendorProfile))
            self.assertEqual(profile.paths, [])

    def test_vendor_profiles_hints(self):
        """Test search hints of vendor profiles."""
        profiles = get_vendor_profiles(blas_lib_dir=['/opt/blas/lib', '/opt/lib'], mkl_lib_dir='/opt/mkl/lib')
        for profile in profiles:
            if profile.name.startswith('Intel MKL'):
                self.assertEqual(profile.paths, ['/opt/mkl/lib', '/opt/blas/lib', '/opt/lib'])
            else:
                self.assertEqual(profile.paths, ['/opt/blas/lib', '/opt/lib'])

        # hints are picked up from build options if they are not specified
        update_build_option('blas_lib_dir', ['/opt/blas/lib'])
        update_build_option('mkl_lib_dir', ['/opt/blas/lib', '/opt/mkl/lib'])
        profiles = get_vendor_profiles()
        mkl10 = [p for p in profiles if p.name == 'Intel MKL 10'][0]
        self.assertEqual(mkl10.paths, ['/opt/blas/lib', '/opt/mkl/lib'])
        self.assertEqual(profiles[0].paths, ['/opt/blas/lib'])

    def test_intel_mkl_windows(self):
        """Test Intel MKL profiles on Windows."""
        profiles = IntelMKL(os_type=WINDOWS).profiles({})
        self.assertEqual([p.name for p in profiles[:2]], ['Intel MKL 10', 'Intel MKL 10 64bit'])
        self.assertEqual(profiles[0].symbol, 'SGEMM')
        self.assertEqual(profiles[0].libraries, ['mkl_intel_c', 'mkl_intel_thread', 'mkl_core', 'libiomp5md'])
        self.assertEqual(profiles[1].libraries, ['mkl_intel_lp64', 'mkl_intel_thread_lp64', 'mkl_core', 'libiomp5md'])
        # older releases are the same on all platforms
        self.assertEqual(profiles[2:], IntelMKL(os_type=LINUX).profiles({})[2:])
        self.assertEqual(profiles[2].symbol, 'sgemm')

        profiles = get_vendor_profiles(os_type=DARWIN)
        self.assertEqual([(p.name, p.symbol, p.flags, p.libraries) for p in profiles], EXPECTED_PROFILES)

    def test_custom_vendor(self):
        """Test defining a custom vendor class."""
        class TestBLAS(BlasVendor):
            """Test BLAS vendor."""
            NAME = 'Test BLAS'
            PRIORITY = 15
            SYMBOL = 'dgemm'
            FLAGS = ['-ltestblas_extra']
            LIBRARIES = ['testblas']

        try:
            profiles = get_vendor_profiles(blas_lib_dir='/opt/testblas/lib')
            expected = VendorProfile('Test BLAS', 'dgemm', ['-ltestblas_extra'], ['testblas'], ['/opt/testblas/lib'])
            self.assertEqual(profiles[1], expected)
        finally:
            # classes without a name are considered to be abstract
            TestBLAS.NAME = None

        self.assertFalse(TestBLAS in avail_vendors())


class OpenBLASTest(EnhancedTestCase):
    """Tests for OpenBLAS lookup."""

    def test_search_paths(self):
        """Test directories in which OpenBLAS is searched for."""
        cache = ProbeCache()
        openblas = OpenBLAS(cache)
        self.assertEqual(openblas.include_dirs(), [])
        self.assertEqual(openblas.lib_dirs(), [])

        os.environ['LD_LIBRARY_PATH'] = '/opt/lib'
        openblas = OpenBLAS(cache, home='/opt/OpenBLAS/0.3.21')
        self.assertEqual(openblas.include_dirs(), ['/opt/OpenBLAS/0.3.21/include', '/opt/OpenBLAS/0.3.21'])
        self.assertEqual(openblas.lib_dirs(), ['/opt/OpenBLAS/0.3.21/lib', '/opt/OpenBLAS/0.3.21', '/opt/lib'])

        # installation prefix is taken from build options, conventional locations are used if system paths are enabled
        update_build_option('openblas_home', '/opt/openblas')
        update_build_option('system_paths', True)
        openblas = OpenBLAS(cache)
        include_dirs = openblas.include_dirs()
        self.assertEqual(include_dirs[:2], ['/opt/openblas/include', '/opt/openblas'])
        self.assertTrue('/usr/include/openblas' in include_dirs)
        lib_dirs = openblas.lib_dirs()
        self.assertEqual(lib_dirs[:2], ['/opt/openblas/lib', '/opt/openblas'])
        self.assertTrue('/usr/lib/openblas-base' in lib_dirs)
        self.assertEqual(lib_dirs[-1], '/opt/lib')

    def test_find(self):
        """Test finding OpenBLAS."""
        cache = ProbeCache()
        home = os.path.join(self.test_prefix, 'OpenBLAS')

        self.assertEqual(OpenBLAS(cache, home=home).find(), OpenBLASResult(False, None, None))
        self.assertEqual(cache.get('OpenBLAS_INCLUDE_DIR'), 'OpenBLAS_INCLUDE_DIR-NOTFOUND')
        self.assertEqual(cache.get('OpenBLAS_LIB'), 'OpenBLAS_LIB-NOTFOUND')

        # both header file and library are required
        libopenblas = self.mock_libs(os.path.join(home, 'lib'), {'openblas': ['sgemm_']})['openblas']
        self.assertEqual(OpenBLAS(cache, home=home).find(), OpenBLASResult(False, None, None))
        self.assertEqual(cache.get('OpenBLAS_LIB'), libopenblas)

        write_file(os.path.join(home, 'include', 'cblas.h'), '')
        res = OpenBLAS(cache, home=home).find()
        self.assertEqual(res, OpenBLASResult(True, os.path.join(home, 'include'), libopenblas))


def suite():
    """ returns all the testcases in this module """
    loader = TestLoaderFiltered()
    suites = [
        loader.loadTestsFromTestCase(VendorTest, sys.argv[1:]),
        loader.loadTestsFromTestCase(OpenBLASTest, sys.argv[1:]),
    ]
    return TestSuite(suites)


if __name__ == '__main__':
    res = TextTestRunner(verbosity=1).run(suite())
    sys.exit(len(res.failures))
